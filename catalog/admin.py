from django.contrib import admin
from catalog.models import Part


@admin.register(Part)
class PartAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'brand', 'category', 'store', 'base_price', 'stock', 'created_at']
    list_filter = ['category', 'brand']
    search_fields = ['code', 'name', 'brand', 'store__name']
    readonly_fields = ['created_at', 'updated_at']

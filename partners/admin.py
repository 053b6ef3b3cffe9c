from django.contrib import admin
from partners.models import Workshop, Store


@admin.register(Workshop)
class WorkshopAdmin(admin.ModelAdmin):
    list_display = ['name', 'tax_id', 'user', 'city', 'region', 'is_active', 'created_at']
    list_filter = ['region', 'is_active']
    search_fields = ['name', 'tax_id', 'user__email']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['name', 'tax_id', 'user', 'city', 'region', 'is_active', 'created_at']
    list_filter = ['region', 'is_active']
    search_fields = ['name', 'tax_id', 'user__email']
    readonly_fields = ['created_at', 'updated_at']

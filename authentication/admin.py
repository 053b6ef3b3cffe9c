from django.contrib import admin
from authentication.models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ['email', 'name', 'role', 'phone_number', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active']
    search_fields = ['email', 'name', 'phone_number']
    readonly_fields = ['date_joined', 'last_login']

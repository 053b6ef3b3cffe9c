from django.contrib import admin
from orders.models import Order, OrderStatusHistory


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    readonly_fields = ['previous_status', 'new_status', 'updated_by', 'actor_role', 'notes', 'timestamp']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'workshop', 'store', 'status', 'total', 'estimated_delivery_date', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['order_number', 'workshop__name', 'store__name']
    readonly_fields = ['order_number', 'total', 'delivered_at', 'created_at', 'updated_at']
    inlines = [OrderStatusHistoryInline]


@admin.register(OrderStatusHistory)
class OrderStatusHistoryAdmin(admin.ModelAdmin):
    list_display = ['order', 'previous_status', 'new_status', 'actor_role', 'updated_by', 'timestamp']
    list_filter = ['new_status', 'actor_role', 'timestamp']
    readonly_fields = ['timestamp']

from rest_framework import serializers

from orders.enums import OrderStatus
from orders.models import Order, OrderStatusHistory


class OrderSerializer(serializers.ModelSerializer):
    workshop_name = serializers.CharField(source='workshop.name', read_only=True)
    workshop_phone = serializers.CharField(source='workshop.phone_number', read_only=True)
    store_name = serializers.CharField(source='store.name', read_only=True)
    store_phone = serializers.CharField(source='store.phone_number', read_only=True)
    request_title = serializers.CharField(source='request.title', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'request', 'request_title', 'offer',
            'workshop', 'workshop_name', 'workshop_phone',
            'store', 'store_name', 'store_phone',
            'total', 'delivery_address', 'notes', 'status',
            'estimated_delivery_date', 'delivered_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """Serializer for creating an order from an offer"""
    offer_id = serializers.IntegerField()
    delivery_address = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderCancelSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    updated_by_name = serializers.CharField(source='updated_by.name', read_only=True, default=None)

    class Meta:
        model = OrderStatusHistory
        fields = [
            'id', 'previous_status', 'new_status', 'updated_by', 'updated_by_name',
            'actor_role', 'notes', 'timestamp'
        ]
        read_only_fields = fields

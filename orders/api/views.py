from rest_framework import status

from authentication.models import UserRole
from orders.api.serializers import (
    OrderCancelSerializer, OrderCreateSerializer, OrderSerializer,
    OrderStatusHistorySerializer, OrderStatusUpdateSerializer
)
from orders.enums import ActorRole
from orders.services import OrderCreationService, OrderQueryService, OrderStatusTrackingService
from partners.services import get_store_for_user, get_workshop_for_user
from project.exceptions import AuthorizationError
from project.permissions import IsMarketplaceUser, IsWorkshop
from project.utils import StandardizedAPIView


def resolve_actor(user):
    """(actor_id, actor_role) for the authenticated user: profile id for parties, user id for admins"""
    if user.role == UserRole.WORKSHOP:
        return get_workshop_for_user(user).pk, ActorRole.REQUESTER
    if user.role == UserRole.STORE:
        return get_store_for_user(user).pk, ActorRole.SUPPLIER
    return user.pk, ActorRole.ADMIN


def ensure_can_read(user, order):
    actor_id, actor_role = resolve_actor(user)
    if actor_role == ActorRole.REQUESTER and order.workshop_id != actor_id:
        raise AuthorizationError("You can only view your own orders")
    if actor_role == ActorRole.SUPPLIER and order.store_id != actor_id:
        raise AuthorizationError("You can only view your own orders")


# Order Creation
class OrderCreateView(StandardizedAPIView):
    """Workshop creates an order from an offer on its request"""
    permission_classes = [IsWorkshop]

    def post(self, request, *args, **kwargs):
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        data = serializer.validated_data
        workshop = get_workshop_for_user(request.user)
        order = OrderCreationService.create_order(
            workshop.pk, data['offer_id'], data['delivery_address'], data['notes']
        )
        return self.success_response(
            data=OrderSerializer(order).data,
            message=f"Order {order.order_number} created",
            status_code=status.HTTP_201_CREATED
        )


# Order Listing and Details
class OrderListView(StandardizedAPIView):
    """Orders the user is a party to (admin: all), optionally filtered by ?status="""
    permission_classes = [IsMarketplaceUser]

    def get(self, request, *args, **kwargs):
        actor_id, actor_role = resolve_actor(request.user)
        orders = OrderQueryService.list_orders(actor_id, actor_role, status=request.query_params.get('status'))
        return self.success_response(
            data=OrderSerializer(orders, many=True).data,
            message=f"Retrieved {len(orders)} items"
        )


class OrderDetailView(StandardizedAPIView):
    permission_classes = [IsMarketplaceUser]

    def get(self, request, pk, *args, **kwargs):
        order = OrderQueryService.get_order(pk)
        ensure_can_read(request.user, order)
        return self.success_response(data=OrderSerializer(order).data, message="Retrieved successfully")


# Order Management
class OrderStatusUpdateView(StandardizedAPIView):
    """Update order status using centralized OrderStatusTrackingService"""
    permission_classes = [IsMarketplaceUser]

    def post(self, request, order_id, *args, **kwargs):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        data = serializer.validated_data
        actor_id, actor_role = resolve_actor(request.user)
        order = OrderStatusTrackingService.update_order_status(
            order_id, actor_id, actor_role, data['status'], notes=data['notes']
        )
        return self.success_response(
            data=OrderSerializer(order).data,
            message=f"Order status updated to {order.status}"
        )


class OrderCancelView(StandardizedAPIView):
    permission_classes = [IsMarketplaceUser]

    def post(self, request, order_id, *args, **kwargs):
        serializer = OrderCancelSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        actor_id, actor_role = resolve_actor(request.user)
        order = OrderStatusTrackingService.cancel_order(
            order_id, actor_id, actor_role, notes=serializer.validated_data['notes']
        )
        return self.success_response(data=OrderSerializer(order).data, message="Order cancelled")


# Order Tracking
class OrderStatusHistoryView(StandardizedAPIView):
    permission_classes = [IsMarketplaceUser]

    def get(self, request, order_id, *args, **kwargs):
        ensure_can_read(request.user, OrderQueryService.get_order(order_id))
        history = OrderQueryService.get_status_history(order_id)
        return self.success_response(
            data=OrderStatusHistorySerializer(history, many=True).data,
            message=f"Retrieved {len(history)} items"
        )

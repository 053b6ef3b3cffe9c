"""
Order Management Services
Centralized business logic for order creation, status management, and lifecycle tracking.

Order states: PENDING -> CONFIRMED -> DELIVERED, and PENDING | CONFIRMED -> CANCELLED.
DELIVERED and CANCELLED are terminal. Who may make a transition depends on the
explicit actor role, not only on ownership.
"""
import logging
from datetime import timedelta
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from project import notifications
from project.exceptions import AuthorizationError, ConflictError, NotFound, ValidationError
from project.notifications import NotificationEvent
from quotations.models import Offer, QuotationRequest
from quotations.ranking import offer_total
from quotations.services import RequestLifecycleService
from .enums import ActorRole, OrderErrorMessages, OrderStatus
from .models import Order, OrderStatusHistory

logger = logging.getLogger(__name__)


def _order_queryset():
    return Order.objects.select_related('workshop', 'store', 'request', 'offer')


def get_order(order_id) -> Order:
    try:
        return _order_queryset().get(pk=order_id)
    except Order.DoesNotExist:
        raise NotFound(OrderErrorMessages.ORDER_NOT_FOUND)


def _validate_actor_role(actor_role):
    if actor_role not in ActorRole.values:
        raise ValidationError(f"Unknown actor role '{actor_role}'")


def _validate_status(status):
    if status not in OrderStatus.values:
        raise ValidationError(OrderErrorMessages.UNKNOWN_STATUS.format(status=status))


class OrderCreationService:
    """
    Centralized service for creating orders from accepted offers.
    Handles the request close and the initial OrderStatusHistory entry.
    """

    @staticmethod
    @transaction.atomic
    def create_order(requester_id, offer_id, delivery_address: str, notes: str = "") -> Order:
        """
        Create a PENDING order from an offer and close its request.

        Both writes share one transaction: if the request can no longer be
        closed the order insert is rolled back with it.

        Args:
            requester_id: Workshop accepting the offer
            offer_id: The accepted offer
            delivery_address: Where the parts go
            notes: Optional notes for the store

        Returns:
            The created Order

        Raises:
            NotFound: Unknown offer
            AuthorizationError: The offer's request belongs to another workshop
            ConflictError: An order already exists or the request is not open
        """
        if not (delivery_address or '').strip():
            raise ValidationError(
                OrderErrorMessages.MISSING_DELIVERY_ADDRESS,
                errors={'delivery_address': [OrderErrorMessages.MISSING_DELIVERY_ADDRESS]}
            )

        try:
            offer = Offer.objects.select_related('store').get(pk=offer_id)
        except Offer.DoesNotExist:
            raise NotFound(OrderErrorMessages.OFFER_NOT_FOUND)

        quotation_request = (
            QuotationRequest.objects.select_for_update().select_related('workshop').get(pk=offer.request_id)
        )

        OrderCreationService._validate_order_creation(quotation_request, requester_id)

        items = list(offer.items.all())
        now = timezone.now()
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    request=quotation_request,
                    offer=offer,
                    workshop=quotation_request.workshop,
                    store=offer.store,
                    total=offer_total(items),
                    delivery_address=delivery_address.strip(),
                    notes=notes or '',
                    status=OrderStatus.PENDING,
                    estimated_delivery_date=now + timedelta(days=offer.delivery_days),
                )
        except IntegrityError:
            logger.warning("Concurrent duplicate order for request %s", quotation_request.pk)
            raise ConflictError(OrderErrorMessages.ORDER_EXISTS)

        RequestLifecycleService.close_for_order(quotation_request.pk)

        OrderStatusTrackingService.create_status_entry(
            order=order,
            new_status=OrderStatus.PENDING,
            updated_by_id=quotation_request.workshop.user_id,
            actor_role=ActorRole.REQUESTER,
            notes=f"Order created from offer {offer.pk}",
        )

        logger.info(
            "Workshop %s created order %s from offer %s (request %s, total %s)",
            requester_id, order.pk, offer.pk, quotation_request.pk, order.total
        )
        notifications.notify_user(offer.store.user_id, NotificationEvent.ORDER_CREATED, {
            'order_id': order.pk,
            'order_number': order.order_number,
            'request_id': quotation_request.pk,
            'total': str(order.total),
        })
        return get_order(order.pk)

    @staticmethod
    def _validate_order_creation(quotation_request: QuotationRequest, requester_id) -> None:
        """Validate business rules for order creation."""
        if quotation_request.workshop_id != requester_id:
            logger.warning(
                "Workshop %s tried to order on request %s it does not own", requester_id, quotation_request.pk
            )
            raise AuthorizationError(OrderErrorMessages.NOT_YOUR_REQUEST)

        # Fast path only; the one-to-one constraint on Order.request is the guard
        if Order.objects.filter(request=quotation_request).exists():
            raise ConflictError(OrderErrorMessages.ORDER_EXISTS)

        if not quotation_request.is_open:
            raise ConflictError(OrderErrorMessages.REQUEST_NOT_OPEN)


class OrderStatusTrackingService:
    """
    Centralized service for managing order status transitions and automatic history tracking.
    """

    # Define valid status transitions
    VALID_TRANSITIONS = {
        OrderStatus.PENDING: [OrderStatus.CONFIRMED, OrderStatus.CANCELLED],
        OrderStatus.CONFIRMED: [OrderStatus.DELIVERED, OrderStatus.CANCELLED],
        OrderStatus.DELIVERED: [],  # Final state
        OrderStatus.CANCELLED: [],  # Final state
    }

    # Statuses each role may set, regardless of the current status
    ROLE_PERMISSIONS = {
        ActorRole.SUPPLIER: [OrderStatus.CONFIRMED, OrderStatus.CANCELLED],
        ActorRole.REQUESTER: [OrderStatus.DELIVERED, OrderStatus.CANCELLED],
        ActorRole.ADMIN: [OrderStatus.CONFIRMED, OrderStatus.DELIVERED, OrderStatus.CANCELLED],
    }

    CANCELLABLE_STATUSES = [OrderStatus.PENDING, OrderStatus.CONFIRMED]

    @staticmethod
    def _lock_order(order_id) -> Order:
        try:
            return Order.objects.select_for_update().select_related('workshop', 'store').get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound(OrderErrorMessages.ORDER_NOT_FOUND)

    @staticmethod
    def _actor_user_id(order: Order, actor_id, actor_role):
        """User behind the actor, after checking the actor is a party to the order."""
        if actor_role == ActorRole.REQUESTER:
            if order.workshop_id != actor_id:
                raise AuthorizationError(OrderErrorMessages.NOT_A_PARTY)
            return order.workshop.user_id
        if actor_role == ActorRole.SUPPLIER:
            if order.store_id != actor_id:
                raise AuthorizationError(OrderErrorMessages.NOT_A_PARTY)
            return order.store.user_id
        return actor_id

    @staticmethod
    def _validate_status_transition(order: Order, new_status, actor_role) -> None:
        """Role check first, so a forbidden role fails the same way from every status."""
        allowed_statuses = OrderStatusTrackingService.ROLE_PERMISSIONS.get(actor_role, [])
        if new_status not in allowed_statuses:
            logger.warning("Role %s tried to set order %s to %s", actor_role, order.pk, new_status)
            raise AuthorizationError(OrderErrorMessages.ROLE_CANNOT_SET.format(role=actor_role, status=new_status))

        valid_next_statuses = OrderStatusTrackingService.VALID_TRANSITIONS.get(order.status, [])
        if new_status not in valid_next_statuses:
            logger.warning("Rejected order %s transition %s -> %s", order.pk, order.status, new_status)
            raise ConflictError(OrderErrorMessages.INVALID_TRANSITION.format(current=order.status, new=new_status))

    @staticmethod
    @transaction.atomic
    def update_order_status(order_id, actor_id, actor_role, new_status, notes: str = "") -> Order:
        """
        Move an order to `new_status` on behalf of an actor.

        Supplier: PENDING -> CONFIRMED. Requester: CONFIRMED -> DELIVERED.
        Admin: any legal transition. CANCELLED is delegated to cancel_order.
        """
        _validate_actor_role(actor_role)
        _validate_status(new_status)
        if new_status == OrderStatus.CANCELLED:
            return OrderStatusTrackingService.cancel_order(order_id, actor_id, actor_role, notes=notes)

        order = OrderStatusTrackingService._lock_order(order_id)
        user_id = OrderStatusTrackingService._actor_user_id(order, actor_id, actor_role)
        OrderStatusTrackingService._validate_status_transition(order, new_status, actor_role)

        previous_status = order.status
        fields = {'status': new_status, 'updated_at': timezone.now()}
        if new_status == OrderStatus.DELIVERED:
            fields['delivered_at'] = fields['updated_at']

        updated = Order.objects.filter(pk=order.pk, status=previous_status).update(**fields)
        if not updated:
            raise ConflictError(
                OrderErrorMessages.INVALID_TRANSITION.format(current=previous_status, new=new_status)
            )

        OrderStatusTrackingService.create_status_entry(
            order=order,
            previous_status=previous_status,
            new_status=new_status,
            updated_by_id=user_id,
            actor_role=actor_role,
            notes=notes,
        )
        logger.info("Order %s moved %s -> %s by %s %s", order.pk, previous_status, new_status, actor_role, actor_id)
        OrderStatusTrackingService._notify_parties(order, actor_role, previous_status, new_status)
        return get_order(order.pk)

    @staticmethod
    @transaction.atomic
    def cancel_order(order_id, actor_id, actor_role, notes: str = "") -> Order:
        """Cancel a PENDING or CONFIRMED order. Either party or an admin may cancel."""
        _validate_actor_role(actor_role)
        order = OrderStatusTrackingService._lock_order(order_id)
        user_id = OrderStatusTrackingService._actor_user_id(order, actor_id, actor_role)

        previous_status = order.status
        if previous_status not in OrderStatusTrackingService.CANCELLABLE_STATUSES:
            logger.warning("Rejected cancel of order %s in status %s", order.pk, previous_status)
            raise ConflictError(OrderErrorMessages.CANNOT_CANCEL.format(status=previous_status))

        updated = Order.objects.filter(
            pk=order.pk, status__in=OrderStatusTrackingService.CANCELLABLE_STATUSES
        ).update(status=OrderStatus.CANCELLED, updated_at=timezone.now())
        if not updated:
            raise ConflictError(OrderErrorMessages.CANNOT_CANCEL.format(status=previous_status))

        OrderStatusTrackingService.create_status_entry(
            order=order,
            previous_status=previous_status,
            new_status=OrderStatus.CANCELLED,
            updated_by_id=user_id,
            actor_role=actor_role,
            notes=notes,
        )
        logger.info("Order %s cancelled by %s %s", order.pk, actor_role, actor_id)
        OrderStatusTrackingService._notify_parties(order, actor_role, previous_status, OrderStatus.CANCELLED)
        return get_order(order.pk)

    @staticmethod
    def create_status_entry(
        order: Order,
        new_status: str,
        updated_by_id,
        actor_role: str,
        previous_status: str = "",
        notes: str = "",
    ) -> OrderStatusHistory:
        """
        Create an OrderStatusHistory entry.

        This is the centralized method for ALL status history creation.
        """
        return OrderStatusHistory.objects.create(
            order=order,
            previous_status=previous_status,
            new_status=new_status,
            updated_by_id=updated_by_id,
            actor_role=actor_role,
            notes=notes or f"Status updated to {new_status}",
        )

    @staticmethod
    def _notify_parties(order: Order, actor_role, previous_status, new_status) -> None:
        """Tell the counterparty; an admin change is sent to both parties."""
        if actor_role == ActorRole.REQUESTER:
            recipients = [order.store.user_id]
        elif actor_role == ActorRole.SUPPLIER:
            recipients = [order.workshop.user_id]
        else:
            recipients = [order.workshop.user_id, order.store.user_id]

        payload = {
            'order_id': order.pk,
            'order_number': order.order_number,
            'previous_status': previous_status,
            'status': new_status,
        }
        for user_id in recipients:
            notifications.notify_user(user_id, NotificationEvent.ORDER_UPDATED, payload)


class OrderQueryService:
    """Read side of the order lifecycle."""

    @staticmethod
    def list_orders(actor_id, actor_role, status: Optional[str] = None) -> List[Order]:
        """Orders the actor is a party to (admin: every order), newest first."""
        _validate_actor_role(actor_role)
        queryset = _order_queryset()
        if actor_role == ActorRole.REQUESTER:
            queryset = queryset.filter(workshop_id=actor_id)
        elif actor_role == ActorRole.SUPPLIER:
            queryset = queryset.filter(store_id=actor_id)

        if status:
            _validate_status(status)
            queryset = queryset.filter(status=status)
        return list(queryset.order_by('-created_at', '-id'))

    @staticmethod
    def get_order(order_id) -> Order:
        return get_order(order_id)

    @staticmethod
    def get_status_history(order_id) -> List[OrderStatusHistory]:
        if not Order.objects.filter(pk=order_id).exists():
            raise NotFound(OrderErrorMessages.ORDER_NOT_FOUND)
        return list(OrderStatusHistory.objects.filter(order_id=order_id).select_related('updated_by'))

"""
Business logic services for quotation requests and offers.
Centralizes the request state machine and offer submission rules.

Request states: OPEN (initial) -> CLOSED | CANCELLED (terminal). Every state
change is a conditional UPDATE on the current status, so two concurrent
transitions can never both succeed.
"""
import logging
from typing import Dict, List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, ProtectedError
from django.utils import timezone

from authentication.models import UserRole
from partners.models import Workshop
from project import notifications
from project.exceptions import AuthorizationError, ConflictError, NotFound
from project.notifications import NotificationEvent
from .enums import ErrorMessages, RequestStatus
from .matching import get_store
from .models import Offer, OfferItem, QuotationRequest, QuotationRequestItem
from .queries import RequestQuery
from .validators import OfferValidator, QuotationRequestValidator

logger = logging.getLogger(__name__)


def get_workshop(workshop_id) -> Workshop:
    try:
        return Workshop.objects.get(pk=workshop_id)
    except Workshop.DoesNotExist:
        raise NotFound(ErrorMessages.WORKSHOP_NOT_FOUND)


def _request_queryset():
    return (
        QuotationRequest.objects
        .select_related('workshop')
        .prefetch_related('items')
        .annotate(offers_count=Count('offers'))
    )


class RequestLifecycleService:
    """State machine and ownership rules for quotation requests"""

    @staticmethod
    def get_request(request_id) -> QuotationRequest:
        try:
            return _request_queryset().get(pk=request_id)
        except QuotationRequest.DoesNotExist:
            raise NotFound(ErrorMessages.REQUEST_NOT_FOUND)

    @staticmethod
    def list_requests(workshop_id=None, query: Optional[RequestQuery] = None) -> List[QuotationRequest]:
        """A workshop's own requests, or every request when workshop_id is None (admin)."""
        query = query or RequestQuery()
        queryset = _request_queryset()
        if workshop_id is not None:
            queryset = queryset.filter(workshop_id=workshop_id)
        return list(query.apply(queryset))

    @staticmethod
    def _get_owned_request(request_id, workshop_id, for_update=False) -> QuotationRequest:
        queryset = QuotationRequest.objects.select_for_update() if for_update else QuotationRequest.objects
        try:
            quotation_request = queryset.get(pk=request_id)
        except QuotationRequest.DoesNotExist:
            raise NotFound(ErrorMessages.REQUEST_NOT_FOUND)

        if quotation_request.workshop_id != workshop_id:
            logger.warning("Workshop %s tried to modify request %s it does not own", workshop_id, request_id)
            raise AuthorizationError(ErrorMessages.NOT_YOUR_REQUEST)
        return quotation_request

    @staticmethod
    def _transition(request_id, to_status, **fields) -> None:
        """Move an OPEN request to `to_status`; ConflictError when it is no longer open."""
        updated = QuotationRequest.objects.filter(
            pk=request_id, status=RequestStatus.OPEN
        ).update(status=to_status, updated_at=timezone.now(), **fields)
        if not updated:
            raise ConflictError(ErrorMessages.REQUEST_NOT_OPEN)

    @staticmethod
    @transaction.atomic
    def create_request(workshop_id, request_data: Dict) -> QuotationRequest:
        """
        Create an OPEN request with its items and announce it to every store.

        Args:
            workshop_id: The requesting workshop
            request_data: title, description, category, vehicle_* fields and items

        Returns:
            The created QuotationRequest
        """
        QuotationRequestValidator.validate_create(request_data)
        workshop = get_workshop(workshop_id)

        quotation_request = QuotationRequest.objects.create(
            workshop=workshop,
            title=request_data['title'].strip(),
            description=request_data.get('description') or '',
            category=request_data['category'],
            vehicle_make=request_data['vehicle_make'],
            vehicle_model=request_data['vehicle_model'],
            vehicle_year=int(request_data['vehicle_year']),
            vehicle_plate=request_data.get('vehicle_plate') or '',
            status=RequestStatus.OPEN,
        )
        QuotationRequestItem.objects.bulk_create([
            QuotationRequestItem(
                request=quotation_request,
                code=item.get('code') or '',
                name=item['name'].strip(),
                description=item.get('description') or '',
                brand=item.get('brand') or '',
                image_key=item.get('image_key') or '',
                quantity=item['quantity'],
            )
            for item in request_data['items']
        ])

        logger.info(
            "Workshop %s created quotation request %s (%s, %d items)",
            workshop.pk, quotation_request.pk, quotation_request.category, len(request_data['items'])
        )
        notifications.notify_role(UserRole.STORE, NotificationEvent.REQUEST_CREATED, {
            'request_id': quotation_request.pk,
            'title': quotation_request.title,
            'category': quotation_request.category,
            'region': workshop.region,
        })
        return RequestLifecycleService.get_request(quotation_request.pk)

    @staticmethod
    @transaction.atomic
    def update_request(request_id, workshop_id, fields: Dict) -> QuotationRequest:
        """Edit title, description or vehicle fields of an OPEN request. Items are fixed."""
        QuotationRequestValidator.validate_update(fields)
        quotation_request = RequestLifecycleService._get_owned_request(request_id, workshop_id, for_update=True)
        if not quotation_request.is_open:
            raise ConflictError(ErrorMessages.REQUEST_NOT_OPEN)

        for field, value in fields.items():
            setattr(quotation_request, field, value)
        quotation_request.save(update_fields=[*fields.keys(), 'updated_at'])

        logger.info("Workshop %s updated quotation request %s: %s", workshop_id, request_id, sorted(fields))
        return RequestLifecycleService.get_request(request_id)

    @staticmethod
    @transaction.atomic
    def close_request(request_id, workshop_id) -> QuotationRequest:
        """Explicitly close an OPEN request."""
        RequestLifecycleService._get_owned_request(request_id, workshop_id, for_update=True)
        RequestLifecycleService._transition(request_id, RequestStatus.CLOSED, closed_at=timezone.now())
        logger.info("Workshop %s closed quotation request %s", workshop_id, request_id)
        return RequestLifecycleService.get_request(request_id)

    @staticmethod
    def close_for_order(request_id) -> None:
        """
        Close the request an order was just created for.

        Must run inside the order's transaction; a ConflictError here rolls the
        order back with it.
        """
        RequestLifecycleService._transition(request_id, RequestStatus.CLOSED, closed_at=timezone.now())
        logger.info("Quotation request %s closed by order creation", request_id)

    @staticmethod
    @transaction.atomic
    def cancel_request(request_id, workshop_id) -> QuotationRequest:
        """Cancel an OPEN request that has no order."""
        quotation_request = RequestLifecycleService._get_owned_request(request_id, workshop_id, for_update=True)

        # Checked even though an order implies CLOSED: the two writes may race
        if QuotationRequest.objects.filter(pk=quotation_request.pk, order__isnull=False).exists():
            raise ConflictError(ErrorMessages.REQUEST_HAS_ORDER)

        RequestLifecycleService._transition(request_id, RequestStatus.CANCELLED)
        logger.info("Workshop %s cancelled quotation request %s", workshop_id, request_id)
        return RequestLifecycleService.get_request(request_id)

    @staticmethod
    @transaction.atomic
    def delete_request(request_id, workshop_id) -> None:
        """Delete a request that has received no offers."""
        quotation_request = RequestLifecycleService._get_owned_request(request_id, workshop_id, for_update=True)
        if quotation_request.offers.exists():
            raise ConflictError(ErrorMessages.REQUEST_HAS_OFFERS)

        try:
            with transaction.atomic():
                quotation_request.delete()
        except ProtectedError:
            raise ConflictError(ErrorMessages.REQUEST_HAS_OFFERS)
        logger.info("Workshop %s deleted quotation request %s", workshop_id, request_id)


class OfferService:
    """Service class for offer submission and lookup"""

    @staticmethod
    def _offer_queryset():
        return Offer.objects.select_related('store', 'request').prefetch_related('items')

    @staticmethod
    def get_offer(offer_id) -> Offer:
        try:
            return OfferService._offer_queryset().get(pk=offer_id)
        except Offer.DoesNotExist:
            raise NotFound(ErrorMessages.OFFER_NOT_FOUND)

    @staticmethod
    def list_for_request(request_id) -> List[Offer]:
        if not QuotationRequest.objects.filter(pk=request_id).exists():
            raise NotFound(ErrorMessages.REQUEST_NOT_FOUND)
        return list(OfferService._offer_queryset().filter(request_id=request_id).order_by('-created_at', '-id'))

    @staticmethod
    def list_for_store(store_id) -> List[Offer]:
        store = get_store(store_id)
        return list(OfferService._offer_queryset().filter(store=store).order_by('-created_at', '-id'))

    @staticmethod
    @transaction.atomic
    def create_offer(store_id, request_id, offer_data: Dict) -> Offer:
        """
        Submit a store's offer for an OPEN request.

        At most one offer per (request, store): the existence check is a fast
        path, the unique constraint is the guard. Both fail with the same
        ConflictError.
        """
        OfferValidator.validate_create(offer_data)
        store = get_store(store_id)
        try:
            quotation_request = QuotationRequest.objects.select_for_update().get(pk=request_id)
        except QuotationRequest.DoesNotExist:
            raise NotFound(ErrorMessages.REQUEST_NOT_FOUND)

        if not quotation_request.is_open:
            raise ConflictError(ErrorMessages.REQUEST_NOT_OPEN)

        if Offer.objects.filter(request=quotation_request, store=store).exists():
            raise ConflictError(ErrorMessages.DUPLICATE_OFFER)

        request_items = {item.pk: item for item in quotation_request.items.all()}
        OfferValidator.validate_request_items(offer_data, request_items.keys())

        delivery_days = offer_data.get('delivery_days')
        try:
            with transaction.atomic():
                offer = Offer.objects.create(
                    request=quotation_request,
                    store=store,
                    delivery_days=settings.DEFAULT_DELIVERY_DAYS if delivery_days is None else delivery_days,
                    comments=offer_data.get('comments') or '',
                )
        except IntegrityError:
            logger.warning("Concurrent duplicate offer from store %s on request %s", store.pk, request_id)
            raise ConflictError(ErrorMessages.DUPLICATE_OFFER)

        OfferItem.objects.bulk_create([
            OfferService._build_item(offer, item, request_items.get(item.get('request_item_id')))
            for item in offer_data['items']
        ])

        logger.info("Store %s submitted offer %s on request %s", store.pk, offer.pk, request_id)
        notifications.notify_user(quotation_request.workshop.user_id, NotificationEvent.OFFER_CREATED, {
            'request_id': quotation_request.pk,
            'offer_id': offer.pk,
            'store_id': store.pk,
        })
        return OfferService.get_offer(offer.pk)

    @staticmethod
    def _build_item(offer, item: Dict, request_item: Optional[QuotationRequestItem]) -> OfferItem:
        """Offer line, falling back to the answered request item's name, brand and quantity."""
        available = item.get('available')
        return OfferItem(
            offer=offer,
            request_item=request_item,
            name=(item.get('name') or '').strip() or (request_item.name if request_item else ''),
            brand=item.get('brand') or (request_item.brand if request_item else ''),
            quantity=item.get('quantity') or (request_item.quantity if request_item else 1),
            unit_price=item['unit_price'],
            available=True if available is None else available,
            note=item.get('note') or '',
        )

    @staticmethod
    @transaction.atomic
    def withdraw_offer(offer_id, store_id) -> None:
        """Delete the store's own offer while its request is open and no order uses it."""
        try:
            offer = Offer.objects.select_related('request').select_for_update().get(pk=offer_id)
        except Offer.DoesNotExist:
            raise NotFound(ErrorMessages.OFFER_NOT_FOUND)

        if offer.store_id != store_id:
            raise AuthorizationError(ErrorMessages.NOT_YOUR_OFFER)
        if Offer.objects.filter(pk=offer.pk, order__isnull=False).exists():
            raise ConflictError(ErrorMessages.OFFER_HAS_ORDER)
        if not offer.request.is_open:
            raise ConflictError(ErrorMessages.REQUEST_NOT_OPEN)

        try:
            with transaction.atomic():
                offer.delete()
        except ProtectedError:
            raise ConflictError(ErrorMessages.OFFER_HAS_ORDER)
        logger.info("Store %s withdrew offer %s", store_id, offer_id)

"""
Matching engine: which open quotation requests a store gets to see.

A request is visible to a store when it is open, its category is one the store
serves (a store without categories serves all of them), the requesting
workshop's region is in the store's coverage and the store has not offered on
it yet. Reads only; marking a request as seen is a separate explicit call.
"""
import logging
from typing import List, Optional

from django.db.models import Count, Exists, OuterRef

from partners.models import Store
from project.exceptions import NotFound
from .enums import ErrorMessages, RequestStatus
from .models import Offer, QuotationRequest, QuotationRequestView

logger = logging.getLogger(__name__)


def get_store(store_id) -> Store:
    try:
        return Store.objects.get(pk=store_id)
    except Store.DoesNotExist:
        raise NotFound(ErrorMessages.STORE_NOT_FOUND)


class MatchingEngine:

    @staticmethod
    def visible_requests_queryset(store: Store):
        """Open requests matching the store's coverage and categories, annotated with `seen`."""
        queryset = QuotationRequest.objects.filter(
            status=RequestStatus.OPEN,
            workshop__region__in=list(store.coverage_regions or []),
        )
        if store.categories:
            queryset = queryset.filter(category__in=list(store.categories))

        already_offered = Offer.objects.filter(request=OuterRef('pk'), store=store)
        seen = QuotationRequestView.objects.filter(request=OuterRef('pk'), store=store)

        return (
            queryset
            .filter(~Exists(already_offered))
            .annotate(seen=Exists(seen), offers_count=Count('offers', distinct=True))
            .select_related('workshop')
            .prefetch_related('items')
            .order_by('-created_at', '-id')
        )

    @staticmethod
    def visible_requests(store_id, category: Optional[str] = None) -> List[QuotationRequest]:
        """
        List requests visible to a store, newest first.

        Each returned request carries a boolean `seen` attribute.
        Raises NotFound for an unknown store.
        """
        store = get_store(store_id)
        queryset = MatchingEngine.visible_requests_queryset(store)
        if category:
            queryset = queryset.filter(category=category)
        return list(queryset)

    @staticmethod
    def is_visible_to(quotation_request: QuotationRequest, store: Store) -> bool:
        """Single-request form of the visibility rule."""
        return (
            quotation_request.status == RequestStatus.OPEN
            and store.serves_category(quotation_request.category)
            and store.covers_region(quotation_request.workshop.region)
            and not Offer.objects.filter(request=quotation_request, store=store).exists()
        )

    @staticmethod
    def unseen_count(store_id) -> int:
        """Number of visible requests the store has not opened yet."""
        store = get_store(store_id)
        return MatchingEngine.visible_requests_queryset(store).filter(seen=False).count()

    @staticmethod
    def mark_seen(request_id, store_id) -> None:
        """Record that the store opened the request. Re-recording is a no-op."""
        store = get_store(store_id)
        if not QuotationRequest.objects.filter(pk=request_id).exists():
            raise NotFound(ErrorMessages.REQUEST_NOT_FOUND)

        _, created = QuotationRequestView.objects.get_or_create(request_id=request_id, store=store)
        if created:
            logger.info("Store %s opened quotation request %s", store.pk, request_id)

"""
Offer ranking for a quotation request.

Two distinct views over the same offers:

* ranking: coverage descending, then total ascending, then delivery days
  ascending. The first entry is the best offer.
* comparison: total ascending only (price-first view).

Both sorts are stable, so offers tied on every criterion keep creation order.
Totals and coverage only count items the store marked as available.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from project.exceptions import NotFound
from .enums import ErrorMessages
from .models import Offer, QuotationRequest


@dataclass(frozen=True)
class OfferSummary:
    offer_id: int
    store_id: int
    store_name: str
    total: Decimal
    delivery_days: int
    covered_count: int
    total_items: int
    coverage: float
    comments: str
    created_at: datetime


@dataclass(frozen=True)
class OfferRanking:
    request_id: int
    offers: List[OfferSummary]
    best_offer_id: Optional[int]


def offer_total(items) -> Decimal:
    """Sum of unit price x quantity over available items."""
    return sum(
        (item.unit_price * item.quantity for item in items if item.available),
        Decimal('0.00')
    )


def summarize_offer(offer: Offer) -> OfferSummary:
    items = list(offer.items.all())
    covered_count = sum(1 for item in items if item.available)
    total_items = len(items)
    coverage = covered_count / total_items * 100 if total_items else 0.0

    return OfferSummary(
        offer_id=offer.pk,
        store_id=offer.store_id,
        store_name=offer.store.name,
        total=offer_total(items),
        delivery_days=offer.delivery_days,
        covered_count=covered_count,
        total_items=total_items,
        coverage=coverage,
        comments=offer.comments,
        created_at=offer.created_at,
    )


def best_offer_key(summary: OfferSummary):
    return (-summary.coverage, summary.total, summary.delivery_days)


def rank_summaries(summaries: Iterable[OfferSummary]) -> List[OfferSummary]:
    return sorted(summaries, key=best_offer_key)


def compare_summaries(summaries: Iterable[OfferSummary]) -> List[OfferSummary]:
    return sorted(summaries, key=lambda summary: summary.total)


class OfferRankingService:

    @staticmethod
    def _summaries(request_id) -> List[OfferSummary]:
        if not QuotationRequest.objects.filter(pk=request_id).exists():
            raise NotFound(ErrorMessages.REQUEST_NOT_FOUND)

        offers = (
            Offer.objects.filter(request_id=request_id)
            .select_related('store')
            .prefetch_related('items')
            .order_by('created_at', 'id')
        )
        return [summarize_offer(offer) for offer in offers]

    @staticmethod
    def rank_offers(request_id) -> OfferRanking:
        """Offers in best-offer order. best_offer_id is None when there are no offers."""
        ranked = rank_summaries(OfferRankingService._summaries(request_id))
        return OfferRanking(
            request_id=int(request_id),
            offers=ranked,
            best_offer_id=ranked[0].offer_id if ranked else None,
        )

    @staticmethod
    def compare_offers(request_id) -> List[OfferSummary]:
        """Offers sorted by total only, cheapest first."""
        return compare_summaries(OfferRankingService._summaries(request_id))

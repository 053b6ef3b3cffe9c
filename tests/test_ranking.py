from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from project.exceptions import NotFound
from quotations.ranking import OfferRankingService, OfferSummary, compare_summaries, rank_summaries, summarize_offer

CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def summary(offer_id, total, coverage=100.0, delivery_days=3):
    return OfferSummary(
        offer_id=offer_id,
        store_id=offer_id,
        store_name=f"Store {offer_id}",
        total=Decimal(total),
        delivery_days=delivery_days,
        covered_count=0,
        total_items=0,
        coverage=coverage,
        comments='',
        created_at=CREATED,
    )


def test_coverage_beats_price():
    cheap_partial = summary(1, '50.00', coverage=50.0)
    full = summary(2, '500.00', coverage=100.0)

    assert [s.offer_id for s in rank_summaries([cheap_partial, full])] == [2, 1]


def test_price_breaks_coverage_ties_then_delivery_days():
    slow = summary(1, '100.00', delivery_days=10)
    fast = summary(2, '100.00', delivery_days=1)
    pricey = summary(3, '150.00', delivery_days=0)

    assert [s.offer_id for s in rank_summaries([pricey, slow, fast])] == [2, 1, 3]


def test_full_ties_keep_input_order():
    offers = [summary(i, '100.00') for i in (5, 3, 9)]

    assert [s.offer_id for s in rank_summaries(offers)] == [5, 3, 9]


def test_comparison_sorts_by_total_only():
    cheap_partial = summary(1, '50.00', coverage=50.0)
    full = summary(2, '500.00', coverage=100.0)

    assert [s.offer_id for s in compare_summaries([full, cheap_partial])] == [1, 2]


def test_offer_without_items_has_zero_coverage():
    offer = SimpleNamespace(
        pk=1, store_id=1, store=SimpleNamespace(name='Empty'), items=SimpleNamespace(all=lambda: []),
        delivery_days=2, comments='', created_at=CREATED,
    )

    result = summarize_offer(offer)

    assert result.coverage == 0.0
    assert result.total == Decimal('0.00')


@pytest.mark.django_db
def test_totals_and_coverage_only_count_available_items(store, open_request, make_offer):
    make_offer(store, open_request, prices=('100.00', '200.00'), available=(True, False))

    ranking = OfferRankingService.rank_offers(open_request.pk)

    best = ranking.offers[0]
    assert best.total == Decimal('100.00')
    assert best.covered_count == 1
    assert best.total_items == 2
    assert best.coverage == 50.0


@pytest.mark.django_db
def test_best_offer_and_comparison_are_distinct_views(store, other_store, open_request, make_offer):
    complete = make_offer(store, open_request, prices=('100.00', '200.00'))
    partial = make_offer(other_store, open_request, prices=('10.00', '20.00'), available=(True, False))

    ranking = OfferRankingService.rank_offers(open_request.pk)
    comparison = OfferRankingService.compare_offers(open_request.pk)

    assert ranking.best_offer_id == complete.pk
    assert [s.offer_id for s in ranking.offers] == [complete.pk, partial.pk]
    assert [s.offer_id for s in comparison] == [partial.pk, complete.pk]


@pytest.mark.django_db
def test_ranking_is_deterministic(store, other_store, open_request, make_offer):
    make_offer(store, open_request, prices=('100.00', '200.00'))
    make_offer(other_store, open_request, prices=('100.00', '200.00'))

    first = OfferRankingService.rank_offers(open_request.pk)
    second = OfferRankingService.rank_offers(open_request.pk)

    assert first == second


@pytest.mark.django_db
def test_request_without_offers_has_no_best_offer(open_request):
    ranking = OfferRankingService.rank_offers(open_request.pk)

    assert ranking.offers == []
    assert ranking.best_offer_id is None


@pytest.mark.django_db
def test_unknown_request_is_not_found():
    with pytest.raises(NotFound):
        OfferRankingService.rank_offers(999999)

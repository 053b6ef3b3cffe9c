from decimal import Decimal

import pytest
from django.db.models.query import QuerySet

from project.exceptions import AuthorizationError, ConflictError, NotFound, ValidationError
from project.notifications import NotificationEvent, TargetKind
from quotations.enums import ErrorMessages
from quotations.models import Offer
from quotations.services import OfferService, RequestLifecycleService

pytestmark = pytest.mark.django_db


def offer_payload(quotation_request, **item_overrides):
    request_item = quotation_request.items.first()
    item = {'request_item_id': request_item.pk, 'unit_price': Decimal('25.50')}
    item.update(item_overrides)
    return {'items': [item]}


def test_offer_items_default_from_the_request_item(store, open_request):
    offer = OfferService.create_offer(store.pk, open_request.pk, offer_payload(open_request))

    item = offer.items.get()
    assert (item.name, item.brand, item.quantity) == ('Brake pads', 'Bosch', 1)
    assert item.available is True
    assert item.request_item_id == open_request.items.first().pk
    assert offer.delivery_days == 7


def test_explicit_item_values_win_over_defaults(store, open_request):
    payload = offer_payload(open_request, name='Ceramic pads', brand='Brembo', quantity=3, available=False)
    payload['delivery_days'] = 0

    offer = OfferService.create_offer(store.pk, open_request.pk, payload)

    item = offer.items.get()
    assert (item.name, item.brand, item.quantity, item.available) == ('Ceramic pads', 'Brembo', 3, False)
    assert offer.delivery_days == 0


def test_free_form_item_needs_a_name(store, open_request):
    with pytest.raises(ValidationError):
        OfferService.create_offer(store.pk, open_request.pk, {'items': [{'unit_price': '10.00'}]})

    offer = OfferService.create_offer(
        store.pk, open_request.pk, {'items': [{'name': 'Brake fluid', 'unit_price': '10.00'}]}
    )
    assert offer.items.get().request_item is None


def test_second_offer_from_same_store_is_a_conflict(store, open_request):
    OfferService.create_offer(store.pk, open_request.pk, offer_payload(open_request))

    with pytest.raises(ConflictError) as exc_info:
        OfferService.create_offer(store.pk, open_request.pk, offer_payload(open_request))

    assert exc_info.value.message == ErrorMessages.DUPLICATE_OFFER
    assert Offer.objects.filter(request=open_request, store=store).count() == 1


def test_concurrent_duplicate_insert_fails_with_the_same_conflict(store, open_request, monkeypatch):
    OfferService.create_offer(store.pk, open_request.pk, offer_payload(open_request))
    # Lose the race: the fast-path check sees no offer, the constraint does
    monkeypatch.setattr(QuerySet, 'exists', lambda self: False)

    with pytest.raises(ConflictError) as exc_info:
        OfferService.create_offer(store.pk, open_request.pk, offer_payload(open_request))

    monkeypatch.undo()
    assert exc_info.value.message == ErrorMessages.DUPLICATE_OFFER
    assert Offer.objects.filter(request=open_request, store=store).count() == 1


@pytest.mark.parametrize('transition', ['close_request', 'cancel_request'])
def test_offers_only_while_request_is_open(store, workshop, open_request, transition):
    getattr(RequestLifecycleService, transition)(open_request.pk, workshop.pk)

    with pytest.raises(ConflictError):
        OfferService.create_offer(store.pk, open_request.pk, offer_payload(open_request))


def test_request_item_must_belong_to_the_same_request(store, workshop, open_request, make_request):
    other_request = make_request(workshop)

    with pytest.raises(ValidationError):
        OfferService.create_offer(store.pk, open_request.pk, offer_payload(other_request))
    assert not Offer.objects.exists()


@pytest.mark.parametrize('payload', [
    {'items': []},
    {'delivery_days': -1, 'items': [{'name': 'Pads', 'unit_price': '1.00'}]},
    {'items': [{'name': 'Pads', 'unit_price': '-1.00'}]},
    {'items': [{'name': 'Pads', 'unit_price': 'cheap'}]},
    {'items': [{'name': 'Pads', 'unit_price': '1.00', 'quantity': 0}]},
    {'delivery_days': True, 'items': [{'name': 'Pads', 'unit_price': '1.00'}]},
    {'items': [{'name': 'Pads', 'unit_price': '1.00', 'quantity': True}]},
])
def test_malformed_offer_is_rejected(store, open_request, payload):
    with pytest.raises(ValidationError):
        OfferService.create_offer(store.pk, open_request.pk, payload)
    assert not Offer.objects.exists()


def test_malformed_offer_is_rejected_before_the_request_is_loaded(store):
    with pytest.raises(ValidationError):
        OfferService.create_offer(store.pk, 999999, {'items': []})


def test_unknown_request_or_store_is_not_found(store, open_request):
    with pytest.raises(NotFound):
        OfferService.create_offer(store.pk, 999999, offer_payload(open_request))
    with pytest.raises(NotFound):
        OfferService.create_offer(999999, open_request.pk, offer_payload(open_request))


def test_new_offer_notifies_the_workshop(store, workshop, open_request, notifier, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        offer = OfferService.create_offer(store.pk, open_request.pk, offer_payload(open_request))

    assert notifier.events == [{
        'target_kind': TargetKind.USER,
        'target': workshop.user_id,
        'event': NotificationEvent.OFFER_CREATED,
        'payload': {'request_id': open_request.pk, 'offer_id': offer.pk, 'store_id': store.pk},
    }]


def test_listing_offers(store, other_store, open_request, make_offer):
    first = make_offer(store, open_request)
    second = make_offer(other_store, open_request)

    assert [o.pk for o in OfferService.list_for_request(open_request.pk)] == [second.pk, first.pk]
    assert [o.pk for o in OfferService.list_for_store(store.pk)] == [first.pk]
    assert OfferService.get_offer(first.pk).store == store
    with pytest.raises(NotFound):
        OfferService.get_offer(999999)


def test_withdraw_own_offer_while_open(store, offer):
    OfferService.withdraw_offer(offer.pk, store.pk)

    assert not Offer.objects.filter(pk=offer.pk).exists()


def test_withdraw_someone_elses_offer(other_store, offer):
    with pytest.raises(AuthorizationError):
        OfferService.withdraw_offer(offer.pk, other_store.pk)


def test_withdraw_after_close_is_a_conflict(store, workshop, offer):
    RequestLifecycleService.close_request(offer.request_id, workshop.pk)

    with pytest.raises(ConflictError):
        OfferService.withdraw_offer(offer.pk, store.pk)


def test_withdraw_ordered_offer_is_a_conflict(store, order):
    with pytest.raises(ConflictError) as exc_info:
        OfferService.withdraw_offer(order.offer_id, store.pk)

    assert exc_info.value.message == ErrorMessages.OFFER_HAS_ORDER

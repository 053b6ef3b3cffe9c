from datetime import timedelta

import pytest
from django.utils import timezone

from authentication.models import UserRole
from orders.models import Order
from project.exceptions import AuthorizationError, ConflictError, NotFound, ValidationError
from project.notifications import NotificationEvent, TargetKind
from quotations.enums import ErrorMessages, PartCategory, RequestStatus
from quotations.models import QuotationRequest
from quotations.queries import RequestQuery
from quotations.services import RequestLifecycleService

pytestmark = pytest.mark.django_db


def test_create_request_starts_open_with_items(workshop, request_data):
    quotation_request = RequestLifecycleService.create_request(workshop.pk, request_data())

    assert quotation_request.status == RequestStatus.OPEN
    assert quotation_request.closed_at is None
    assert [(i.name, i.quantity) for i in quotation_request.items.all()] == [('Brake pads', 1), ('Brake disc', 2)]
    assert quotation_request.offers_count == 0


def test_create_request_notifies_stores_after_commit(workshop, request_data, notifier, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        quotation_request = RequestLifecycleService.create_request(workshop.pk, request_data())

    assert notifier.events == [{
        'target_kind': TargetKind.ROLE,
        'target': UserRole.STORE,
        'event': NotificationEvent.REQUEST_CREATED,
        'payload': {
            'request_id': quotation_request.pk,
            'title': 'Front brakes',
            'category': PartCategory.BRAKES,
            'region': 'R1',
        },
    }]


@pytest.mark.parametrize('overrides, field', [
    ({'items': []}, 'items'),
    ({'items': [{'name': 'Pads', 'quantity': 0}]}, 'items'),
    ({'items': [{'name': '', 'quantity': 1}]}, 'items'),
    ({'vehicle_make': ''}, 'vehicle_make'),
    ({'vehicle_model': None}, 'vehicle_model'),
    ({'vehicle_year': 1899}, 'vehicle_year'),
    ({'category': 'Spaceship'}, 'category'),
    ({'title': '  '}, 'title'),
])
def test_malformed_request_is_rejected_before_any_write(workshop, request_data, overrides, field):
    with pytest.raises(ValidationError) as exc_info:
        RequestLifecycleService.create_request(workshop.pk, request_data(**overrides))

    assert field in exc_info.value.errors
    assert QuotationRequest.objects.count() == 0


def test_create_request_for_unknown_workshop(request_data):
    with pytest.raises(NotFound):
        RequestLifecycleService.create_request(999999, request_data())


def test_update_changes_editable_fields(workshop, open_request):
    updated = RequestLifecycleService.update_request(
        open_request.pk, workshop.pk, {'title': 'Rear brakes', 'vehicle_year': 2019}
    )

    assert updated.title == 'Rear brakes'
    assert updated.vehicle_year == 2019


def test_update_rejects_non_editable_fields(workshop, open_request):
    with pytest.raises(ValidationError) as exc_info:
        RequestLifecycleService.update_request(open_request.pk, workshop.pk, {'status': RequestStatus.CLOSED})

    assert 'status' in exc_info.value.errors


def test_update_after_close_is_a_conflict(workshop, open_request):
    RequestLifecycleService.close_request(open_request.pk, workshop.pk)

    with pytest.raises(ConflictError):
        RequestLifecycleService.update_request(open_request.pk, workshop.pk, {'title': 'Too late'})


def test_only_the_owner_can_modify(other_workshop, open_request):
    for operation in (
        lambda: RequestLifecycleService.update_request(open_request.pk, other_workshop.pk, {'title': 'Mine'}),
        lambda: RequestLifecycleService.close_request(open_request.pk, other_workshop.pk),
        lambda: RequestLifecycleService.cancel_request(open_request.pk, other_workshop.pk),
        lambda: RequestLifecycleService.delete_request(open_request.pk, other_workshop.pk),
    ):
        with pytest.raises(AuthorizationError):
            operation()

    open_request.refresh_from_db()
    assert open_request.status == RequestStatus.OPEN


def test_missing_request_is_not_found(workshop):
    with pytest.raises(NotFound):
        RequestLifecycleService.close_request(999999, workshop.pk)
    with pytest.raises(NotFound):
        RequestLifecycleService.get_request(999999)


def test_close_sets_closed_at_and_is_only_legal_from_open(workshop, open_request):
    closed = RequestLifecycleService.close_request(open_request.pk, workshop.pk)

    assert closed.status == RequestStatus.CLOSED
    assert closed.closed_at is not None
    with pytest.raises(ConflictError):
        RequestLifecycleService.close_request(open_request.pk, workshop.pk)
    with pytest.raises(ConflictError):
        RequestLifecycleService.cancel_request(open_request.pk, workshop.pk)


def test_cancel_open_request(workshop, open_request):
    cancelled = RequestLifecycleService.cancel_request(open_request.pk, workshop.pk)

    assert cancelled.status == RequestStatus.CANCELLED
    with pytest.raises(ConflictError):
        RequestLifecycleService.close_request(open_request.pk, workshop.pk)


def test_cancel_checks_for_an_order_even_if_request_looks_open(workshop, order):
    # Simulates a close that has not landed yet
    QuotationRequest.objects.filter(pk=order.request_id).update(status=RequestStatus.OPEN)

    with pytest.raises(ConflictError) as exc_info:
        RequestLifecycleService.cancel_request(order.request_id, workshop.pk)

    assert exc_info.value.message == ErrorMessages.REQUEST_HAS_ORDER
    assert QuotationRequest.objects.get(pk=order.request_id).status == RequestStatus.OPEN


def test_delete_request_without_offers(workshop, open_request):
    RequestLifecycleService.delete_request(open_request.pk, workshop.pk)

    assert not QuotationRequest.objects.filter(pk=open_request.pk).exists()


def test_delete_request_with_offers_is_a_conflict(workshop, offer):
    with pytest.raises(ConflictError):
        RequestLifecycleService.delete_request(offer.request_id, workshop.pk)

    assert QuotationRequest.objects.filter(pk=offer.request_id).exists()


def test_close_for_order_only_closes_open_requests(workshop, open_request):
    RequestLifecycleService.cancel_request(open_request.pk, workshop.pk)

    with pytest.raises(ConflictError):
        RequestLifecycleService.close_for_order(open_request.pk)
    assert not Order.objects.exists()


def test_list_requests_filters_and_paginates(workshop, other_workshop, make_request):
    brakes = make_request(workshop)
    engine = make_request(workshop, category=PartCategory.ENGINE)
    make_request(other_workshop)
    RequestLifecycleService.close_request(brakes.pk, workshop.pk)

    own = RequestLifecycleService.list_requests(workshop.pk)
    assert [r.pk for r in own] == [engine.pk, brakes.pk]

    closed = RequestLifecycleService.list_requests(workshop.pk, RequestQuery(status=RequestStatus.CLOSED))
    assert [r.pk for r in closed] == [brakes.pk]

    engine_only = RequestLifecycleService.list_requests(workshop.pk, RequestQuery(category=PartCategory.ENGINE))
    assert [r.pk for r in engine_only] == [engine.pk]

    second_page = RequestLifecycleService.list_requests(workshop.pk, RequestQuery(page=2, page_size=1))
    assert [r.pk for r in second_page] == [brakes.pk]

    assert len(RequestLifecycleService.list_requests(None)) == 3


def test_list_requests_by_creation_window(workshop, make_request):
    quotation_request = make_request(workshop)
    now = timezone.now()

    assert RequestLifecycleService.list_requests(
        workshop.pk, RequestQuery(created_from=now - timedelta(hours=1))
    )[0].pk == quotation_request.pk
    assert RequestLifecycleService.list_requests(
        workshop.pk, RequestQuery(created_to=now - timedelta(hours=1))
    ) == []


@pytest.mark.parametrize('kwargs', [{'page': 0}, {'page_size': 0}, {'page_size': 1000}, {'status': 'archived'}])
def test_request_query_rejects_bad_values(kwargs):
    with pytest.raises(ValidationError):
        RequestQuery(**kwargs)

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from authentication.models import CustomUser, UserRole
from orders.services import OrderCreationService
from partners.models import Store, Workshop
from quotations.enums import PartCategory
from quotations.services import OfferService, RequestLifecycleService
from tests.notifiers import RecordingNotifier


@pytest.fixture(autouse=True)
def notifier(settings):
    settings.MARKETPLACE_NOTIFIER = 'tests.notifiers.RecordingNotifier'
    RecordingNotifier.events.clear()
    yield RecordingNotifier
    RecordingNotifier.events.clear()


@pytest.fixture
def make_user(db):
    def _make_user(email, role, name=''):
        return CustomUser.objects.create_user(email=email, password='s3cret-pass', role=role, name=name or email)
    return _make_user


@pytest.fixture
def make_workshop(make_user):
    def _make_workshop(email='workshop@example.com', region='R1', tax_id=None):
        user = make_user(email, UserRole.WORKSHOP)
        return Workshop.objects.create(
            user=user,
            name=f"Workshop {email}",
            tax_id=tax_id or f"WS-{user.pk}",
            city='City',
            region=region,
        )
    return _make_workshop


@pytest.fixture
def make_store(make_user):
    def _make_store(email='store@example.com', coverage_regions=('R1',), categories=(PartCategory.BRAKES,)):
        user = make_user(email, UserRole.STORE)
        return Store.objects.create(
            user=user,
            name=f"Store {email}",
            tax_id=f"ST-{user.pk}",
            city='City',
            region='R1',
            coverage_regions=list(coverage_regions),
            categories=list(categories),
        )
    return _make_store


@pytest.fixture
def workshop(make_workshop):
    return make_workshop()


@pytest.fixture
def other_workshop(make_workshop):
    return make_workshop(email='other-workshop@example.com', region='R2')


@pytest.fixture
def store(make_store):
    return make_store()


@pytest.fixture
def other_store(make_store):
    return make_store(email='other-store@example.com', categories=())


@pytest.fixture
def admin_user(make_user):
    return make_user('admin@example.com', UserRole.ADMIN)


@pytest.fixture
def request_data():
    def _request_data(**overrides):
        data = {
            'title': 'Front brakes',
            'description': 'Pads and discs',
            'category': PartCategory.BRAKES,
            'vehicle_make': 'Toyota',
            'vehicle_model': 'Corolla',
            'vehicle_year': 2018,
            'vehicle_plate': 'AB-1234',
            'items': [
                {'name': 'Brake pads', 'brand': 'Bosch', 'quantity': 1},
                {'name': 'Brake disc', 'quantity': 2},
            ],
        }
        data.update(overrides)
        return data
    return _request_data


@pytest.fixture
def make_request(request_data):
    def _make_request(workshop, **overrides):
        return RequestLifecycleService.create_request(workshop.pk, request_data(**overrides))
    return _make_request


@pytest.fixture
def open_request(make_request, workshop):
    return make_request(workshop)


@pytest.fixture
def make_offer():
    def _make_offer(store, quotation_request, prices=('100.00', '200.00'), available=(True, True), delivery_days=3):
        request_items = list(quotation_request.items.all())
        items = [
            {
                'request_item_id': request_item.pk,
                'unit_price': Decimal(price),
                'available': is_available,
            }
            for request_item, price, is_available in zip(request_items, prices, available)
        ]
        return OfferService.create_offer(store.pk, quotation_request.pk, {
            'delivery_days': delivery_days,
            'items': items,
        })
    return _make_offer


@pytest.fixture
def offer(make_offer, store, open_request):
    return make_offer(store, open_request)


@pytest.fixture
def order(offer, workshop):
    return OrderCreationService.create_order(workshop.pk, offer.pk, 'Main street 1')


@pytest.fixture
def api_client():
    return APIClient()

import pytest

from orders.enums import OrderStatus
from quotations.enums import RequestStatus

pytestmark = pytest.mark.django_db

REQUEST_BODY = {
    'title': 'Front brakes',
    'category': 'Brakes',
    'vehicle_make': 'Toyota',
    'vehicle_model': 'Corolla',
    'vehicle_year': 2018,
    'items': [
        {'name': 'Brake pads', 'quantity': 1, 'image_key': 'quotations/abc-pads.png'},
        {'name': 'Brake disc', 'quantity': 2},
    ],
}


@pytest.fixture(autouse=True)
def no_ratelimit(settings):
    settings.RATELIMIT_ENABLE = False


@pytest.fixture
def as_user(api_client):
    def _as_user(user):
        api_client.force_authenticate(user=user)
        return api_client
    return _as_user


def test_register_and_login(api_client):
    response = api_client.post('/api/auth/register/', {
        'email': 'new@example.com', 'password': 'a-long-password', 'name': 'New', 'role': 'store',
    }, format='json')
    assert response.status_code == 201
    assert response.data['data']['user']['role'] == 'store'

    response = api_client.post('/api/auth/login/', {
        'email': 'new@example.com', 'password': 'a-long-password',
    }, format='json')
    assert response.status_code == 200
    assert set(response.data['data']['tokens']) == {'access', 'refresh'}

    response = api_client.post('/api/auth/login/', {'email': 'new@example.com', 'password': 'wrong'}, format='json')
    assert response.status_code == 401
    assert response.data['success'] is False


def test_anonymous_requests_are_rejected(api_client):
    response = api_client.get('/api/quotations/requests/')

    assert response.status_code == 401
    assert response.data['success'] is False


def test_profile_endpoints(as_user, make_user):
    client = as_user(make_user('hub@example.com', 'store'))

    assert client.get('/api/partners/profile/').status_code == 404

    response = client.post('/api/partners/profile/', {
        'name': 'Hub', 'tax_id': 'ST-1', 'city': 'Santiago', 'region': 'R1',
        'coverage_regions': ['R1'], 'categories': ['Brakes'],
    }, format='json')
    assert response.status_code == 201
    assert response.data['data']['categories'] == ['Brakes']

    response = client.patch('/api/partners/profile/', {'coverage_regions': ['R1', 'R2']}, format='json')
    assert response.data['data']['coverage_regions'] == ['R1', 'R2']

    response = client.post('/api/partners/profile/', {
        'name': 'Hub 2', 'tax_id': 'ST-2', 'city': 'Santiago', 'region': 'R1',
    }, format='json')
    assert response.status_code == 409


def test_request_validation_errors_use_the_envelope(as_user, workshop):
    response = as_user(workshop.user).post(
        '/api/quotations/requests/', {**REQUEST_BODY, 'items': [], 'vehicle_year': 1800}, format='json'
    )

    assert response.status_code == 400
    assert response.data['success'] is False
    assert {'items', 'vehicle_year'} <= set(response.data['errors'])


def test_request_items_expose_signed_image_urls(as_user, workshop):
    response = as_user(workshop.user).post('/api/quotations/requests/', REQUEST_BODY, format='json')

    items = response.data['data']['items']
    assert items[0]['image_url'].startswith('http')
    assert 'token=' in items[0]['image_url']
    assert items[1]['image_url'] is None


def test_upload_target(as_user, workshop, store):
    response = as_user(workshop.user).post(
        '/api/quotations/uploads/', {'filename': 'pads.png', 'content_type': 'image/png'}, format='json'
    )
    assert response.status_code == 201
    assert response.data['data']['key'].endswith('pads.png')

    response = as_user(store.user).post(
        '/api/quotations/uploads/', {'filename': 'pads.png', 'content_type': 'image/png'}, format='json'
    )
    assert response.status_code == 403


def test_update_rejects_item_edits(as_user, workshop, open_request):
    response = as_user(workshop.user).patch(
        f'/api/quotations/requests/{open_request.pk}/', {'items': []}, format='json'
    )

    assert response.status_code == 400
    assert 'items' in response.data['errors']


def test_unknown_request_is_404(as_user, workshop):
    response = as_user(workshop.user).get('/api/quotations/requests/999999/')

    assert response.status_code == 404
    assert response.data['error'] == 'Quotation request not found'


def test_store_cannot_see_rankings(as_user, store, open_request):
    response = as_user(store.user).get(f'/api/quotations/requests/{open_request.pk}/ranking/')

    assert response.status_code == 403


def test_other_workshop_cannot_see_offers(as_user, other_workshop, offer):
    response = as_user(other_workshop.user).get(f'/api/quotations/requests/{offer.request_id}/offers/')

    assert response.status_code == 403


def test_marketplace_flow_over_http(as_user, workshop, store, other_store):
    workshop_client = lambda: as_user(workshop.user)
    store_client = lambda: as_user(store.user)

    response = workshop_client().post('/api/quotations/requests/', REQUEST_BODY, format='json')
    assert response.status_code == 201
    request_id = response.data['data']['id']
    pads, disc = (item['id'] for item in response.data['data']['items'])

    response = store_client().get('/api/quotations/requests/available/')
    assert [(r['id'], r['seen']) for r in response.data['data']] == [(request_id, False)]
    assert store_client().get('/api/quotations/requests/unseen-count/').data['data'] == {'unseen': 1}

    assert store_client().post(f'/api/quotations/requests/{request_id}/view/').status_code == 200
    assert store_client().get('/api/quotations/requests/unseen-count/').data['data'] == {'unseen': 0}

    offer_body = {
        'delivery_days': 2,
        'items': [
            {'request_item_id': pads, 'unit_price': '100.00'},
            {'request_item_id': disc, 'unit_price': '200.00'},
        ],
    }
    response = store_client().post(f'/api/quotations/requests/{request_id}/offers/', offer_body, format='json')
    assert response.status_code == 201
    offer_id = response.data['data']['id']

    response = store_client().post(f'/api/quotations/requests/{request_id}/offers/', offer_body, format='json')
    assert response.status_code == 409
    assert response.data['success'] is False

    assert store_client().get('/api/quotations/requests/available/').data['data'] == []
    assert [o['id'] for o in store_client().get('/api/quotations/offers/mine/').data['data']] == [offer_id]

    response = workshop_client().get(f'/api/quotations/requests/{request_id}/ranking/')
    assert response.data['data']['best_offer_id'] == offer_id
    assert response.data['data']['offers'][0]['total'] == '500.00'
    assert response.data['data']['offers'][0]['coverage'] == 100.0

    response = workshop_client().get(f'/api/quotations/requests/{request_id}/compare/')
    assert [s['offer_id'] for s in response.data['data']] == [offer_id]

    response = workshop_client().post('/api/orders/create/', {
        'offer_id': offer_id, 'delivery_address': 'X',
    }, format='json')
    assert response.status_code == 201
    order_id = response.data['data']['id']
    assert response.data['data']['total'] == '500.00'
    assert response.data['data']['status'] == OrderStatus.PENDING

    response = workshop_client().get(f'/api/quotations/requests/{request_id}/')
    assert response.data['data']['status'] == RequestStatus.CLOSED

    response = store_client().post(f'/api/orders/{order_id}/update-status/', {'status': 'delivered'}, format='json')
    assert response.status_code == 403

    response = store_client().post(f'/api/orders/{order_id}/update-status/', {'status': 'confirmed'}, format='json')
    assert response.data['data']['status'] == OrderStatus.CONFIRMED

    response = workshop_client().post(f'/api/orders/{order_id}/update-status/', {'status': 'delivered'}, format='json')
    assert response.data['data']['status'] == OrderStatus.DELIVERED
    assert response.data['data']['delivered_at'] is not None

    response = workshop_client().post(f'/api/orders/{order_id}/cancel/', {}, format='json')
    assert response.status_code == 409

    response = store_client().get(f'/api/orders/{order_id}/status-history/')
    assert [h['new_status'] for h in response.data['data']] == ['pending', 'confirmed', 'delivered']

    assert [o['id'] for o in workshop_client().get('/api/orders/').data['data']] == [order_id]
    assert as_user(other_store.user).get(f'/api/orders/{order_id}/').status_code == 403


def test_token_refresh_and_current_user(api_client, workshop):
    response = api_client.post('/api/auth/login/', {
        'email': workshop.user.email, 'password': 's3cret-pass',
    }, format='json')
    refresh = response.data['data']['tokens']['refresh']

    response = api_client.post('/api/auth/token/refresh/', {'refresh': refresh}, format='json')
    assert response.status_code == 200
    access = response.data['data']['access']

    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
    response = api_client.get('/api/auth/me/')
    assert response.data['data']['user']['email'] == workshop.user.email


def test_admin_lists_partners(as_user, admin_user, workshop, store):
    client = as_user(admin_user)

    assert [w['id'] for w in client.get('/api/partners/workshops/').data['data']] == [workshop.pk]
    assert [s['id'] for s in client.get('/api/partners/stores/').data['data']] == [store.pk]


def test_partners_cannot_list_partners(as_user, workshop):
    response = as_user(workshop.user).get('/api/partners/stores/')

    assert response.status_code == 403
    assert response.data['success'] is False

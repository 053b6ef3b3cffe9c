from urllib.parse import parse_qs, urlparse

import pytest
from django.urls import resolve

from project.exceptions import ValidationError
from project.storage import resolve_token, sign_for_read, store_blob

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def storage_settings(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    settings.MARKETPLACE_STORAGE = {
        'BACKEND': 'project.storage.SignedURLStorage',
        'PUBLIC_BASE_URL': 'https://files.example.com/',
        'KEY_PREFIX': 'quotations',
        'UPLOAD_URL_MAX_AGE': 600,
        'READ_URL_MAX_AGE': 600,
        'MAX_UPLOAD_BYTES': 16,
    }


def token_of(url):
    return parse_qs(urlparse(url).query)['token'][0]


def local(url):
    parsed = urlparse(url)
    return f"{parsed.path}?{parsed.query}"


def test_store_blob_reserves_a_prefixed_key():
    target = store_blob('front pads.png', 'image/png')

    assert target['key'].startswith('quotations/')
    assert target['key'].endswith('-front_pads.png')
    assert target['upload_url'].startswith('https://files.example.com/api/files/quotations/')
    assert target['expires_in'] == 600
    assert resolve_token(token_of(target['upload_url']), 'put') == target['key']


def test_signed_urls_point_at_the_blob_route():
    target = store_blob('pads.png', 'image/png')

    for url in (target['upload_url'], target['read_url']):
        match = resolve(urlparse(url).path)
        assert match.url_name == 'storage-blob'
        assert match.kwargs == {'key': target['key']}


def test_keys_are_unique_per_upload():
    assert store_blob('pads.png', 'image/png')['key'] != store_blob('pads.png', 'image/png')['key']


@pytest.mark.parametrize('name, content_type', [
    ('pads.exe', 'application/octet-stream'),
    ('', 'image/png'),
])
def test_store_blob_rejects_bad_input(name, content_type):
    with pytest.raises(ValidationError):
        store_blob(name, content_type)


def test_sign_for_read_round_trip():
    url = sign_for_read('quotations/abc-pads.png')

    assert resolve_token(token_of(url), 'get') == 'quotations/abc-pads.png'
    assert sign_for_read('') is None


def test_tokens_are_bound_to_their_operation():
    token = token_of(sign_for_read('quotations/abc-pads.png'))

    with pytest.raises(ValidationError):
        resolve_token(token, 'put')
    with pytest.raises(ValidationError):
        resolve_token(token + 'tampered', 'get')


def test_backend_is_chosen_by_settings(settings):
    settings.MARKETPLACE_STORAGE = {**settings.MARKETPLACE_STORAGE, 'BACKEND': 'tests.storages.StaticURLStorage'}

    target = store_blob('pads.png', 'image/png')

    assert target['upload_url'] == f"https://cdn.example.com/upload/{target['key']}"
    assert sign_for_read('quotations/x.png') == 'https://cdn.example.com/quotations/x.png'


def test_upload_then_read_through_the_blob_route(api_client):
    target = store_blob('pads.png', 'image/png')

    response = api_client.put(local(target['upload_url']), data=b'PNGDATA', content_type='image/png')
    assert response.status_code == 201
    assert response.data['data'] == {'key': target['key']}

    response = api_client.get(local(target['read_url']))
    assert response.status_code == 200
    assert response['Content-Type'] == 'image/png'
    assert b''.join(response.streaming_content) == b'PNGDATA'


def test_upload_rejects_mismatched_content_type(api_client):
    target = store_blob('pads.png', 'image/png')

    response = api_client.put(local(target['upload_url']), data=b'GIF', content_type='image/gif')

    assert response.status_code == 400


def test_upload_rejects_oversized_body(api_client):
    target = store_blob('pads.png', 'image/png')

    response = api_client.put(local(target['upload_url']), data=b'x' * 17, content_type='image/png')

    assert response.status_code == 400


def test_token_only_grants_its_own_key(api_client):
    first = store_blob('pads.png', 'image/png')
    second = store_blob('disc.png', 'image/png')
    path = urlparse(second['upload_url']).path

    response = api_client.put(
        f"{path}?token={token_of(first['upload_url'])}", data=b'PNG', content_type='image/png'
    )

    assert response.status_code == 403


def test_read_token_cannot_upload(api_client):
    target = store_blob('pads.png', 'image/png')
    path = urlparse(target['upload_url']).path

    response = api_client.put(
        f"{path}?token={token_of(target['read_url'])}", data=b'PNG', content_type='image/png'
    )

    assert response.status_code == 400


def test_reading_a_missing_blob_is_not_found(api_client):
    response = api_client.get(local(sign_for_read('quotations/never-uploaded.png')))

    assert response.status_code == 404
    assert response.data['success'] is False

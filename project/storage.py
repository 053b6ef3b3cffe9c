"""
Blob storage bridge for request item images.

Clients receive a signed upload target, PUT the bytes there, store the returned
key on the request item and read it back through a short-lived signed URL.
The backend minting those URLs is chosen with MARKETPLACE_STORAGE['BACKEND'].
The default backend points them at this service's own blob route, which keeps
the bytes in Django's default file storage.
"""
import logging
import uuid
from urllib.parse import urljoin

from django.conf import settings
from django.core import signing
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.urls import reverse
from django.utils.module_loading import import_string
from django.utils.text import get_valid_filename

from project.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)

SIGNING_SALT = 'marketplace.storage'

ALLOWED_CONTENT_TYPES = ('image/jpeg', 'image/png', 'image/webp', 'image/gif')


def _config():
    return settings.MARKETPLACE_STORAGE


class BlobStorage:
    """Interface for backends minting upload and read URLs for a storage key"""

    def upload_url(self, key: str, content_type: str) -> str:
        raise NotImplementedError

    def read_url(self, key: str) -> str:
        raise NotImplementedError


class SignedURLStorage(BlobStorage):
    """Default backend: URLs to the local blob route carrying a signed token"""

    def _url(self, key, operation, content_type=None):
        token = signing.dumps({'key': key, 'op': operation, 'ct': content_type}, salt=SIGNING_SALT)
        path = reverse('storage-blob', kwargs={'key': key})
        return f"{urljoin(_config()['PUBLIC_BASE_URL'], path)}?token={token}"

    def upload_url(self, key, content_type):
        return self._url(key, 'put', content_type)

    def read_url(self, key):
        return self._url(key, 'get')


def get_backend() -> BlobStorage:
    return import_string(_config()['BACKEND'])()


def store_blob(name, content_type):
    """
    Reserve a storage key for a new blob.

    Returns a dict with the storage ``key``, the ``upload_url`` the client PUTs the
    bytes to and a ``read_url`` valid for immediate preview.
    """
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(f"Unsupported content type '{content_type}'")

    filename = get_valid_filename(name) if name else ''
    if not filename:
        raise ValidationError("A file name is required")

    key = f"{_config()['KEY_PREFIX']}/{uuid.uuid4()}-{filename}"
    backend = get_backend()
    logger.info("Reserved blob key %s (%s)", key, content_type)
    return {
        'key': key,
        'upload_url': backend.upload_url(key, content_type),
        'read_url': backend.read_url(key),
        'expires_in': _config()['UPLOAD_URL_MAX_AGE'],
    }


def sign_for_read(key):
    """Signed read URL for a stored key, or None when there is no key."""
    if not key:
        return None
    return get_backend().read_url(key)


def load_token(token, operation):
    """
    Validate a token minted by SignedURLStorage and return its payload.

    Raises ValidationError for tampered, expired or wrong-operation tokens.
    """
    max_age = _config()['UPLOAD_URL_MAX_AGE'] if operation == 'put' else _config()['READ_URL_MAX_AGE']
    try:
        payload = signing.loads(token, salt=SIGNING_SALT, max_age=max_age)
    except signing.BadSignature as exc:
        raise ValidationError("Invalid or expired storage token") from exc
    if payload.get('op') != operation:
        raise ValidationError("Storage token does not grant this operation")
    return payload


def resolve_token(token, operation):
    """The storage key a valid token grants."""
    return load_token(token, operation)['key']


def save_blob(key, content: bytes):
    """Write the uploaded bytes under key, replacing an earlier upload."""
    if not content:
        raise ValidationError("Upload body is empty")
    if len(content) > _config()['MAX_UPLOAD_BYTES']:
        raise ValidationError(f"Upload exceeds {_config()['MAX_UPLOAD_BYTES']} bytes")

    if default_storage.exists(key):
        default_storage.delete(key)
    default_storage.save(key, ContentFile(content))
    logger.info("Stored blob %s (%d bytes)", key, len(content))


def open_blob(key):
    if not default_storage.exists(key):
        raise NotFound("Blob not found")
    return default_storage.open(key, 'rb')

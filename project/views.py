import mimetypes

from django.http import FileResponse
from rest_framework import status

from project.exceptions import AuthorizationError, ValidationError
from project.storage import load_token, open_blob, save_blob
from project.utils import StandardizedAPIView


class BlobView(StandardizedAPIView):
    """
    Upload and read target behind the URLs minted by SignedURLStorage.

    The signed token in the query string is the only credential.
    """
    authentication_classes = []
    permission_classes = []

    def _grant(self, request, key, operation):
        payload = load_token(request.query_params.get('token', ''), operation)
        if payload['key'] != key:
            raise AuthorizationError("Storage token does not grant this key")
        return payload

    def put(self, request, key, *args, **kwargs):
        payload = self._grant(request, key, 'put')
        content_type = (request.content_type or '').split(';')[0].strip()
        if content_type != payload['ct']:
            raise ValidationError(f"Expected content type '{payload['ct']}'")

        save_blob(key, request.body)
        return self.success_response(
            data={'key': key},
            message="Upload stored",
            status_code=status.HTTP_201_CREATED
        )

    def get(self, request, key, *args, **kwargs):
        self._grant(request, key, 'get')
        content_type = mimetypes.guess_type(key)[0] or 'application/octet-stream'
        return FileResponse(open_blob(key), content_type=content_type)

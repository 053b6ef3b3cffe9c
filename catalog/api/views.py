from rest_framework import status

from authentication.models import UserRole
from catalog.api.serializers import PartInputSerializer, PartSearchQuerySerializer, PartSerializer
from catalog.enums import CatalogErrorMessages, CatalogResponseMessages
from catalog.queries import PartSearch
from catalog.services import CatalogService
from partners.services import get_store_for_user
from project.exceptions import AuthorizationError
from project.permissions import IsMarketplaceUser, IsStore
from project.utils import StandardizedAPIView


def require_store(user):
    if user.role != UserRole.STORE:
        raise AuthorizationError(CatalogErrorMessages.NOT_YOUR_PART)
    return get_store_for_user(user)


class PartListCreateView(StandardizedAPIView):
    """Search every catalog; stores add parts to their own"""
    permission_classes = [IsMarketplaceUser]

    def get(self, request, *args, **kwargs):
        query_serializer = PartSearchQuerySerializer(data=request.query_params)
        if not query_serializer.is_valid():
            return self.validation_error_response(query_serializer.errors)

        parts = CatalogService.search_parts(PartSearch(**query_serializer.validated_data))
        return self.success_response(
            data=PartSerializer(parts, many=True).data,
            message=f"Retrieved {len(parts)} items"
        )

    def post(self, request, *args, **kwargs):
        store = require_store(request.user)
        serializer = PartInputSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        part = CatalogService.create_part(store.pk, serializer.validated_data)
        return self.success_response(
            data=PartSerializer(part).data,
            message=CatalogResponseMessages.PART_CREATED,
            status_code=status.HTTP_201_CREATED
        )


class StorePartsView(StandardizedAPIView):
    permission_classes = [IsStore]

    def get(self, request, *args, **kwargs):
        store = get_store_for_user(request.user)
        parts = CatalogService.list_parts(store.pk)
        return self.success_response(
            data=PartSerializer(parts, many=True).data,
            message=f"Retrieved {len(parts)} items"
        )


class PartDetailView(StandardizedAPIView):
    permission_classes = [IsMarketplaceUser]

    def get(self, request, pk, *args, **kwargs):
        return self.success_response(data=PartSerializer(CatalogService.get_part(pk)).data)

    def patch(self, request, pk, *args, **kwargs):
        store = require_store(request.user)
        serializer = PartInputSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        part = CatalogService.update_part(pk, store.pk, serializer.validated_data)
        return self.success_response(data=PartSerializer(part).data, message=CatalogResponseMessages.PART_UPDATED)

    def delete(self, request, pk, *args, **kwargs):
        store = require_store(request.user)
        CatalogService.delete_part(pk, store.pk)
        return self.success_response(message=CatalogResponseMessages.PART_DELETED)

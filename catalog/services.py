"""
Per-store parts catalog.

A store lists the parts it sells; part codes are unique within one store's
catalog. Any marketplace user may search across every catalog.
"""
import logging
from typing import Dict, List, Optional

from django.db import IntegrityError, transaction

from partners.models import Store
from project.exceptions import AuthorizationError, ConflictError, NotFound
from .enums import CatalogErrorMessages, CatalogRules
from .models import Part
from .queries import PartSearch
from .validators import PartValidator

logger = logging.getLogger(__name__)


def _get_store(store_id) -> Store:
    try:
        return Store.objects.get(pk=store_id)
    except Store.DoesNotExist:
        raise NotFound(CatalogErrorMessages.STORE_NOT_FOUND)


def _part_fields(data: Dict) -> Dict:
    return {field: value for field, value in data.items() if field in CatalogRules.PART_FIELDS}


class CatalogService:

    @staticmethod
    def get_part(part_id) -> Part:
        try:
            return Part.objects.select_related('store').get(pk=part_id)
        except Part.DoesNotExist:
            raise NotFound(CatalogErrorMessages.PART_NOT_FOUND)

    @staticmethod
    def _get_owned_part(part_id, store_id) -> Part:
        try:
            part = Part.objects.select_for_update().get(pk=part_id)
        except Part.DoesNotExist:
            raise NotFound(CatalogErrorMessages.PART_NOT_FOUND)
        if part.store_id != store_id:
            raise AuthorizationError(CatalogErrorMessages.NOT_YOUR_PART)
        return part

    @staticmethod
    def _save(part: Part, update_fields: Optional[List[str]] = None) -> None:
        try:
            with transaction.atomic():
                part.save(update_fields=update_fields)
        except IntegrityError:
            raise ConflictError(CatalogErrorMessages.DUPLICATE_CODE)

    @staticmethod
    @transaction.atomic
    def create_part(store_id, data: Dict) -> Part:
        """Add a part to the store's catalog. A code already in that catalog is a ConflictError."""
        fields = _part_fields(data)
        PartValidator.validate(fields)
        store = _get_store(store_id)

        if Part.objects.filter(store=store, code=fields['code']).exists():
            raise ConflictError(CatalogErrorMessages.DUPLICATE_CODE)

        part = Part(store=store, **fields)
        CatalogService._save(part)
        logger.info("Store %s added part %s (%s)", store.pk, part.pk, part.code)
        return CatalogService.get_part(part.pk)

    @staticmethod
    def list_parts(store_id) -> List[Part]:
        store = _get_store(store_id)
        return list(Part.objects.filter(store=store).select_related('store'))

    @staticmethod
    def search_parts(search: Optional[PartSearch] = None) -> List[Part]:
        search = search or PartSearch()
        return list(search.apply(Part.objects.select_related('store')))

    @staticmethod
    @transaction.atomic
    def update_part(part_id, store_id, data: Dict) -> Part:
        fields = _part_fields(data)
        PartValidator.validate(fields, partial=True)
        part = CatalogService._get_owned_part(part_id, store_id)

        if 'code' in fields and fields['code'] != part.code:
            if Part.objects.filter(store_id=store_id, code=fields['code']).exists():
                raise ConflictError(CatalogErrorMessages.DUPLICATE_CODE)

        for field, value in fields.items():
            setattr(part, field, value)
        CatalogService._save(part, update_fields=list(fields) + ['updated_at'])
        logger.info("Store %s updated part %s: %s", store_id, part.pk, sorted(fields))
        return CatalogService.get_part(part.pk)

    @staticmethod
    @transaction.atomic
    def delete_part(part_id, store_id) -> None:
        part = CatalogService._get_owned_part(part_id, store_id)
        part.delete()
        logger.info("Store %s removed part %s", store_id, part_id)

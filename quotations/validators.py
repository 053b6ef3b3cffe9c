"""
Payload validation for quotation requests and offers.

Runs before any write so that malformed input never reaches the store. The API
serializers enforce the same field rules; these checks protect direct service calls.
"""
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List

from project.exceptions import ValidationError
from .enums import BusinessRules, ErrorMessages, PartCategory


def _raise_if(errors: Dict[str, List[str]]):
    if errors:
        first = next(iter(errors.values()))[0]
        raise ValidationError(first, errors=errors)


def _is_count(value, minimum):
    return isinstance(value, int) and not isinstance(value, bool) and value >= minimum


def validate_categories(categories: Iterable[str]) -> List[str]:
    """Return the categories as a list, rejecting unknown values."""
    categories = list(categories or [])
    unknown = [c for c in categories if c not in PartCategory.values]
    if unknown:
        raise ValidationError(
            ErrorMessages.INVALID_CATEGORY.format(category=unknown[0]),
            errors={'categories': [ErrorMessages.INVALID_CATEGORY.format(category=c) for c in unknown]}
        )
    return categories


class QuotationRequestValidator:
    """Validation rules for creating and editing quotation requests"""

    REQUIRED_VEHICLE_FIELDS = ('vehicle_make', 'vehicle_model', 'vehicle_year')

    @staticmethod
    def validate_vehicle(data: Dict, partial: bool = False) -> Dict[str, List[str]]:
        errors = {}
        for field in QuotationRequestValidator.REQUIRED_VEHICLE_FIELDS:
            if partial and field not in data:
                continue
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field] = [ErrorMessages.MISSING_VEHICLE_FIELD.format(field=field.replace('vehicle_', ''))]

        year = data.get('vehicle_year')
        if 'vehicle_year' not in errors and year is not None:
            try:
                year = int(year)
            except (TypeError, ValueError):
                year = None
            if year is None or year < BusinessRules.MIN_VEHICLE_YEAR:
                errors['vehicle_year'] = [
                    ErrorMessages.INVALID_VEHICLE_YEAR.format(min_year=BusinessRules.MIN_VEHICLE_YEAR)
                ]
        return errors

    @staticmethod
    def validate_create(data: Dict) -> None:
        errors = QuotationRequestValidator.validate_vehicle(data)

        if not (data.get('title') or '').strip():
            errors['title'] = ["Title is required"]

        if data.get('category') not in PartCategory.values:
            errors['category'] = [ErrorMessages.INVALID_CATEGORY.format(category=data.get('category'))]

        items = data.get('items') or []
        if not items:
            errors['items'] = [ErrorMessages.NO_ITEMS_PROVIDED]

        item_errors = []
        for index, item in enumerate(items):
            if not (item.get('name') or '').strip():
                item_errors.append(f"items[{index}]: {ErrorMessages.MISSING_ITEM_NAME}")
            quantity = item.get('quantity')
            if not _is_count(quantity, BusinessRules.MIN_ITEM_QUANTITY):
                item_errors.append(f"items[{index}]: {ErrorMessages.INVALID_QUANTITY}")
        if item_errors:
            errors['items'] = errors.get('items', []) + item_errors

        _raise_if(errors)

    @staticmethod
    def validate_update(data: Dict) -> None:
        not_editable = sorted(set(data) - set(BusinessRules.EDITABLE_REQUEST_FIELDS))
        if not_editable:
            raise ValidationError(
                ErrorMessages.NON_EDITABLE_FIELDS.format(fields=', '.join(not_editable)),
                errors={field: ["This field cannot be edited"] for field in not_editable}
            )

        errors = QuotationRequestValidator.validate_vehicle(data, partial=True)
        if 'title' in data and not (data.get('title') or '').strip():
            errors['title'] = ["Title is required"]
        _raise_if(errors)


class OfferValidator:
    """Validation rules for store offers"""

    @staticmethod
    def validate_create(data: Dict) -> None:
        """Payload-only checks, run before the request is loaded or locked."""
        errors = {}

        delivery_days = data.get('delivery_days')
        if delivery_days is not None and not _is_count(delivery_days, 0):
            errors['delivery_days'] = [ErrorMessages.NEGATIVE_DELIVERY_DAYS]

        items = data.get('items') or []
        if not items:
            errors['items'] = [ErrorMessages.NO_ITEMS_PROVIDED]

        item_errors = []
        for index, item in enumerate(items):
            if item.get('request_item_id') is None and not (item.get('name') or '').strip():
                item_errors.append(f"items[{index}]: {ErrorMessages.MISSING_ITEM_NAME}")

            quantity = item.get('quantity')
            if quantity is not None and not _is_count(quantity, BusinessRules.MIN_ITEM_QUANTITY):
                item_errors.append(f"items[{index}]: {ErrorMessages.INVALID_QUANTITY}")

            try:
                unit_price = Decimal(str(item.get('unit_price')))
            except (InvalidOperation, ValueError):
                unit_price = None
            if unit_price is None or not unit_price.is_finite() or unit_price < 0:
                item_errors.append(f"items[{index}]: {ErrorMessages.NEGATIVE_PRICE}")
        if item_errors:
            errors['items'] = errors.get('items', []) + item_errors

        _raise_if(errors)

    @staticmethod
    def validate_request_items(data: Dict, request_item_ids: Iterable[int]) -> None:
        """Every referenced request item must belong to the request being answered."""
        request_item_ids = set(request_item_ids)
        item_errors = [
            f"items[{index}]: " + ErrorMessages.ITEM_NOT_IN_REQUEST.format(item_id=item['request_item_id'])
            for index, item in enumerate(data.get('items') or [])
            if item.get('request_item_id') is not None and item['request_item_id'] not in request_item_ids
        ]
        _raise_if({'items': item_errors} if item_errors else {})

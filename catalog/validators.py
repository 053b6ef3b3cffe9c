from decimal import Decimal, InvalidOperation
from typing import Dict

from project.exceptions import ValidationError
from quotations.enums import PartCategory
from .enums import CatalogErrorMessages, CatalogRules


class PartValidator:
    """Field rules for catalog parts; partial=True checks only the given fields"""

    @staticmethod
    def validate(data: Dict, partial: bool = False) -> None:
        errors = {}

        for field in CatalogRules.REQUIRED_FIELDS:
            if partial and field not in data:
                continue
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field] = [CatalogErrorMessages.MISSING_FIELD.format(field=field.replace('_', ' ').capitalize())]

        if 'category' in data and 'category' not in errors and data['category'] not in PartCategory.values:
            errors['category'] = [CatalogErrorMessages.INVALID_CATEGORY.format(category=data['category'])]

        if 'base_price' in data and 'base_price' not in errors:
            try:
                price = Decimal(str(data['base_price']))
            except (InvalidOperation, ValueError):
                price = None
            if price is None or not price.is_finite() or price < 0:
                errors['base_price'] = [CatalogErrorMessages.NEGATIVE_PRICE]

        stock = data.get('stock', 0)
        if not isinstance(stock, int) or isinstance(stock, bool) or stock < 0:
            errors['stock'] = [CatalogErrorMessages.NEGATIVE_STOCK]

        if errors:
            raise ValidationError(next(iter(errors.values()))[0], errors=errors)

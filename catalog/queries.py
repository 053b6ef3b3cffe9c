from dataclasses import dataclass
from typing import Optional

from django.db.models import Q

from project.exceptions import ValidationError
from quotations.enums import PartCategory
from .enums import CatalogRules


@dataclass(frozen=True)
class PartSearch:
    """
    Catalog search across every store.

    `query` matches name, code, brand or description (case-insensitive);
    `brand` is a case-insensitive substring; `in_stock` True keeps parts with
    stock, False keeps the sold-out ones. Without `order_by` the newest parts
    come first.
    """
    query: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    store_id: Optional[int] = None
    in_stock: Optional[bool] = None
    limit: int = CatalogRules.DEFAULT_SEARCH_LIMIT
    offset: int = 0
    order_by: Optional[str] = None
    order: str = 'asc'

    def __post_init__(self):
        if self.category is not None and self.category not in PartCategory.values:
            raise ValidationError(f"Unknown category '{self.category}'")
        if not 1 <= self.limit <= CatalogRules.MAX_SEARCH_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {CatalogRules.MAX_SEARCH_LIMIT}")
        if self.offset < 0:
            raise ValidationError("Offset must be zero or greater")
        if self.order_by is not None and self.order_by not in CatalogRules.ORDERING_FIELDS:
            raise ValidationError(f"Cannot order by '{self.order_by}'")
        if self.order not in CatalogRules.ORDER_DIRECTIONS:
            raise ValidationError(f"Unknown order '{self.order}'")

    def ordering(self):
        if not self.order_by:
            return ['-created_at', '-id']
        prefix = '-' if self.order == 'desc' else ''
        return [f'{prefix}{self.order_by}', f'{prefix}id']

    def apply(self, queryset):
        if self.query:
            queryset = queryset.filter(
                Q(name__icontains=self.query)
                | Q(code__icontains=self.query)
                | Q(brand__icontains=self.query)
                | Q(description__icontains=self.query)
            )
        if self.brand:
            queryset = queryset.filter(brand__icontains=self.brand)
        if self.category:
            queryset = queryset.filter(category=self.category)
        if self.store_id is not None:
            queryset = queryset.filter(store_id=self.store_id)
        if self.in_stock is True:
            queryset = queryset.filter(stock__gt=0)
        elif self.in_stock is False:
            queryset = queryset.filter(stock=0)
        return queryset.order_by(*self.ordering())[self.offset:self.offset + self.limit]

"""
Explicit optional-field query objects for list endpoints.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from project.exceptions import ValidationError
from .enums import BusinessRules, PartCategory, RequestStatus


def paginate(queryset, page, page_size):
    """Slice a queryset to one 1-based page."""
    start = (page - 1) * page_size
    return queryset[start:start + page_size]


@dataclass(frozen=True)
class RequestQuery:
    """
    Filters for listing quotation requests.

    Every field is optional: no status/category/date filter, first page of
    DEFAULT_PAGE_SIZE rows, newest first.
    """
    status: Optional[str] = None
    category: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    page: int = 1
    page_size: int = BusinessRules.DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.status is not None and self.status not in RequestStatus.values:
            raise ValidationError(f"Unknown status '{self.status}'")
        if self.category is not None and self.category not in PartCategory.values:
            raise ValidationError(f"Unknown category '{self.category}'")
        if self.page < 1:
            raise ValidationError("Page must be 1 or greater")
        if not 1 <= self.page_size <= BusinessRules.MAX_PAGE_SIZE:
            raise ValidationError(f"Page size must be between 1 and {BusinessRules.MAX_PAGE_SIZE}")

    def apply(self, queryset):
        if self.status:
            queryset = queryset.filter(status=self.status)
        if self.category:
            queryset = queryset.filter(category=self.category)
        if self.created_from:
            queryset = queryset.filter(created_at__gte=self.created_from)
        if self.created_to:
            queryset = queryset.filter(created_at__lte=self.created_to)
        return paginate(queryset.order_by('-created_at', '-id'), self.page, self.page_size)

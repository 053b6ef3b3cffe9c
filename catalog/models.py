from django.db import models

from partners.models import Store
from quotations.enums import PartCategory


class Part(models.Model):
    """A part a store lists in its catalog"""
    store = models.ForeignKey(Store, on_delete=models.CASCADE, related_name='parts')
    code = models.CharField(max_length=50, help_text="Store's own part code, unique per store")
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    brand = models.CharField(max_length=100)
    vehicle_model = models.CharField(max_length=100, blank=True, help_text="Compatible vehicles, e.g. Corolla 2015-2020")
    category = models.CharField(max_length=30, choices=PartCategory.choices)

    base_price = models.DecimalField(max_digits=12, decimal_places=2)
    stock = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['category', 'brand'], name='part_category_brand_idx'),
        ]
        constraints = [
            models.UniqueConstraint(fields=['store', 'code'], name='unique_part_code_per_store'),
            models.CheckConstraint(
                condition=models.Q(base_price__gte=0),
                name='part_base_price_non_negative'
            ),
        ]

    def __str__(self):
        return f"{self.code} {self.name} ({self.store.name})"

    @property
    def in_stock(self):
        return self.stock > 0

from django.conf import settings
from django.db import models


class Workshop(models.Model):
    """Auto-repair workshop: posts parts requests (the requester side)"""
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='workshop',
        limit_choices_to={'role': 'workshop'}
    )
    name = models.CharField(max_length=150)
    tax_id = models.CharField(max_length=20, unique=True)
    phone_number = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100)
    # Matched against Store.coverage_regions
    region = models.CharField(max_length=100)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.city}, {self.region})"


class Store(models.Model):
    """Parts store: sees matching requests and submits offers (the supplier side)"""
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='store',
        limit_choices_to={'role': 'store'}
    )
    name = models.CharField(max_length=150)
    tax_id = models.CharField(max_length=20, unique=True)
    phone_number = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100)
    region = models.CharField(max_length=100)

    coverage_regions = models.JSONField(default=list, blank=True, help_text="Regions this store delivers to")
    categories = models.JSONField(default=list, blank=True, help_text="Part categories served; empty means all")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.city})"

    def covers_region(self, region):
        return region in (self.coverage_regions or [])

    def serves_category(self, category):
        return not self.categories or category in self.categories

from django.conf import settings
from django.db import models
from django.utils import timezone

from partners.models import Store, Workshop
from quotations.models import Offer, QuotationRequest
from .enums import ActorRole, OrderStatus


class Order(models.Model):
    # Order identification
    order_number = models.CharField(max_length=30, unique=True)

    # One order per request, enforced by the database
    request = models.OneToOneField(QuotationRequest, on_delete=models.PROTECT, related_name='order')
    offer = models.OneToOneField(Offer, on_delete=models.PROTECT, related_name='order')

    # Participants
    workshop = models.ForeignKey(Workshop, on_delete=models.PROTECT, related_name='orders')
    store = models.ForeignKey(Store, on_delete=models.PROTECT, related_name='orders')

    # Sum of available offer items at the time of ordering
    total = models.DecimalField(max_digits=12, decimal_places=2)

    delivery_address = models.TextField()
    notes = models.TextField(blank=True)

    # Status and tracking
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    estimated_delivery_date = models.DateTimeField()
    delivered_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Order {self.order_number}"

    def save(self, *args, **kwargs):
        if not self.order_number:
            timestamp = timezone.now().strftime('%Y%m%d%H%M%S')
            self.order_number = f"ORD{timestamp}{self.request_id}"
        super().save(*args, **kwargs)


class OrderStatusHistory(models.Model):
    """Track order status changes"""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='status_history')
    previous_status = models.CharField(max_length=20, blank=True)
    new_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True
    )
    actor_role = models.CharField(max_length=20, choices=ActorRole.choices)
    notes = models.TextField(blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['timestamp', 'id']
        verbose_name_plural = 'order status history'

    def __str__(self):
        return f"Order {self.order_id}: {self.previous_status or '-'} → {self.new_status}"

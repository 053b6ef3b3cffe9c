from django.core.validators import MinValueValidator
from django.db import models

from partners.models import Store, Workshop
from .enums import BusinessRules, PartCategory, RequestStatus


class QuotationRequest(models.Model):
    """Workshop's parts request, open to offers from matching stores"""
    workshop = models.ForeignKey(
        Workshop,
        on_delete=models.CASCADE,
        related_name='quotation_requests'
    )

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=30, choices=PartCategory.choices)

    # Vehicle the parts are for
    vehicle_make = models.CharField(max_length=50)
    vehicle_model = models.CharField(max_length=50)
    vehicle_year = models.PositiveIntegerField(validators=[MinValueValidator(BusinessRules.MIN_VEHICLE_YEAR)])
    vehicle_plate = models.CharField(max_length=20, blank=True)

    # Status
    status = models.CharField(max_length=20, choices=RequestStatus.choices, default=RequestStatus.OPEN)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    closed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['status', 'category'], name='quotation_status_category_idx'),
        ]

    def __str__(self):
        return f"Quotation Request {self.id} - {self.title} ({self.status})"

    @property
    def is_open(self):
        return self.status == RequestStatus.OPEN

    def get_total_offers(self):
        """Get total number of offers for this request"""
        return self.offers.count()


class QuotationRequestItem(models.Model):
    """One part line of a quotation request. Not editable after creation."""
    request = models.ForeignKey(
        QuotationRequest,
        on_delete=models.CASCADE,
        related_name='items'
    )
    code = models.CharField(max_length=50, blank=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    brand = models.CharField(max_length=100, blank=True)
    image_key = models.CharField(max_length=300, blank=True, help_text="Storage key of the attached image")
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(BusinessRules.MIN_ITEM_QUANTITY)]
    )

    class Meta:
        ordering = ['id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name='quotation_request_item_quantity_positive'
            )
        ]

    def __str__(self):
        return f"{self.quantity}x {self.name} (Request {self.request_id})"


class QuotationRequestView(models.Model):
    """First time a store opened a request's detail. Drives the 'unseen' badge."""
    request = models.ForeignKey(
        QuotationRequest,
        on_delete=models.CASCADE,
        related_name='views'
    )
    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name='viewed_requests'
    )
    viewed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['request', 'store'], name='unique_request_view_per_store')
        ]

    def __str__(self):
        return f"Request {self.request_id} seen by store {self.store_id}"


class Offer(models.Model):
    """Store's priced response to a quotation request"""
    # PROTECT: a request with offers can never be deleted out from under them
    request = models.ForeignKey(
        QuotationRequest,
        on_delete=models.PROTECT,
        related_name='offers'
    )
    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name='offers'
    )

    # 0 means immediate delivery
    delivery_days = models.PositiveIntegerField()
    comments = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['request', 'store'], name='unique_offer_per_request_and_store')
        ]

    def __str__(self):
        return f"Offer {self.id} by store {self.store_id} for request {self.request_id}"


class OfferItem(models.Model):
    """Priced line of an offer, optionally answering a specific request item"""
    offer = models.ForeignKey(
        Offer,
        on_delete=models.CASCADE,
        related_name='items'
    )
    request_item = models.ForeignKey(
        QuotationRequestItem,
        on_delete=models.SET_NULL,
        related_name='offer_items',
        null=True, blank=True
    )
    name = models.CharField(max_length=200)
    brand = models.CharField(max_length=100, blank=True)
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(BusinessRules.MIN_ITEM_QUANTITY)]
    )
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    available = models.BooleanField(default=True)
    note = models.TextField(blank=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name='offer_item_quantity_positive'
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name='offer_item_unit_price_non_negative'
            ),
        ]

    def __str__(self):
        return f"{self.quantity}x {self.name} - {self.unit_price} (Offer {self.offer_id})"

    def get_total_price(self):
        """Calculate total price for this item"""
        return self.quantity * self.unit_price

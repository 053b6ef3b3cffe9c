"""
Enums and choices for orders app.
"""
from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    DELIVERED = 'delivered', 'Delivered'
    CANCELLED = 'cancelled', 'Cancelled'


class ActorRole(models.TextChoices):
    """Who is acting on an order. Passed explicitly to every transition."""
    REQUESTER = 'requester', 'Requester'
    SUPPLIER = 'supplier', 'Supplier'
    ADMIN = 'admin', 'Admin'


class OrderErrorMessages:
    OFFER_NOT_FOUND = "Offer not found"
    ORDER_NOT_FOUND = "Order not found"
    NOT_YOUR_REQUEST = "You can only create orders for your own quotation requests"
    ORDER_EXISTS = "An order already exists for this quotation request"
    REQUEST_NOT_OPEN = "Quotation request is not open"
    NOT_A_PARTY = "You can only modify your own orders"
    ROLE_CANNOT_SET = "Role '{role}' cannot set status to '{status}'"
    INVALID_TRANSITION = "Invalid status transition from '{current}' to '{new}'"
    CANNOT_CANCEL = "Cannot cancel an order with status '{status}'"
    UNKNOWN_STATUS = "Unknown order status '{status}'"
    MISSING_DELIVERY_ADDRESS = "Delivery address is required"

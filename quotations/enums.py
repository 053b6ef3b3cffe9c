"""
Enums and choices for quotations app.
Centralizes all status choices and business rules.
"""
from django.db import models


class RequestStatus(models.TextChoices):
    """Status choices for QuotationRequest model"""
    OPEN = 'open', 'Open'
    CLOSED = 'closed', 'Closed'
    CANCELLED = 'cancelled', 'Cancelled'


class PartCategory(models.TextChoices):
    """Category of parts a request needs; drives supplier matching"""
    BRAKES = 'Brakes', 'Brakes'
    ENGINE = 'Engine', 'Engine'
    SUSPENSION = 'Suspension', 'Suspension'
    TRANSMISSION = 'Transmission', 'Transmission'
    ELECTRICAL = 'Electrical', 'Electrical System'
    BODYWORK = 'Bodywork', 'Bodywork'
    TIRES = 'Tires', 'Tires'
    LUBRICANTS = 'Lubricants', 'Oils/Lubricants'
    PAINT = 'Paint', 'Paint'
    OTHER = 'Other', 'Other'


class BusinessRules:
    """Business rules and constants"""

    MIN_VEHICLE_YEAR = 1900
    MIN_ITEM_QUANTITY = 1
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    # Fields a workshop may still edit while the request is open
    EDITABLE_REQUEST_FIELDS = ('title', 'description', 'vehicle_make', 'vehicle_model', 'vehicle_year', 'vehicle_plate')

    TERMINAL_STATUSES = [RequestStatus.CLOSED, RequestStatus.CANCELLED]

    @staticmethod
    def is_open(status):
        return status == RequestStatus.OPEN

    @staticmethod
    def is_final_status(status):
        """Check if status is final (no further changes allowed)"""
        return status in BusinessRules.TERMINAL_STATUSES


class ErrorMessages:
    """Centralized error messages for consistency"""

    # Lookup errors
    REQUEST_NOT_FOUND = "Quotation request not found"
    OFFER_NOT_FOUND = "Offer not found"
    STORE_NOT_FOUND = "Store not found"
    WORKSHOP_NOT_FOUND = "Workshop not found"

    # Validation errors
    NO_ITEMS_PROVIDED = "At least one item is required"
    INVALID_QUANTITY = "Quantity must be at least 1"
    NEGATIVE_PRICE = "Unit price cannot be negative"
    NEGATIVE_DELIVERY_DAYS = "Delivery days cannot be negative"
    MISSING_VEHICLE_FIELD = "Vehicle {field} is required"
    INVALID_VEHICLE_YEAR = "Vehicle year must be {min_year} or later"
    INVALID_CATEGORY = "Unknown category '{category}'"
    ITEM_NOT_IN_REQUEST = "Item {item_id} does not belong to this quotation request"
    MISSING_ITEM_NAME = "Item name is required"
    NON_EDITABLE_FIELDS = "Fields cannot be edited: {fields}"

    # Business rule errors
    REQUEST_NOT_OPEN = "Quotation request is not open"
    REQUEST_HAS_OFFERS = "Cannot delete a quotation request with existing offers"
    REQUEST_HAS_ORDER = "An order already exists for this quotation request"
    DUPLICATE_OFFER = "You have already submitted an offer for this quotation request"
    OFFER_HAS_ORDER = "Cannot withdraw an offer with an existing order"

    # Permission errors
    NOT_YOUR_REQUEST = "Not authorized to modify this quotation request"
    NOT_YOUR_OFFER = "Not authorized to modify this offer"


class ResponseMessages:
    """Centralized success messages for consistency"""

    REQUEST_CREATED = "Quotation request created"
    REQUEST_UPDATED = "Quotation request updated"
    REQUEST_CLOSED = "Quotation request closed"
    REQUEST_CANCELLED = "Quotation request cancelled"
    REQUEST_DELETED = "Quotation request deleted"
    REQUEST_MARKED_SEEN = "Quotation request marked as seen"
    OFFER_CREATED = "Offer submitted"
    OFFER_WITHDRAWN = "Offer withdrawn"
    NO_OFFERS_FOUND = "No offers found for this quotation request"
    OFFERS_RANKED = "Ranked {count} offers"

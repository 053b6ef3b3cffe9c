"""
Messages and limits for store part catalogs.
"""


class CatalogRules:
    DEFAULT_SEARCH_LIMIT = 50
    MAX_SEARCH_LIMIT = 100

    # Fields a search may be ordered by
    ORDERING_FIELDS = ('name', 'base_price', 'stock', 'created_at')
    ORDER_DIRECTIONS = ('asc', 'desc')

    PART_FIELDS = ('code', 'name', 'description', 'brand', 'vehicle_model', 'category', 'base_price', 'stock')
    REQUIRED_FIELDS = ('code', 'name', 'brand', 'category', 'base_price')


class CatalogErrorMessages:
    PART_NOT_FOUND = "Part not found"
    STORE_NOT_FOUND = "Store not found"
    NOT_YOUR_PART = "You can only change parts in your own catalog"
    DUPLICATE_CODE = "Part code already exists in your catalog"
    MISSING_FIELD = "{field} is required"
    INVALID_CATEGORY = "Invalid category: {category}"
    NEGATIVE_PRICE = "Base price must be zero or greater"
    NEGATIVE_STOCK = "Stock must be a whole number, zero or greater"


class CatalogResponseMessages:
    PART_CREATED = "Part added to catalog"
    PART_UPDATED = "Part updated"
    PART_DELETED = "Part removed from catalog"

from rest_framework import serializers

from catalog.enums import CatalogRules
from catalog.models import Part
from quotations.enums import PartCategory


class PartSerializer(serializers.ModelSerializer):
    store_name = serializers.CharField(source='store.name', read_only=True)
    store_city = serializers.CharField(source='store.city', read_only=True)
    store_region = serializers.CharField(source='store.region', read_only=True)
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Part
        fields = [
            'id', 'store', 'store_name', 'store_city', 'store_region',
            'code', 'name', 'description', 'brand', 'vehicle_model', 'category',
            'base_price', 'stock', 'in_stock', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PartInputSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    brand = serializers.CharField(max_length=100)
    vehicle_model = serializers.CharField(max_length=100, required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=PartCategory.choices)
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(min_value=0, required=False)


class PartSearchQuerySerializer(serializers.Serializer):
    query = serializers.CharField(required=False)
    brand = serializers.CharField(required=False)
    category = serializers.ChoiceField(choices=PartCategory.choices, required=False)
    store_id = serializers.IntegerField(required=False)
    in_stock = serializers.BooleanField(required=False, allow_null=True, default=None)
    limit = serializers.IntegerField(
        min_value=1, max_value=CatalogRules.MAX_SEARCH_LIMIT, default=CatalogRules.DEFAULT_SEARCH_LIMIT
    )
    offset = serializers.IntegerField(min_value=0, default=0)
    order_by = serializers.ChoiceField(choices=CatalogRules.ORDERING_FIELDS, required=False)
    order = serializers.ChoiceField(choices=CatalogRules.ORDER_DIRECTIONS, default='asc')

from rest_framework import serializers

from authentication.models import UserRole
from partners.models import Store, Workshop
from quotations.enums import PartCategory


class WorkshopSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Workshop
        fields = [
            'id', 'email', 'name', 'tax_id', 'phone_number', 'address',
            'city', 'region', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'is_active', 'created_at', 'updated_at']


class StoreSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source='user.email', read_only=True)
    coverage_regions = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    categories = serializers.ListField(child=serializers.ChoiceField(choices=PartCategory.choices), required=False)

    class Meta:
        model = Store
        fields = [
            'id', 'email', 'name', 'tax_id', 'phone_number', 'address', 'city',
            'region', 'coverage_regions', 'categories', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'is_active', 'created_at', 'updated_at']


def serializer_for_role(role):
    return StoreSerializer if role == UserRole.STORE else WorkshopSerializer

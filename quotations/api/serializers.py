from rest_framework import serializers

from project.storage import ALLOWED_CONTENT_TYPES, sign_for_read
from quotations.enums import BusinessRules, ErrorMessages, PartCategory, RequestStatus
from quotations.models import Offer, OfferItem, QuotationRequest, QuotationRequestItem


class QuotationRequestItemSerializer(serializers.ModelSerializer):
    """Serializer for QuotationRequestItem model"""
    image_url = serializers.SerializerMethodField()

    class Meta:
        model = QuotationRequestItem
        fields = ['id', 'code', 'name', 'description', 'brand', 'image_key', 'image_url', 'quantity']
        read_only_fields = fields

    def get_image_url(self, obj):
        return sign_for_read(obj.image_key)


class QuotationRequestSerializer(serializers.ModelSerializer):
    """Serializer for QuotationRequest model"""
    workshop_name = serializers.CharField(source='workshop.name', read_only=True)
    region = serializers.CharField(source='workshop.region', read_only=True)
    items = QuotationRequestItemSerializer(many=True, read_only=True)
    offers_count = serializers.SerializerMethodField()

    class Meta:
        model = QuotationRequest
        fields = [
            'id', 'workshop', 'workshop_name', 'region', 'title', 'description', 'category',
            'vehicle_make', 'vehicle_model', 'vehicle_year', 'vehicle_plate',
            'status', 'items', 'offers_count', 'created_at', 'updated_at', 'closed_at'
        ]
        read_only_fields = fields

    def get_offers_count(self, obj):
        offers_count = getattr(obj, 'offers_count', None)
        return obj.get_total_offers() if offers_count is None else offers_count


class VisibleRequestSerializer(QuotationRequestSerializer):
    """A request as a store sees it in its feed"""
    seen = serializers.BooleanField(read_only=True)

    class Meta(QuotationRequestSerializer.Meta):
        fields = QuotationRequestSerializer.Meta.fields + ['seen']
        read_only_fields = fields


class RequestItemInputSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50, required=False, allow_blank=True)
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True)
    image_key = serializers.CharField(max_length=300, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=BusinessRules.MIN_ITEM_QUANTITY, default=1)


class QuotationRequestCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=PartCategory.choices)
    vehicle_make = serializers.CharField(max_length=50)
    vehicle_model = serializers.CharField(max_length=50)
    vehicle_year = serializers.IntegerField(min_value=BusinessRules.MIN_VEHICLE_YEAR)
    vehicle_plate = serializers.CharField(max_length=20, required=False, allow_blank=True)
    items = RequestItemInputSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError(ErrorMessages.NO_ITEMS_PROVIDED)
        return value


class QuotationRequestUpdateSerializer(serializers.Serializer):
    """Only the descriptive fields of an open request can change"""
    title = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    vehicle_make = serializers.CharField(max_length=50, required=False)
    vehicle_model = serializers.CharField(max_length=50, required=False)
    vehicle_year = serializers.IntegerField(min_value=BusinessRules.MIN_VEHICLE_YEAR, required=False)
    vehicle_plate = serializers.CharField(max_length=20, required=False, allow_blank=True)

    def validate(self, attrs):
        not_editable = sorted(set(self.initial_data) - set(BusinessRules.EDITABLE_REQUEST_FIELDS))
        if not_editable:
            raise serializers.ValidationError(
                {field: ["This field cannot be edited"] for field in not_editable}
            )
        return attrs


class RequestListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=RequestStatus.choices, required=False)
    category = serializers.ChoiceField(choices=PartCategory.choices, required=False)
    created_from = serializers.DateTimeField(required=False)
    created_to = serializers.DateTimeField(required=False)
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(
        min_value=1, max_value=BusinessRules.MAX_PAGE_SIZE, default=BusinessRules.DEFAULT_PAGE_SIZE
    )


class UploadTargetSerializer(serializers.Serializer):
    filename = serializers.CharField(max_length=200)
    content_type = serializers.ChoiceField(choices=ALLOWED_CONTENT_TYPES)


class OfferItemSerializer(serializers.ModelSerializer):
    """Serializer for OfferItem model"""
    total_price = serializers.SerializerMethodField()

    class Meta:
        model = OfferItem
        fields = [
            'id', 'request_item', 'name', 'brand', 'quantity',
            'unit_price', 'available', 'note', 'total_price'
        ]
        read_only_fields = fields

    def get_total_price(self, obj):
        return str(obj.get_total_price())


class OfferSerializer(serializers.ModelSerializer):
    store_name = serializers.CharField(source='store.name', read_only=True)
    request_title = serializers.CharField(source='request.title', read_only=True)
    items = OfferItemSerializer(many=True, read_only=True)

    class Meta:
        model = Offer
        fields = [
            'id', 'request', 'request_title', 'store', 'store_name',
            'delivery_days', 'comments', 'items', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class OfferItemInputSerializer(serializers.Serializer):
    """Name, brand and quantity fall back to the referenced request item"""
    request_item_id = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    brand = serializers.CharField(max_length=100, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=BusinessRules.MIN_ITEM_QUANTITY, required=False)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    available = serializers.BooleanField(required=False, default=True)
    note = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs.get('request_item_id') is None and not (attrs.get('name') or '').strip():
            raise serializers.ValidationError({'name': [ErrorMessages.MISSING_ITEM_NAME]})
        return attrs


class OfferCreateSerializer(serializers.Serializer):
    delivery_days = serializers.IntegerField(min_value=0, required=False)
    comments = serializers.CharField(required=False, allow_blank=True)
    items = OfferItemInputSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError(ErrorMessages.NO_ITEMS_PROVIDED)
        return value


class OfferSummarySerializer(serializers.Serializer):
    offer_id = serializers.IntegerField()
    store_id = serializers.IntegerField()
    store_name = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    delivery_days = serializers.IntegerField()
    covered_count = serializers.IntegerField()
    total_items = serializers.IntegerField()
    coverage = serializers.FloatField()
    comments = serializers.CharField()
    created_at = serializers.DateTimeField()


class OfferRankingSerializer(serializers.Serializer):
    request_id = serializers.IntegerField()
    best_offer_id = serializers.IntegerField(allow_null=True)
    offers = OfferSummarySerializer(many=True)

from django.contrib import admin
from quotations.models import Offer, OfferItem, QuotationRequest, QuotationRequestItem, QuotationRequestView


class QuotationRequestItemInline(admin.TabularInline):
    model = QuotationRequestItem
    extra = 0


@admin.register(QuotationRequest)
class QuotationRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'workshop', 'category', 'vehicle_make', 'vehicle_model', 'status', 'created_at']
    list_filter = ['status', 'category', 'created_at']
    search_fields = ['title', 'workshop__name', 'vehicle_make', 'vehicle_model', 'vehicle_plate']
    readonly_fields = ['created_at', 'updated_at', 'closed_at']
    inlines = [QuotationRequestItemInline]


class OfferItemInline(admin.TabularInline):
    model = OfferItem
    extra = 0
    readonly_fields = ['get_total_price']


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ['id', 'request', 'store', 'delivery_days', 'created_at']
    list_filter = ['created_at']
    search_fields = ['request__title', 'store__name']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [OfferItemInline]


@admin.register(QuotationRequestView)
class QuotationRequestViewAdmin(admin.ModelAdmin):
    list_display = ['id', 'request', 'store', 'viewed_at']
    search_fields = ['request__title', 'store__name']
    readonly_fields = ['viewed_at']

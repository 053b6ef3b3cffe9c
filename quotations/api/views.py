import logging

from rest_framework import status

from authentication.models import UserRole
from partners.services import get_store_for_user, get_workshop_for_user
from project.exceptions import AuthorizationError
from project.permissions import IsMarketplaceUser, IsStore, IsWorkshop, IsWorkshopOrAdmin
from project.storage import store_blob
from project.utils import StandardizedAPIView
from quotations.api.serializers import (
    OfferCreateSerializer, OfferRankingSerializer, OfferSerializer, OfferSummarySerializer,
    QuotationRequestCreateSerializer, QuotationRequestSerializer, QuotationRequestUpdateSerializer,
    RequestListQuerySerializer, UploadTargetSerializer, VisibleRequestSerializer
)
from quotations.enums import ErrorMessages, ResponseMessages
from quotations.matching import MatchingEngine
from quotations.queries import RequestQuery
from quotations.ranking import OfferRankingService
from quotations.services import OfferService, RequestLifecycleService

logger = logging.getLogger(__name__)


def require_role(user, role, message):
    if user.role != role:
        raise AuthorizationError(message)


def ensure_request_owner_or_admin(user, quotation_request):
    """Offers and rankings of a request are only shown to its workshop and to admins"""
    if user.role == UserRole.ADMIN:
        return
    require_role(user, UserRole.WORKSHOP, ErrorMessages.NOT_YOUR_REQUEST)
    if get_workshop_for_user(user).pk != quotation_request.workshop_id:
        raise AuthorizationError(ErrorMessages.NOT_YOUR_REQUEST)


# Workshop: request lifecycle
class QuotationRequestListCreateView(StandardizedAPIView):
    """Workshop lists (admin: all) and creates quotation requests"""
    permission_classes = [IsWorkshopOrAdmin]

    def get(self, request, *args, **kwargs):
        query_serializer = RequestListQuerySerializer(data=request.query_params)
        if not query_serializer.is_valid():
            return self.validation_error_response(query_serializer.errors)

        workshop_id = None
        if request.user.role == UserRole.WORKSHOP:
            workshop_id = get_workshop_for_user(request.user).pk

        requests = RequestLifecycleService.list_requests(
            workshop_id=workshop_id, query=RequestQuery(**query_serializer.validated_data)
        )
        data = QuotationRequestSerializer(requests, many=True).data
        return self.success_response(data=data, message=f"Retrieved {len(data)} items")

    def post(self, request, *args, **kwargs):
        require_role(request.user, UserRole.WORKSHOP, "Only workshops can create quotation requests")

        serializer = QuotationRequestCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        workshop = get_workshop_for_user(request.user)
        quotation_request = RequestLifecycleService.create_request(workshop.pk, serializer.validated_data)
        return self.success_response(
            data=QuotationRequestSerializer(quotation_request).data,
            message=ResponseMessages.REQUEST_CREATED,
            status_code=status.HTTP_201_CREATED
        )


class QuotationRequestDetailView(StandardizedAPIView):
    """Read, edit or delete one quotation request"""
    permission_classes = [IsMarketplaceUser]

    def get(self, request, pk, *args, **kwargs):
        quotation_request = RequestLifecycleService.get_request(pk)
        if request.user.role == UserRole.WORKSHOP:
            ensure_request_owner_or_admin(request.user, quotation_request)
        return self.success_response(
            data=QuotationRequestSerializer(quotation_request).data,
            message="Retrieved successfully"
        )

    def patch(self, request, pk, *args, **kwargs):
        require_role(request.user, UserRole.WORKSHOP, ErrorMessages.NOT_YOUR_REQUEST)
        serializer = QuotationRequestUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        workshop = get_workshop_for_user(request.user)
        quotation_request = RequestLifecycleService.update_request(pk, workshop.pk, serializer.validated_data)
        return self.success_response(
            data=QuotationRequestSerializer(quotation_request).data,
            message=ResponseMessages.REQUEST_UPDATED
        )

    def delete(self, request, pk, *args, **kwargs):
        require_role(request.user, UserRole.WORKSHOP, ErrorMessages.NOT_YOUR_REQUEST)
        workshop = get_workshop_for_user(request.user)
        RequestLifecycleService.delete_request(pk, workshop.pk)
        return self.success_response(message=ResponseMessages.REQUEST_DELETED)


class QuotationRequestCloseView(StandardizedAPIView):
    permission_classes = [IsWorkshop]

    def post(self, request, pk, *args, **kwargs):
        workshop = get_workshop_for_user(request.user)
        quotation_request = RequestLifecycleService.close_request(pk, workshop.pk)
        return self.success_response(
            data=QuotationRequestSerializer(quotation_request).data,
            message=ResponseMessages.REQUEST_CLOSED
        )


class QuotationRequestCancelView(StandardizedAPIView):
    permission_classes = [IsWorkshop]

    def post(self, request, pk, *args, **kwargs):
        workshop = get_workshop_for_user(request.user)
        quotation_request = RequestLifecycleService.cancel_request(pk, workshop.pk)
        return self.success_response(
            data=QuotationRequestSerializer(quotation_request).data,
            message=ResponseMessages.REQUEST_CANCELLED
        )


class UploadTargetView(StandardizedAPIView):
    """Signed upload target for a request item image"""
    permission_classes = [IsWorkshop]

    def post(self, request, *args, **kwargs):
        serializer = UploadTargetSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        target = store_blob(serializer.validated_data['filename'], serializer.validated_data['content_type'])
        return self.success_response(data=target, status_code=status.HTTP_201_CREATED)


# Store: matching feed
class AvailableRequestsView(StandardizedAPIView):
    """Open requests matching the store's coverage and categories"""
    permission_classes = [IsStore]

    def get(self, request, *args, **kwargs):
        store = get_store_for_user(request.user)
        requests = MatchingEngine.visible_requests(store.pk, category=request.query_params.get('category'))
        data = VisibleRequestSerializer(requests, many=True).data
        return self.success_response(data=data, message=f"Retrieved {len(data)} items")


class UnseenCountView(StandardizedAPIView):
    permission_classes = [IsStore]

    def get(self, request, *args, **kwargs):
        store = get_store_for_user(request.user)
        return self.success_response(data={'unseen': MatchingEngine.unseen_count(store.pk)})


class MarkRequestSeenView(StandardizedAPIView):
    permission_classes = [IsStore]

    def post(self, request, pk, *args, **kwargs):
        store = get_store_for_user(request.user)
        MatchingEngine.mark_seen(pk, store.pk)
        return self.success_response(message=ResponseMessages.REQUEST_MARKED_SEEN)


# Offers
class RequestOffersView(StandardizedAPIView):
    """Workshop lists offers on its request, stores submit one"""
    permission_classes = [IsMarketplaceUser]

    def get(self, request, pk, *args, **kwargs):
        ensure_request_owner_or_admin(request.user, RequestLifecycleService.get_request(pk))
        offers = OfferService.list_for_request(pk)
        if not offers:
            return self.success_response(data=[], message=ResponseMessages.NO_OFFERS_FOUND)
        return self.success_response(
            data=OfferSerializer(offers, many=True).data,
            message=f"Retrieved {len(offers)} items"
        )

    def post(self, request, pk, *args, **kwargs):
        require_role(request.user, UserRole.STORE, "Only stores can submit offers")

        serializer = OfferCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        store = get_store_for_user(request.user)
        offer = OfferService.create_offer(store.pk, pk, serializer.validated_data)
        return self.success_response(
            data=OfferSerializer(offer).data,
            message=ResponseMessages.OFFER_CREATED,
            status_code=status.HTTP_201_CREATED
        )


class OfferRankingView(StandardizedAPIView):
    """Best-offer ranking: coverage, then total, then delivery days"""
    permission_classes = [IsWorkshopOrAdmin]

    def get(self, request, pk, *args, **kwargs):
        ensure_request_owner_or_admin(request.user, RequestLifecycleService.get_request(pk))
        ranking = OfferRankingService.rank_offers(pk)
        return self.success_response(
            data=OfferRankingSerializer(ranking).data,
            message=ResponseMessages.OFFERS_RANKED.format(count=len(ranking.offers))
        )


class OfferComparisonView(StandardizedAPIView):
    """Price-first comparison: total only, cheapest first"""
    permission_classes = [IsWorkshopOrAdmin]

    def get(self, request, pk, *args, **kwargs):
        ensure_request_owner_or_admin(request.user, RequestLifecycleService.get_request(pk))
        summaries = OfferRankingService.compare_offers(pk)
        return self.success_response(data=OfferSummarySerializer(summaries, many=True).data)


class StoreOffersView(StandardizedAPIView):
    permission_classes = [IsStore]

    def get(self, request, *args, **kwargs):
        store = get_store_for_user(request.user)
        offers = OfferService.list_for_store(store.pk)
        return self.success_response(
            data=OfferSerializer(offers, many=True).data,
            message=f"Retrieved {len(offers)} items"
        )


class OfferDetailView(StandardizedAPIView):
    permission_classes = [IsMarketplaceUser]

    def get(self, request, pk, *args, **kwargs):
        offer = OfferService.get_offer(pk)
        if request.user.role == UserRole.STORE:
            if get_store_for_user(request.user).pk != offer.store_id:
                raise AuthorizationError(ErrorMessages.NOT_YOUR_OFFER)
        else:
            ensure_request_owner_or_admin(request.user, offer.request)
        return self.success_response(data=OfferSerializer(offer).data, message="Retrieved successfully")

    def delete(self, request, pk, *args, **kwargs):
        require_role(request.user, UserRole.STORE, ErrorMessages.NOT_YOUR_OFFER)
        store = get_store_for_user(request.user)
        OfferService.withdraw_offer(pk, store.pk)
        return self.success_response(message=ResponseMessages.OFFER_WITHDRAWN)

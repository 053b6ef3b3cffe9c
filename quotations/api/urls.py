from django.urls import path
from quotations.api import views

urlpatterns = [
    # Workshop APIs
    path('requests/', views.QuotationRequestListCreateView.as_view(), name='quotation-requests'),
    path('requests/<int:pk>/', views.QuotationRequestDetailView.as_view(), name='quotation-request-detail'),
    path('requests/<int:pk>/close/', views.QuotationRequestCloseView.as_view(), name='close-quotation-request'),
    path('requests/<int:pk>/cancel/', views.QuotationRequestCancelView.as_view(), name='cancel-quotation-request'),
    path('uploads/', views.UploadTargetView.as_view(), name='upload-target'),

    # Store APIs
    path('requests/available/', views.AvailableRequestsView.as_view(), name='available-requests'),
    path('requests/unseen-count/', views.UnseenCountView.as_view(), name='unseen-requests-count'),
    path('requests/<int:pk>/view/', views.MarkRequestSeenView.as_view(), name='mark-request-seen'),
    path('offers/mine/', views.StoreOffersView.as_view(), name='store-offers'),

    # Offer APIs
    path('requests/<int:pk>/offers/', views.RequestOffersView.as_view(), name='request-offers'),
    path('requests/<int:pk>/ranking/', views.OfferRankingView.as_view(), name='offer-ranking'),
    path('requests/<int:pk>/compare/', views.OfferComparisonView.as_view(), name='offer-comparison'),
    path('offers/<int:pk>/', views.OfferDetailView.as_view(), name='offer-detail'),
]

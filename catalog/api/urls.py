from django.urls import path
from catalog.api import views

urlpatterns = [
    path('parts/', views.PartListCreateView.as_view(), name='part-list'),
    path('parts/mine/', views.StorePartsView.as_view(), name='store-parts'),
    path('parts/<int:pk>/', views.PartDetailView.as_view(), name='part-detail'),
]

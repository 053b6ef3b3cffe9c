from django.urls import path
from partners.api import views

urlpatterns = [
    path('profile/', views.ProfileView.as_view(), name='partner-profile'),

    # Admin
    path('workshops/', views.WorkshopListView.as_view(), name='workshop-list'),
    path('stores/', views.StoreListView.as_view(), name='store-list'),
]

from django.urls import path
from orders.api import views

urlpatterns = [
    # Order Creation and Listing
    path('', views.OrderListView.as_view(), name='order-list'),
    path('create/', views.OrderCreateView.as_view(), name='create-order'),
    path('<int:pk>/', views.OrderDetailView.as_view(), name='order-detail'),

    # Order Management
    path('<int:order_id>/update-status/', views.OrderStatusUpdateView.as_view(), name='update-order-status'),
    path('<int:order_id>/cancel/', views.OrderCancelView.as_view(), name='cancel-order'),

    # Order Tracking
    path('<int:order_id>/status-history/', views.OrderStatusHistoryView.as_view(), name='order-status-history'),
]

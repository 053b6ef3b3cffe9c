from django.contrib import admin
from django.urls import path, include

from project.views import BlobView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/auth/', include('authentication.api.urls')),
    path('api/partners/', include('partners.api.urls')),
    path('api/catalog/', include('catalog.api.urls')),
    path('api/quotations/', include('quotations.api.urls')),
    path('api/orders/', include('orders.api.urls')),
    path('api/files/<path:key>', BlobView.as_view(), name='storage-blob'),
]

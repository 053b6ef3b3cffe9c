from rest_framework import generics, status

from partners.api.serializers import StoreSerializer, WorkshopSerializer, serializer_for_role
from partners.models import Store, Workshop
from partners.services import ProfileService
from project.permissions import IsAdmin, IsWorkshopOrStore
from project.utils import StandardizedAPIView, StandardizedResponseMixin


class ProfileView(StandardizedAPIView):
    """The authenticated workshop's or store's own profile"""
    permission_classes = [IsWorkshopOrStore]

    def get(self, request, *args, **kwargs):
        profile = ProfileService.get_profile(request.user)
        serializer = serializer_for_role(request.user.role)(profile)
        return self.success_response(data=serializer.data, message="Profile retrieved successfully")

    def post(self, request, *args, **kwargs):
        serializer = serializer_for_role(request.user.role)(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        profile = ProfileService.create_profile(request.user, serializer.validated_data)
        return self.success_response(
            data=serializer_for_role(request.user.role)(profile).data,
            message="Profile created successfully",
            status_code=status.HTTP_201_CREATED
        )

    def patch(self, request, *args, **kwargs):
        serializer = serializer_for_role(request.user.role)(data=request.data, partial=True)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        profile = ProfileService.update_profile(request.user, serializer.validated_data)
        return self.success_response(
            data=serializer_for_role(request.user.role)(profile).data,
            message="Profile updated successfully"
        )


class WorkshopListView(StandardizedResponseMixin, generics.ListAPIView):
    serializer_class = WorkshopSerializer
    permission_classes = [IsAdmin]
    queryset = Workshop.objects.select_related('user')


class StoreListView(StandardizedResponseMixin, generics.ListAPIView):
    serializer_class = StoreSerializer
    permission_classes = [IsAdmin]
    queryset = Store.objects.select_related('user')

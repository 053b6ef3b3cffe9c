import logging

from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.api.serializers import LoginSerializer, RegisterSerializer, UserSerializer, tokens_for
from authentication.models import CustomUser
from project.utils import StandardizedAPIView

logger = logging.getLogger(__name__)


class RegisterView(StandardizedAPIView):
    permission_classes = []

    @method_decorator(ratelimit(key='ip', rate='10/h', method='POST', block=True))
    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return self.validation_error_response(serializer.errors)

        user = serializer.save()
        logger.info("Registered user %s with role %s", user.pk, user.role)
        return self.success_response(
            data={
                'user': UserSerializer(user).data,
                'tokens': tokens_for(user),
            },
            message="Registration successful",
            status_code=status.HTTP_201_CREATED
        )


class LoginView(StandardizedAPIView):
    permission_classes = []

    @method_decorator(ratelimit(key='ip', rate='20/m', method='POST', block=True))
    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            return self.error_response("Invalid credentials", status.HTTP_401_UNAUTHORIZED)

        validated_data = serializer.validated_data
        return self.success_response(
            data={
                'user': UserSerializer(validated_data['user']).data,
                'tokens': validated_data['tokens']
            },
            message="Login successful"
        )


class GetUserView(StandardizedAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return self.success_response(
            data={'user': UserSerializer(request.user).data},
            message="User data retrieved successfully"
        )


class TokenRefreshView(StandardizedAPIView):
    """
    Token refresh view that returns the standardized response format
    """
    permission_classes = []

    def post(self, request, *args, **kwargs):
        refresh_token = request.data.get('refresh')
        if not refresh_token:
            return self.error_response("Refresh token is required", status.HTTP_400_BAD_REQUEST)

        try:
            refresh = RefreshToken(refresh_token)
            user = CustomUser.objects.get(id=refresh.payload.get('user_id'), is_active=True)
        except (TokenError, CustomUser.DoesNotExist):
            return self.error_response("Invalid refresh token", status.HTTP_401_UNAUTHORIZED)

        return self.success_response(
            data=tokens_for(user),
            message="Token refreshed successfully"
        )

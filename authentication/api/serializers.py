from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import CustomUser, UserRole


def tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'phone_number', 'role', 'date_joined']
        read_only_fields = fields


class RegisterSerializer(serializers.ModelSerializer):
    """Self-registration for workshops and stores. Admins are created by staff."""
    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=[UserRole.WORKSHOP, UserRole.STORE])

    class Meta:
        model = CustomUser
        fields = ['email', 'password', 'name', 'phone_number', 'role']

    def validate_password(self, value):
        validate_password(value)
        return value

    def create(self, validated_data):
        return CustomUser.objects.create_user(**validated_data)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get('request'),
            email=attrs['email'],
            password=attrs['password'],
        )
        if user is None or not user.is_active:
            raise serializers.ValidationError("Invalid credentials")
        attrs['user'] = user
        attrs['tokens'] = tokens_for(user)
        return attrs

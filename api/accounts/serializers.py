"""
Serializers for authentication API endpoints.
"""

from rest_framework import serializers


class SignInRequestSerializer(serializers.Serializer):
    """Serializer for sign-in request."""

    username = serializers.CharField(max_length=150)
    password = serializers.CharField(trim_whitespace=False)


class LogoutRequestSerializer(serializers.Serializer):
    """Serializer for logout request."""

    refreshToken = serializers.CharField(required=False, allow_blank=True)


class ChangePasswordRequestSerializer(serializers.Serializer):
    """Serializer for change password request."""

    username = serializers.CharField(max_length=150)
    currentPassword = serializers.CharField(trim_whitespace=False)
    newPassword = serializers.CharField(trim_whitespace=False)


class UserProfileSerializer(serializers.Serializer):
    """Serializer for the signed-in user profile."""

    username = serializers.CharField()
    role = serializers.CharField()
    email = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)


class TokenPairResponseSerializer(serializers.Serializer):
    """Serializer for sign-in and renew token responses."""

    message = serializers.CharField()
    token = serializers.CharField()
    refreshToken = serializers.CharField()
    user = UserProfileSerializer()

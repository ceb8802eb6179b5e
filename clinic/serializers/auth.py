from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .common import CleanCharField

MIN_PASSWORD_LENGTH = 6


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return v.strip().lower()


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=MIN_PASSWORD_LENGTH, trim_whitespace=False, write_only=True)
    full_name = CleanCharField(max_length=255, allow_blank=True)

    def validate_email(self, v):
        return v.strip().lower()

    def validate_full_name(self, v):
        if not v:
            raise serializers.ValidationError('Nome obrigatório')
        return v

    def validate(self, attrs):
        try:
            validate_password(attrs['password'])
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': e.messages})
        return attrs


class ProfileUpdateSerializer(serializers.Serializer):
    full_name = CleanCharField(max_length=255, required=False)
    crp = CleanCharField(max_length=32, required=False, allow_blank=True)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)

    def validate_full_name(self, v):
        if not v:
            raise serializers.ValidationError('Nome obrigatório')
        return v


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)

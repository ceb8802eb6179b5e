from rest_framework import serializers

from clinic.models import Patient
from .common import CleanCharField


class PatientWriteSerializer(serializers.Serializer):
    """Validates patient payloads; use ``partial=True`` for PATCH."""
    full_name = CleanCharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    birth_date = serializers.DateField(required=False, allow_null=True)
    cpf = CleanCharField(max_length=14, required=False, allow_blank=True)
    address = CleanCharField(required=False, allow_blank=True)
    emergency_contact = CleanCharField(max_length=255, required=False, allow_blank=True)
    emergency_phone = CleanCharField(max_length=32, required=False, allow_blank=True)
    notes = CleanCharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Patient.STATUS_CHOICES, required=False)

    def validate_full_name(self, v):
        if not v:
            raise serializers.ValidationError('Nome completo é obrigatório.')
        return v

    def validate_email(self, v):
        return (v or '').strip().lower()


class PatientListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=255)
    status = serializers.ChoiceField(choices=Patient.STATUS_CHOICES, required=False)
    page = serializers.IntegerField(required=False, min_value=1)
    page_size = serializers.IntegerField(required=False, min_value=1, max_value=200)

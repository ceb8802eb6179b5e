from rest_framework import serializers

from clinic.models import PatientRecord
from .common import CleanCharField


class PatientRecordWriteSerializer(serializers.Serializer):
    session_date = serializers.DateField(required=False)
    session_type = serializers.ChoiceField(choices=PatientRecord.SESSION_TYPE_CHOICES, required=False)
    main_complaint = CleanCharField(required=False, allow_blank=True)
    session_notes = CleanCharField(required=False, allow_blank=True)
    observations = CleanCharField(required=False, allow_blank=True)
    next_session_goals = CleanCharField(required=False, allow_blank=True)
    mood_state = CleanCharField(max_length=255, required=False, allow_blank=True)
    interventions = CleanCharField(required=False, allow_blank=True)

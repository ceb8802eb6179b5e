"""
Database models for the PsiCare backend.

A psychologist is a :class:`User` with an attached :class:`Profile`.  Each
psychologist owns their :class:`Patient` rows and the session records
(prontuários) written for them.  Ownership is stored explicitly on both
tables in ``psychologist`` so every query can be scoped without a join;
see :mod:`clinic.rls` for the database-side policies keyed on it.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


DEFAULT_PROFILE_NAME = 'Psicólogo(a)'


class User(AbstractUser):
    """Authentication identity of a psychologist.

    Sign-in happens with the e-mail address; on sign-up the username is
    set to the normalised e-mail so Django's ``authenticate`` keeps
    working unchanged.
    """
    email = models.EmailField(unique=True)

    def __str__(self) -> str:
        return self.email or self.username


class Profile(models.Model):
    """Professional details of a psychologist, one per user."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True, related_name='profile')
    full_name = models.CharField(max_length=255, default=DEFAULT_PROFILE_NAME)
    # registration number at the Conselho Regional de Psicologia
    crp = models.CharField(max_length=32, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'profiles'

    def __str__(self) -> str:
        return f"{self.full_name} ({self.user_id})"


class OwnedQuerySet(models.QuerySet):
    """QuerySet for rows carrying a ``psychologist`` ownership column."""

    def owned_by(self, user) -> 'OwnedQuerySet':
        if not (user and getattr(user, 'is_authenticated', False)):
            return self.none()
        return self.filter(psychologist_id=user.pk)


class Patient(models.Model):
    STATUS_ACTIVE = 'active'
    STATUS_INACTIVE = 'inactive'
    STATUS_DISCHARGED = 'discharged'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Ativo'),
        (STATUS_INACTIVE, 'Inativo'),
        (STATUS_DISCHARGED, 'Alta'),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    psychologist = models.ForeignKey(User, on_delete=models.CASCADE, related_name='patients')
    full_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    cpf = models.CharField(max_length=14, blank=True)
    address = models.TextField(blank=True)
    emergency_contact = models.CharField(max_length=255, blank=True)
    emergency_phone = models.CharField(max_length=32, blank=True)
    notes = models.TextField(blank=True)
    # dashboard counts filter on status, so index it
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OwnedQuerySet.as_manager()

    class Meta:
        db_table = 'patients'
        ordering = ['full_name']
        indexes = [
            models.Index(fields=['psychologist', 'full_name'], name='patients_psychol_1b0c2e_idx'),
            models.Index(fields=['psychologist', 'created_at'], name='patients_psychol_8d41f7_idx'),
        ]

    def __str__(self) -> str:
        return self.full_name


class PatientRecord(models.Model):
    """A session note (prontuário) written for one patient."""
    SESSION_INDIVIDUAL = 'individual'
    SESSION_COUPLE = 'couple'
    SESSION_FAMILY = 'family'
    SESSION_GROUP = 'group'
    SESSION_TYPE_CHOICES = (
        (SESSION_INDIVIDUAL, 'Individual'),
        (SESSION_COUPLE, 'Casal'),
        (SESSION_FAMILY, 'Família'),
        (SESSION_GROUP, 'Grupo'),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='records')
    # always equal to patient.psychologist
    psychologist = models.ForeignKey(User, on_delete=models.CASCADE, related_name='patient_records')
    session_date = models.DateField(default=timezone.localdate)
    session_type = models.CharField(max_length=16, choices=SESSION_TYPE_CHOICES, default=SESSION_INDIVIDUAL)
    main_complaint = models.TextField(blank=True)
    session_notes = models.TextField(blank=True)
    observations = models.TextField(blank=True)
    next_session_goals = models.TextField(blank=True)
    mood_state = models.CharField(max_length=255, blank=True)
    interventions = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OwnedQuerySet.as_manager()

    class Meta:
        db_table = 'patient_records'
        ordering = ['-session_date', '-created_at']
        indexes = [
            models.Index(fields=['psychologist', 'patient', 'session_date'], name='patient_rec_psychol_5e2a9c_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.patient_id} @ {self.session_date}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='clinic_audi_action_3f6b1d_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='clinic_audi_object__9a7c40_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"

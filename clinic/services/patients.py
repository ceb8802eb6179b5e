"""
Patient and session record operations.

Every function takes the acting psychologist and only ever touches rows
that psychologist owns.  Rows belonging to someone else are reported as
missing so their existence is not disclosed.
"""
from __future__ import annotations

import logging

from django.db.models import Count, Q
from rest_framework.exceptions import NotFound

from clinic.models import Patient, PatientRecord
from clinic.permissions import IsOwner
from clinic.services.audit import log_action
from clinic.services.dashboard import invalidate_dashboard

logger = logging.getLogger(__name__)

PATIENT_FIELDS = (
    'full_name', 'email', 'phone', 'birth_date', 'cpf', 'address',
    'emergency_contact', 'emergency_phone', 'notes', 'status',
)
RECORD_FIELDS = (
    'session_date', 'session_type', 'main_complaint', 'session_notes',
    'observations', 'next_session_goals', 'mood_state', 'interventions',
)


def serialize_patient(p: Patient) -> dict:
    data = {
        'id': str(p.id),
        'psychologist_id': p.psychologist_id,
        'full_name': p.full_name,
        'email': p.email,
        'phone': p.phone,
        'birth_date': p.birth_date.isoformat() if p.birth_date else None,
        'cpf': p.cpf,
        'address': p.address,
        'emergency_contact': p.emergency_contact,
        'emergency_phone': p.emergency_phone,
        'notes': p.notes,
        'status': p.status,
        'created_at': p.created_at.isoformat() if p.created_at else None,
        'updated_at': p.updated_at.isoformat() if p.updated_at else None,
    }
    if hasattr(p, 'records_count'):
        data['records_count'] = p.records_count
    return data


def serialize_record(r: PatientRecord) -> dict:
    return {
        'id': str(r.id),
        'patient_id': str(r.patient_id),
        'psychologist_id': r.psychologist_id,
        'session_date': r.session_date.isoformat() if r.session_date else None,
        'session_type': r.session_type,
        'main_complaint': r.main_complaint,
        'session_notes': r.session_notes,
        'observations': r.observations,
        'next_session_goals': r.next_session_goals,
        'mood_state': r.mood_state,
        'interventions': r.interventions,
        'created_at': r.created_at.isoformat() if r.created_at else None,
        'updated_at': r.updated_at.isoformat() if r.updated_at else None,
    }


def _get_owned(request, model, pk, label: str):
    obj = model.objects.filter(pk=pk).first()
    if obj is None or not IsOwner().has_object_permission(request, None, obj):
        raise NotFound(f'{label} não encontrado')
    return obj


# ---------------------------------------------------------------------
# Patients
# ---------------------------------------------------------------------
def list_patients(user, *, q: str = '', status: str | None = None, page: int | None = None, page_size: int | None = None):
    qs = Patient.objects.owned_by(user).annotate(records_count=Count('records'))
    q = (q or '').strip()
    if q:
        qs = qs.filter(Q(full_name__icontains=q) | Q(email__icontains=q) | Q(phone__contains=q))
    if status:
        qs = qs.filter(status=status)
    qs = qs.order_by('full_name', 'created_at')
    if page_size:
        start = ((page or 1) - 1) * page_size
        qs = qs[start:start + page_size]
    return list(qs)


def get_patient(request, pk) -> Patient:
    patient = _get_owned(request, Patient, pk, 'Paciente')
    patient.records_count = patient.records.count()
    return patient


def create_patient(user, data: dict) -> Patient:
    values = {f: data[f] for f in PATIENT_FIELDS if f in data}
    patient = Patient.objects.create(psychologist=user, **values)
    logger.info("patient %s created by %s", patient.pk, user.pk)
    log_action(user=user, action='patient_create', object_type='patient', object_id=patient.pk)
    invalidate_dashboard(user)
    return patient


def update_patient(request, pk, data: dict) -> Patient:
    patient = _get_owned(request, Patient, pk, 'Paciente')
    fields = [f for f in PATIENT_FIELDS if f in data]
    for f in fields:
        setattr(patient, f, data[f])
    if fields:
        patient.save(update_fields=fields + ['updated_at'])
        log_action(user=request.user, action='patient_update', object_type='patient', object_id=patient.pk, detail={'fields': fields})
        invalidate_dashboard(request.user)
    return patient


def delete_patient(request, pk) -> None:
    patient = _get_owned(request, Patient, pk, 'Paciente')
    removed_records = patient.records.count()
    patient_id = patient.pk
    patient.delete()
    logger.info("patient %s deleted by %s (%d records)", patient_id, request.user.pk, removed_records)
    log_action(user=request.user, action='patient_delete', object_type='patient', object_id=patient_id, detail={'records': removed_records})
    invalidate_dashboard(request.user)


# ---------------------------------------------------------------------
# Session records (prontuários)
# ---------------------------------------------------------------------
def list_records(request, patient_pk):
    patient = _get_owned(request, Patient, patient_pk, 'Paciente')
    return list(
        PatientRecord.objects.owned_by(request.user)
        .filter(patient=patient)
        .order_by('-session_date', '-created_at')
    )


def get_record(request, pk) -> PatientRecord:
    return _get_owned(request, PatientRecord, pk, 'Prontuário')


def create_record(request, patient_pk, data: dict) -> PatientRecord:
    patient = _get_owned(request, Patient, patient_pk, 'Paciente')
    values = {f: data[f] for f in RECORD_FIELDS if f in data}
    record = PatientRecord.objects.create(patient=patient, psychologist=request.user, **values)
    log_action(user=request.user, action='record_create', object_type='patient_record', object_id=record.pk,
               detail={'patient': str(patient.pk)})
    invalidate_dashboard(request.user)
    return record


def update_record(request, pk, data: dict) -> PatientRecord:
    record = _get_owned(request, PatientRecord, pk, 'Prontuário')
    fields = [f for f in RECORD_FIELDS if f in data]
    for f in fields:
        setattr(record, f, data[f])
    if fields:
        record.save(update_fields=fields + ['updated_at'])
        log_action(user=request.user, action='record_update', object_type='patient_record', object_id=record.pk, detail={'fields': fields})
        invalidate_dashboard(request.user)
    return record


def delete_record(request, pk) -> None:
    record = _get_owned(request, PatientRecord, pk, 'Prontuário')
    record_id = record.pk
    record.delete()
    log_action(user=request.user, action='record_delete', object_type='patient_record', object_id=record_id)
    invalidate_dashboard(request.user)


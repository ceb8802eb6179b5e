"""
Practice overview for the dashboard page.

Figures are cached per psychologist for ``DASHBOARD_CACHE_SECONDS`` and
dropped whenever that psychologist writes a patient or record.
"""
from __future__ import annotations

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

from clinic.models import Patient, PatientRecord

RECENT_PATIENTS = 5


def _cache_key(user) -> str:
    return f'dashboard:u={user.pk}'


def invalidate_dashboard(user) -> None:
    key = _cache_key(user)
    cache.delete(key)
    # a concurrent request may re-cache pre-commit figures
    transaction.on_commit(lambda: cache.delete(key))


def build_dashboard(user) -> dict:
    patients = Patient.objects.owned_by(user)
    recent = patients.order_by('-created_at')[:RECENT_PATIENTS]
    return {
        'total_patients': patients.count(),
        'active_patients': patients.filter(status=Patient.STATUS_ACTIVE).count(),
        'total_records': PatientRecord.objects.owned_by(user).count(),
        'recent_patients': [
            {
                'id': str(p.id),
                'full_name': p.full_name,
                'status': p.status,
                'created_at': p.created_at.isoformat(),
            }
            for p in recent
        ],
    }


def get_dashboard(user) -> dict:
    key = _cache_key(user)
    data = cache.get(key)
    if data is None:
        data = build_dashboard(user)
        cache.set(key, data, getattr(settings, 'DASHBOARD_CACHE_SECONDS', 60))
    return data

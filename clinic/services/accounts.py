"""
Psychologist accounts: sign-up, sign-in and profile maintenance.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate, get_user_model
from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.tokens import RefreshToken

from clinic.models import Profile
from clinic.services.audit import log_action

User = get_user_model()
logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = 'Este email já está cadastrado'
BAD_CREDENTIALS = 'Email ou senha incorretos'


def serialize_user(user) -> dict:
    profile = getattr(user, 'profile', None)
    return {
        'id': user.id,
        'email': user.email,
        'full_name': profile.full_name if profile else user.get_full_name(),
        'crp': profile.crp if profile else '',
        'phone': profile.phone if profile else '',
    }


def issue_tokens(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {'access': str(refresh.access_token), 'refresh': str(refresh)}


def register_psychologist(*, email: str, password: str, full_name: str, ip: str | None = None):
    """Create the account and its profile; raise ``ValidationError`` on a taken e-mail."""
    if User.objects.filter(email__iexact=email).exists():
        raise ValidationError({'email': [DUPLICATE_EMAIL]})
    try:
        with transaction.atomic():
            user = User.objects.create_user(username=email, email=email, password=password)
            # the post_save signal already created a placeholder profile
            Profile.objects.update_or_create(user=user, defaults={'full_name': full_name})
    except IntegrityError:
        # concurrent sign-up with the same e-mail
        raise ValidationError({'email': [DUPLICATE_EMAIL]})
    user = User.objects.select_related('profile').get(pk=user.pk)
    logger.info("psychologist %s signed up", user.pk)
    log_action(user=user, action='signup', object_type='user', object_id=user.pk, detail={'ip': ip})
    return user


def login(request, *, email: str, password: str):
    """Return the authenticated user, or None when the credentials are wrong."""
    ip = request.META.get('REMOTE_ADDR')
    user = authenticate(request, username=email, password=password)
    if not user:
        logger.info("failed login for %s from %s", email, ip)
        log_action(user=None, action='login', object_type='user', detail={'result': 'fail', 'email': email, 'ip': ip})
        return None
    log_action(user=user, action='login', object_type='user', object_id=user.pk, detail={'result': 'ok', 'ip': ip})
    return user


def update_profile(user, data: dict) -> Profile:
    try:
        profile = user.profile
    except Profile.DoesNotExist:
        profile = Profile.objects.create(user=user)
    fields = [f for f in ('full_name', 'crp', 'phone') if f in data]
    for f in fields:
        setattr(profile, f, data[f])
    if fields:
        profile.save(update_fields=fields + ['updated_at'])
        log_action(user=user, action='profile_update', object_type='profile', object_id=user.pk, detail={'fields': fields})
    return profile

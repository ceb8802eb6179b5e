"""
Model signals.

Every new user gets a :class:`~clinic.models.Profile`, whichever path
created it (sign-up, admin, ``createsuperuser``).
"""
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import DEFAULT_PROFILE_NAME, Profile, User


@receiver(post_save, sender=User)
def create_profile_for_new_user(sender, instance: User, created: bool, raw: bool = False, **kwargs):
    if not created or raw:
        return
    full_name = instance.get_full_name() or DEFAULT_PROFILE_NAME
    Profile.objects.get_or_create(user=instance, defaults={'full_name': full_name})

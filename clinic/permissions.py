"""
Permission classes for per-psychologist data isolation.
"""
from rest_framework.permissions import BasePermission


class IsOwner(BasePermission):
    """Object must belong to the requesting psychologist (expects ``obj.psychologist_id``)."""

    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return getattr(obj, "psychologist_id", None) == user.pk


class HasProfile(BasePermission):
    """Authenticated user must have a psychologist profile."""

    message = "Perfil de psicólogo(a) não encontrado."

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and hasattr(user, "profile"))

"""
Authentication backend for the API.

Subclasses simplejwt's ``JWTAuthentication`` so the authenticated
psychologist is also bound as the row owner for the current database
transaction (see :mod:`clinic.rls`).  Keeping this class out of the view
modules avoids circular imports when REST framework loads the
authentication classes at start-up.
"""
from __future__ import annotations

from rest_framework_simplejwt.authentication import JWTAuthentication

from clinic import rls


class OwnerScopedJWTAuthentication(JWTAuthentication):
    """Bearer JWT authentication that scopes row access to the caller."""

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is not None:
            user, _token = result
            rls.bind_user(user)
        return result

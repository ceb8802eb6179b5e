"""
ASGI config for the PsiCare project.

HTTP only; configure settings before any Django import.
"""
import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "psicare.settings")

from django.core.asgi import get_asgi_application  # noqa: E402

application = get_asgi_application()

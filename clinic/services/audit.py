import logging
from typing import Optional, Any, Dict

from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction

from clinic.models import AuditEvent

User = get_user_model()
logger = logging.getLogger(__name__)


def log_action(*, user: Optional[User], action: str, object_type: Optional[str] = None, object_id=None, detail: Optional[Dict[str, Any]] = None) -> Optional[AuditEvent]:
    """Persist an audit event; a failing write is logged and never breaks the caller."""
    try:
        with transaction.atomic():
            return AuditEvent.objects.create(
                user=user if getattr(user, 'pk', None) else None,
                action=action,
                object_type=object_type,
                object_id=str(object_id) if object_id is not None else None,
                detail=detail or {},
            )
    except DatabaseError:
        logger.exception("could not write audit event %s for %s", action, object_id)
        return None

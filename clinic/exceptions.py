import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler, set_rollback

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("Unhandled API error on %s", getattr(context.get("request"), "path", "?"))
        set_rollback()
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': 'Ocorreu um erro inesperado. Tente novamente.'}}, status=500)
    # normalize response
    code = _error_code(exc)
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    if isinstance(detail, list) and len(detail) == 1:
        detail = detail[0]
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code, headers=_passthrough_headers(resp))


def _error_code(exc):
    # Django exceptions are converted by DRF but carry no default_code
    if isinstance(exc, Http404):
        return 'not_found'
    if isinstance(exc, PermissionDenied):
        return 'permission_denied'
    return getattr(exc, 'default_code', None) or 'api_error'


def _passthrough_headers(resp):
    return {k: resp[k] for k in ('WWW-Authenticate', 'Retry-After') if k in resp}

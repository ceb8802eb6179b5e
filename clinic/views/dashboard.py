"""
Dashboard endpoint.

Summarises the caller's practice: patient totals, active patients,
number of session records and the most recently registered patients.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import HasProfile
from ..services.dashboard import get_dashboard


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasProfile])
def dashboard(request):
    return Response(get_dashboard(request.user))

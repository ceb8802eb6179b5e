"""
Patient management views.

Psychologists list, register, inspect, edit and remove their own
patients.  Isolation is enforced in :mod:`clinic.services.patients`;
a patient belonging to another psychologist answers 404.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import HasProfile
from ..serializers.patient import PatientListQuerySerializer, PatientWriteSerializer
from ..services import patients as svc


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasProfile])
def patients_list(request):
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        vd = q.validated_data
        rows = svc.list_patients(
            request.user,
            q=vd.get('q', ''),
            status=vd.get('status'),
            page=vd.get('page'),
            page_size=vd.get('page_size'),
        )
        return Response([svc.serialize_patient(p) for p in rows])
    # POST
    s = PatientWriteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = svc.create_patient(request.user, s.validated_data)
    return Response(svc.serialize_patient(patient), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, HasProfile])
def patient_detail(request, pk):
    if request.method == 'GET':
        return Response(svc.serialize_patient(svc.get_patient(request, pk)))
    if request.method == 'DELETE':
        svc.delete_patient(request, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
    # PUT / PATCH
    s = PatientWriteSerializer(data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    patient = svc.update_patient(request, pk, s.validated_data)
    return Response(svc.serialize_patient(patient))

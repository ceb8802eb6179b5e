"""
Session record (prontuário) views.

Records are listed and created under their patient
(``/api/patients/<id>/records``) and addressed directly afterwards
(``/api/records/<id>``).  The owning psychologist is always taken from
the authenticated caller, never from the payload.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import HasProfile
from ..serializers.record import PatientRecordWriteSerializer
from ..services import patients as svc


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasProfile])
def patient_records(request, pk):
    if request.method == 'GET':
        return Response([svc.serialize_record(r) for r in svc.list_records(request, pk)])
    s = PatientRecordWriteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    record = svc.create_record(request, pk, s.validated_data)
    return Response(svc.serialize_record(record), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, HasProfile])
def record_detail(request, pk):
    if request.method == 'GET':
        return Response(svc.serialize_record(svc.get_record(request, pk)))
    if request.method == 'DELETE':
        svc.delete_record(request, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
    s = PatientRecordWriteSerializer(data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    record = svc.update_record(request, pk, s.validated_data)
    return Response(svc.serialize_record(record))

"""Module: prescriptions."""

from fastapi import APIRouter, Depends, Query

from hospital_rx.api.v1.routes.deps import get_current_identity, get_service
from hospital_rx.core.security import Identity
from hospital_rx.db.models.prescription import STATUS_CANCELLED, STATUS_COMPLETED
from hospital_rx.schemas.pharmacy import DispatchRecordRead
from hospital_rx.schemas.prescription import (
    PrescriptionCreatePayload,
    PrescriptionPatch,
    PrescriptionRead,
    SendToPharmacyPayload,
    StatusChangePayload,
    StatusChangeResponse,
)
from hospital_rx.services.prescription_service import PrescriptionService

router = APIRouter()


def _status_message(status: str) -> str:
    if status == STATUS_COMPLETED:
        return "Prescription marked as completed successfully"
    if status == STATUS_CANCELLED:
        return "Prescription cancelled successfully"
    return "Prescription updated successfully"


# -------------------------
# Endpoints
# -------------------------

@router.get("", response_model=list[PrescriptionRead], summary="List prescriptions")
def list_prescriptions(
    patient_id: int | None = Query(default=None),
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.list_prescriptions(identity, patient_id=patient_id)


@router.post("", response_model=PrescriptionRead, status_code=201, summary="Create prescription (doctor only)")
def create_prescription(
    payload: PrescriptionCreatePayload,
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.create_prescription(
        identity,
        patient_id=payload.patient_id,
        instructions=payload.instructions,
        medications=payload.medications,
    )


@router.get("/patient/{patient_id}", response_model=list[PrescriptionRead], summary="Prescriptions for a patient")
def list_patient_prescriptions(
    patient_id: int,
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.list_patient_prescriptions(identity, patient_id)


@router.get("/{prescription_id}", response_model=PrescriptionRead, summary="Get prescription")
def get_prescription(
    prescription_id: int,
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.get_prescription(identity, prescription_id)


@router.put("/{prescription_id}", response_model=PrescriptionRead, summary="Amend prescription (doctor only)")
def amend_prescription(
    prescription_id: int,
    payload: PrescriptionPatch,
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.amend_prescription(identity, prescription_id, payload)


# Endpoint: complete or cancel a prescription; open to any signed-in role.
@router.put("/{prescription_id}/status", response_model=StatusChangeResponse, summary="Change prescription status")
def change_status(
    prescription_id: int,
    payload: StatusChangePayload,
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    result = service.change_status(identity, prescription_id, payload.status)
    return StatusChangeResponse(id=result.id, status=result.status, msg=_status_message(result.status))


@router.post(
    "/{prescription_id}/send-to-pharmacy",
    response_model=DispatchRecordRead,
    status_code=201,
    summary="Send prescription to a pharmacy",
)
def send_to_pharmacy(
    prescription_id: int,
    payload: SendToPharmacyPayload,
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.send_to_pharmacy(identity, prescription_id, payload.pharmacy_id)


@router.get(
    "/{prescription_id}/dispatches",
    response_model=list[DispatchRecordRead],
    summary="Pharmacies a prescription was sent to",
)
def list_dispatches(
    prescription_id: int,
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.list_dispatches(identity, prescription_id)

"""Module: pharmacies."""

from fastapi import APIRouter, Depends

from hospital_rx.api.v1.routes.deps import get_current_identity, get_service
from hospital_rx.core.security import Identity
from hospital_rx.schemas.pharmacy import PharmacyRead
from hospital_rx.services.prescription_service import PrescriptionService

router = APIRouter()


# Endpoint: list every pharmacy a prescription can be routed to.
@router.get("", response_model=list[PharmacyRead], summary="List pharmacies")
def list_pharmacies(
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.list_pharmacies(identity)


@router.get("/{pharmacy_id}", response_model=PharmacyRead, summary="Get pharmacy")
def get_pharmacy(
    pharmacy_id: int,
    identity: Identity = Depends(get_current_identity),
    service: PrescriptionService = Depends(get_service),
):
    return service.get_pharmacy(identity, pharmacy_id)

"""Module: prescription_service.

Role policy in front of the prescription store, pharmacy directory and
dispatch ledger. Creating and amending prescriptions is reserved for doctors;
status changes and dispatch are open to any authenticated caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from hospital_rx.core.errors import AuthenticationError, ConflictError, ForbiddenError
from hospital_rx.core.security import Identity
from hospital_rx.schemas.pharmacy import DispatchRecordRead, PharmacyRead
from hospital_rx.schemas.prescription import PrescriptionPatch, PrescriptionRead
from hospital_rx.services.dispatch_ledger import ALREADY_SENT_MESSAGE, DispatchLedger
from hospital_rx.services.pharmacy_directory import PharmacyDirectory
from hospital_rx.services.prescription_store import MedicationInput, PrescriptionStore

logger = logging.getLogger(__name__)


def _require_identity(caller: Identity | None) -> Identity:
    if caller is None:
        raise AuthenticationError("Authentication required")
    return caller


def _require_prescriber(caller: Identity | None, action: str) -> Identity:
    caller = _require_identity(caller)
    if not caller.is_prescriber:
        logger.warning(
            "Denied %s for user %s with role %s", action, caller.user_id, caller.role
        )
        raise ForbiddenError(f"Access denied. Only doctors can {action}.")
    return caller


class PrescriptionService:
    def __init__(
        self,
        store: PrescriptionStore,
        directory: PharmacyDirectory,
        ledger: DispatchLedger,
    ):
        self.store = store
        self.directory = directory
        self.ledger = ledger

    # -------------------------
    # Mutations
    # -------------------------
    def create_prescription(
        self,
        caller: Identity | None,
        patient_id: int,
        instructions: str | None,
        medications: Sequence[MedicationInput],
    ) -> PrescriptionRead:
        caller = _require_prescriber(caller, "create prescriptions")
        return self.store.create(patient_id, caller.user_id, instructions, medications)

    def amend_prescription(
        self,
        caller: Identity | None,
        prescription_id: int,
        patch: PrescriptionPatch | Mapping,
    ) -> PrescriptionRead:
        _require_prescriber(caller, "update prescriptions")
        return self.store.update(prescription_id, patch)

    def change_status(self, caller: Identity | None, prescription_id: int, status: str) -> PrescriptionRead:
        caller = _require_identity(caller)
        result = self.store.set_status(prescription_id, status)
        logger.info(
            "User %s (%s) changed prescription %s to %s",
            caller.user_id, caller.role, prescription_id, status,
        )
        return result

    def send_to_pharmacy(
        self,
        caller: Identity | None,
        prescription_id: int,
        pharmacy_id: int,
    ) -> DispatchRecordRead:
        caller = _require_identity(caller)
        try:
            return self.ledger.dispatch(prescription_id, pharmacy_id)
        except ConflictError as exc:
            logger.warning(
                "User %s tried to resend prescription %s to pharmacy %s",
                caller.user_id, prescription_id, pharmacy_id,
            )
            raise ConflictError(ALREADY_SENT_MESSAGE) from exc

    # -------------------------
    # Reads
    # -------------------------
    def get_prescription(self, caller: Identity | None, prescription_id: int) -> PrescriptionRead:
        _require_identity(caller)
        return self.store.get(prescription_id)

    def list_prescriptions(self, caller: Identity | None, patient_id: int | None = None) -> list[PrescriptionRead]:
        _require_identity(caller)
        return self.store.list(patient_id=patient_id)

    def list_patient_prescriptions(self, caller: Identity | None, patient_id: int) -> list[PrescriptionRead]:
        _require_identity(caller)
        return self.store.list_by_patient(patient_id)

    def list_dispatches(self, caller: Identity | None, prescription_id: int) -> list[DispatchRecordRead]:
        _require_identity(caller)
        return self.ledger.list_for_prescription(prescription_id)

    def list_pharmacies(self, caller: Identity | None) -> list[PharmacyRead]:
        _require_identity(caller)
        return self.directory.list()

    def get_pharmacy(self, caller: Identity | None, pharmacy_id: int) -> PharmacyRead:
        _require_identity(caller)
        return self.directory.get(pharmacy_id)

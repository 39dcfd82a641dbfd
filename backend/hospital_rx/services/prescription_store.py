"""Module: prescription_store.

Persistence for prescriptions and their medication lines. Each public method
runs inside a single transaction obtained from the shared ``Database``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import desc, select
from sqlalchemy.orm import Session, selectinload

from hospital_rx.core.errors import NotFoundError, ValidationError
from hospital_rx.db.base import utcnow
from hospital_rx.db.models.medication import Medication
from hospital_rx.db.models.prescription import STATUS_ACTIVE, VALID_STATUSES, Prescription
from hospital_rx.db.models.user import User
from hospital_rx.db.session import Database
from hospital_rx.schemas.prescription import (
    MedicationPayload,
    MedicationRead,
    PrescriptionPatch,
    PrescriptionRead,
)

logger = logging.getLogger(__name__)

MedicationInput = MedicationPayload | Mapping


# -------------------------
# Helpers
# -------------------------
def _error_fields(exc: PydanticValidationError) -> str:
    return ", ".join(sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})) or "fields"


def _coerce_medications(items: Sequence[MedicationInput] | None) -> list[MedicationPayload]:
    if not items:
        raise ValidationError("At least one medication is required")

    out = []
    for index, item in enumerate(items):
        if isinstance(item, MedicationPayload):
            out.append(item)
            continue
        try:
            out.append(MedicationPayload.model_validate(item))
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Medication {index + 1} has missing, blank or unknown: {_error_fields(exc)}"
            ) from exc
    return out


def validate_status(status: str | None) -> str:
    if status not in VALID_STATUSES:
        raise ValidationError("Invalid status value")
    return status


def _to_read(prescription: Prescription) -> PrescriptionRead:
    patient = prescription.patient
    return PrescriptionRead(
        id=prescription.id,
        patient_id=prescription.patient_id,
        patient_name=patient.full_name if patient else None,
        doctor_id=prescription.doctor_id,
        prescription_date=prescription.prescription_date,
        instructions=prescription.instructions,
        status=prescription.status,
        created_at=prescription.created_at,
        updated_at=prescription.updated_at,
        medications=[MedicationRead.model_validate(m) for m in prescription.medications],
    )


def _build_lines(medications: list[MedicationPayload]) -> list[Medication]:
    return [
        Medication(
            name=m.name,
            dosage=m.dosage,
            frequency=m.frequency,
            duration=m.duration,
        )
        for m in medications
    ]


class PrescriptionStore:
    def __init__(self, database: Database):
        self._db = database

    def _load(self, session: Session, prescription_id: int) -> Prescription:
        prescription = session.execute(
            select(Prescription)
            .options(selectinload(Prescription.medications))
            .where(Prescription.id == prescription_id)
        ).scalar_one_or_none()
        if prescription is None:
            raise NotFoundError("Prescription not found")
        return prescription

    def create(
        self,
        patient_id: int,
        prescriber_id: int,
        instructions: str | None,
        medications: Sequence[MedicationInput],
    ) -> PrescriptionRead:
        lines = _coerce_medications(medications)

        with self._db.begin() as session:
            if session.get(User, patient_id) is None:
                raise NotFoundError("Patient not found")
            if session.get(User, prescriber_id) is None:
                raise NotFoundError("Prescriber not found")

            prescription = Prescription(
                patient_id=patient_id,
                doctor_id=prescriber_id,
                prescription_date=datetime.now(UTC).date(),
                instructions=instructions,
                status=STATUS_ACTIVE,
                medications=_build_lines(lines),
            )
            session.add(prescription)
            session.flush()
            session.refresh(prescription)
            result = _to_read(prescription)

        logger.info(
            "Created prescription %s for patient %s with %d medication(s)",
            result.id, patient_id, len(result.medications),
        )
        return result

    def get(self, prescription_id: int) -> PrescriptionRead:
        with self._db.begin() as session:
            return _to_read(self._load(session, prescription_id))

    def list(self, patient_id: int | None = None) -> list[PrescriptionRead]:
        stmt = (
            select(Prescription)
            .options(selectinload(Prescription.medications))
            .order_by(desc(Prescription.prescription_date), desc(Prescription.id))
        )
        if patient_id is not None:
            stmt = stmt.where(Prescription.patient_id == patient_id)

        with self._db.begin() as session:
            rows = session.execute(stmt).unique().scalars().all()
            return [_to_read(p) for p in rows]

    def list_by_patient(self, patient_id: int) -> list[PrescriptionRead]:
        return self.list(patient_id=patient_id)

    def update(self, prescription_id: int, patch: PrescriptionPatch | Mapping) -> PrescriptionRead:
        if not isinstance(patch, PrescriptionPatch):
            try:
                patch = PrescriptionPatch.model_validate(patch)
            except PydanticValidationError as exc:
                raise ValidationError(f"Invalid prescription update: {_error_fields(exc)}") from exc

        if patch.status is not None:
            validate_status(patch.status)
        lines = _coerce_medications(patch.medications) if patch.medications is not None else None

        with self._db.begin() as session:
            prescription = self._load(session, prescription_id)

            if patch.instructions is not None:
                prescription.instructions = patch.instructions
            if patch.status is not None:
                prescription.status = patch.status
            if lines is not None:
                # Replace, not merge: orphaned lines are deleted before the new set is inserted.
                prescription.medications.clear()
                session.flush()
                prescription.medications.extend(_build_lines(lines))

            prescription.updated_at = utcnow()
            session.flush()
            session.refresh(prescription)
            result = _to_read(prescription)

        logger.info("Updated prescription %s", prescription_id)
        return result

    def set_status(self, prescription_id: int, status: str) -> PrescriptionRead:
        validate_status(status)

        with self._db.begin() as session:
            prescription = self._load(session, prescription_id)
            prescription.status = status
            prescription.updated_at = utcnow()
            session.flush()
            result = _to_read(prescription)

        logger.info("Prescription %s status set to %s", prescription_id, status)
        return result

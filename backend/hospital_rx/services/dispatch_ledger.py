"""Module: dispatch_ledger.

Records prescriptions sent to pharmacies. The existence check and the insert
share one transaction, and the (prescription_id, pharmacy_id) unique
constraint rejects a concurrent duplicate that slipped past the check.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hospital_rx.core.errors import ConflictError, NotFoundError
from hospital_rx.db.base import utcnow
from hospital_rx.db.models.pharmacy import Pharmacy
from hospital_rx.db.models.prescription import Prescription
from hospital_rx.db.models.prescription_pharmacy import DISPATCH_STATUS_SENT, PrescriptionPharmacy
from hospital_rx.db.session import Database
from hospital_rx.schemas.pharmacy import DispatchRecordRead

logger = logging.getLogger(__name__)

ALREADY_SENT_MESSAGE = "Prescription already sent to this pharmacy"


class DispatchLedger:
    def __init__(self, database: Database):
        self._db = database

    @staticmethod
    def _find(session: Session, prescription_id: int, pharmacy_id: int) -> PrescriptionPharmacy | None:
        return session.execute(
            select(PrescriptionPharmacy).where(
                PrescriptionPharmacy.prescription_id == prescription_id,
                PrescriptionPharmacy.pharmacy_id == pharmacy_id,
            )
        ).scalar_one_or_none()

    def has_been_sent(self, prescription_id: int, pharmacy_id: int, session: Session | None = None) -> bool:
        if session is not None:
            return self._find(session, prescription_id, pharmacy_id) is not None
        with self._db.begin() as own_session:
            return self._find(own_session, prescription_id, pharmacy_id) is not None

    def dispatch(self, prescription_id: int, pharmacy_id: int) -> DispatchRecordRead:
        with self._db.begin() as session:
            if session.get(Prescription, prescription_id) is None:
                raise NotFoundError("Prescription not found")
            if session.get(Pharmacy, pharmacy_id) is None:
                raise NotFoundError("Pharmacy not found")

            if self.has_been_sent(prescription_id, pharmacy_id, session=session):
                raise ConflictError(ALREADY_SENT_MESSAGE)

            record = PrescriptionPharmacy(
                prescription_id=prescription_id,
                pharmacy_id=pharmacy_id,
                sent_date=utcnow(),
                status=DISPATCH_STATUS_SENT,
            )
            session.add(record)
            try:
                session.flush()
            except IntegrityError as exc:
                raise ConflictError(ALREADY_SENT_MESSAGE) from exc
            result = DispatchRecordRead.model_validate(record)

        logger.info("Prescription %s sent to pharmacy %s", prescription_id, pharmacy_id)
        return result

    def list_for_prescription(self, prescription_id: int) -> list[DispatchRecordRead]:
        with self._db.begin() as session:
            if session.get(Prescription, prescription_id) is None:
                raise NotFoundError("Prescription not found")
            rows = session.execute(
                select(PrescriptionPharmacy)
                .where(PrescriptionPharmacy.prescription_id == prescription_id)
                .order_by(PrescriptionPharmacy.sent_date, PrescriptionPharmacy.id)
            ).scalars().all()
            return [DispatchRecordRead.model_validate(r) for r in rows]

"""Module: pharmacy_directory."""

from __future__ import annotations

from sqlalchemy import select

from hospital_rx.core.errors import NotFoundError
from hospital_rx.db.models.pharmacy import Pharmacy
from hospital_rx.db.session import Database
from hospital_rx.schemas.pharmacy import PharmacyRead


# Read-only view over the seeded pharmacies table.
class PharmacyDirectory:
    def __init__(self, database: Database):
        self._db = database

    def list(self) -> list[PharmacyRead]:
        with self._db.begin() as session:
            rows = session.execute(select(Pharmacy).order_by(Pharmacy.id)).scalars().all()
            return [PharmacyRead.model_validate(p) for p in rows]

    def get(self, pharmacy_id: int) -> PharmacyRead:
        with self._db.begin() as session:
            pharmacy = session.get(Pharmacy, pharmacy_id)
            if pharmacy is None:
                raise NotFoundError("Pharmacy not found")
            return PharmacyRead.model_validate(pharmacy)

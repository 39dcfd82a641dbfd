"""Module: prescription_pharmacy."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hospital_rx.db.base import Base, utcnow

DISPATCH_STATUS_SENT = "sent"


# Ledger row recording that a prescription was sent to a pharmacy.
# A prescription reaches each pharmacy at most once.
class PrescriptionPharmacy(Base):
    __tablename__ = "prescription_pharmacy"
    __table_args__ = (
        UniqueConstraint("prescription_id", "pharmacy_id", name="uq_prescription_pharmacy_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prescription_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("prescriptions.id", ondelete="CASCADE"),
        nullable=False,
    )
    pharmacy_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pharmacies.id", ondelete="CASCADE"),
        nullable=False,
    )
    sent_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=DISPATCH_STATUS_SENT)

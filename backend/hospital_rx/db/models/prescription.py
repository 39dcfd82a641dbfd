"""Module: prescription."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospital_rx.db.base import Base, utcnow

STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
VALID_STATUSES = (STATUS_ACTIVE, STATUS_COMPLETED, STATUS_CANCELLED)


# A prescription issued by a doctor for a patient; owns its medication lines.
class Prescription(Base):
    __tablename__ = "prescriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    patient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    doctor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    prescription_date: Mapped[date] = mapped_column(Date, nullable=False)
    instructions: Mapped[str] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=STATUS_ACTIVE)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    medications: Mapped[list["Medication"]] = relationship(
        back_populates="prescription",
        cascade="all, delete-orphan",
        order_by="Medication.id",
    )
    patient: Mapped["User"] = relationship(foreign_keys=[patient_id], lazy="joined")

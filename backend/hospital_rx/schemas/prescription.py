"""Module: prescription schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MedicationPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    dosage: str
    frequency: str
    duration: str

    @field_validator("name", "dosage", "frequency", "duration")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned


class PrescriptionCreatePayload(BaseModel):
    patient_id: int
    instructions: str | None = None
    medications: list[MedicationPayload] = Field(default_factory=list)


# Partial update: fields left as None keep their stored value.
class PrescriptionPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    instructions: str | None = None
    status: str | None = None
    medications: list[MedicationPayload] | None = None


class StatusChangePayload(BaseModel):
    status: str


class SendToPharmacyPayload(BaseModel):
    pharmacy_id: int


class MedicationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prescription_id: int
    name: str
    dosage: str
    frequency: str
    duration: str


class PrescriptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    patient_name: str | None = None
    doctor_id: int
    prescription_date: date
    instructions: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime
    medications: list[MedicationRead] = Field(default_factory=list)


class StatusChangeResponse(BaseModel):
    id: int
    status: str
    msg: str

"""Module: pharmacy schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PharmacyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str
    phone: str


class DispatchRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    prescription_id: int
    pharmacy_id: int
    sent_date: datetime
    status: str

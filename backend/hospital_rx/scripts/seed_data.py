"""Module: seed_data."""

import random
import string

from faker import Faker
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from hospital_rx.core.config import Settings
from hospital_rx.core.security import (
    ROLE_ADMIN,
    ROLE_DOCTOR,
    ROLE_NURSE,
    ROLE_PATIENT,
    VALID_ROLES,
    hash_password,
)
from hospital_rx.db.init_db import init_db
from hospital_rx.db.models.medication import Medication
from hospital_rx.db.models.pharmacy import Pharmacy
from hospital_rx.db.models.prescription import Prescription
from hospital_rx.db.models.prescription_pharmacy import PrescriptionPharmacy
from hospital_rx.db.models.user import User
from hospital_rx.db.session import Database

fake = Faker()

DEFAULT_PASSWORD = "password123"

PHARMACIES = [
    {"name": "City Pharmacy", "address": "123 Main St, City, State 12345", "phone": "555-123-4567"},
    {"name": "HealthPlus Pharmacy", "address": "456 Oak Ave, Town, State 67890", "phone": "555-987-6543"},
    {"name": "MediCare Pharmacy", "address": "789 Pine Blvd, Village, State 45678", "phone": "555-456-7890"},
]

STAFF = [
    {"email": "admin@hospital.com", "role": ROLE_ADMIN, "first_name": "Admin", "last_name": "User"},
    {"email": "doctor@hospital.com", "role": ROLE_DOCTOR, "first_name": "John", "last_name": "Smith"},
    {"email": "nurse@hospital.com", "role": ROLE_NURSE, "first_name": "Sarah", "last_name": "Johnson"},
    {"email": "patient@hospital.com", "role": ROLE_PATIENT, "first_name": "Jane", "last_name": "Doe"},
]


# Shared helpers used by multiple seed builders.
def generate_phone() -> str:
    return "555-" + "".join(random.choice(string.digits) for _ in range(3)) + "-" + "".join(
        random.choice(string.digits) for _ in range(4)
    )


def reset_tables(session: Session) -> None:
    # Children first so foreign keys never dangle mid-reset.
    session.execute(delete(PrescriptionPharmacy))
    session.execute(delete(Medication))
    session.execute(delete(Prescription))
    session.execute(delete(Pharmacy))
    session.execute(delete(User))
    session.commit()


def seed_staff(session: Session, password_hash: str) -> list[User]:
    users = []
    for row in STAFF:
        if row["role"] not in VALID_ROLES:
            raise ValueError(f"Unknown role {row['role']!r} for {row['email']}")
        existing = session.execute(select(User).where(User.email == row["email"])).scalar_one_or_none()
        if existing:
            users.append(existing)
            continue
        user = User(password=password_hash, phone=generate_phone(), **row)
        session.add(user)
        users.append(user)
    session.commit()
    return users


def seed_patients(session: Session, password_hash: str, count: int = 20) -> list[User]:
    patients = []
    used = set(session.execute(select(User.email)).scalars().all())
    for _ in range(count):
        first_name = fake.first_name()
        last_name = fake.last_name()
        email = f"{first_name.lower()}.{last_name.lower()}@example.com"
        n = 2
        while email in used:
            email = f"{first_name.lower()}.{last_name.lower()}{n}@example.com"
            n += 1
        used.add(email)

        patient = User(
            email=email,
            password=password_hash,
            role=ROLE_PATIENT,
            first_name=first_name,
            last_name=last_name,
            date_of_birth=fake.date_of_birth(minimum_age=1, maximum_age=95),
            phone=generate_phone(),
            address=fake.address().replace("\n", ", "),
        )
        session.add(patient)
        patients.append(patient)
    session.commit()
    return patients


def seed_pharmacies(session: Session) -> list[Pharmacy]:
    pharmacies = []
    for row in PHARMACIES:
        existing = session.execute(select(Pharmacy).where(Pharmacy.name == row["name"])).scalar_one_or_none()
        if existing:
            pharmacies.append(existing)
            continue
        pharmacy = Pharmacy(**row)
        session.add(pharmacy)
        pharmacies.append(pharmacy)
    session.commit()
    return pharmacies


def seed(database: Database, patients: int = 20, reset: bool = False) -> dict:
    init_db(database)
    password_hash = hash_password(DEFAULT_PASSWORD)

    session = database.session()
    try:
        if reset:
            reset_tables(session)
        staff = seed_staff(session, password_hash)
        patient_rows = seed_patients(session, password_hash, count=patients)
        pharmacies = seed_pharmacies(session)
        return {
            "staff": len(staff),
            "patients": len(patient_rows),
            "pharmacies": len(pharmacies),
        }
    finally:
        session.close()


if __name__ == "__main__":
    settings = Settings()
    database = Database(settings.database_url)
    try:
        print("Seeding staff, patients and pharmacies...")
        counts = seed(database, reset=True)
        print(
            f"Seeded {counts['staff']} staff accounts, {counts['patients']} patients "
            f"and {counts['pharmacies']} pharmacies. Password for all accounts: {DEFAULT_PASSWORD}"
        )
    finally:
        database.dispose()

import pytest
from fastapi.testclient import TestClient

from hospital_rx.core.config import Settings
from hospital_rx.core.security import Identity, hash_password
from hospital_rx.db.init_db import init_db
from hospital_rx.db.models.pharmacy import Pharmacy
from hospital_rx.db.models.user import User
from hospital_rx.db.session import Database
from hospital_rx.main import build_service, create_app
from hospital_rx.services.dispatch_ledger import DispatchLedger
from hospital_rx.services.pharmacy_directory import PharmacyDirectory
from hospital_rx.services.prescription_store import PrescriptionStore

PASSWORD = "secret-pass"
DOCTOR_ID = 1
NURSE_ID = 2
PATIENT_ID = 42
OTHER_PATIENT_ID = 43

AMOXICILLIN = {
    "name": "Amoxicillin",
    "dosage": "500mg",
    "frequency": "3x/day",
    "duration": "10 days",
}
IBUPROFEN = {
    "name": "Ibuprofen",
    "dosage": "200mg",
    "frequency": "as needed",
    "duration": "5 days",
}


@pytest.fixture
def database():
    db = Database("sqlite://")
    init_db(db)

    # Low iteration count keeps login tests fast; verify reads it from the hash.
    password_hash = hash_password(PASSWORD, iterations=1000)
    with db.begin() as session:
        session.add_all(
            [
                User(id=DOCTOR_ID, email="doctor@hospital.com", password=password_hash, role="doctor",
                     first_name="John", last_name="Smith"),
                User(id=NURSE_ID, email="nurse@hospital.com", password=password_hash, role="nurse",
                     first_name="Sarah", last_name="Johnson"),
                User(id=PATIENT_ID, email="jane@example.com", password=password_hash, role="patient",
                     first_name="Jane", last_name="Doe"),
                User(id=OTHER_PATIENT_ID, email="max@example.com", password=password_hash, role="patient",
                     first_name="Max", last_name="Mustermann"),
                Pharmacy(id=1, name="City Pharmacy", address="123 Main St, City, State 12345",
                         phone="555-123-4567"),
                Pharmacy(id=2, name="HealthPlus Pharmacy", address="456 Oak Ave, Town, State 67890",
                         phone="555-987-6543"),
            ]
        )
    yield db
    db.dispose()


@pytest.fixture
def store(database):
    return PrescriptionStore(database)


@pytest.fixture
def directory(database):
    return PharmacyDirectory(database)


@pytest.fixture
def ledger(database):
    return DispatchLedger(database)


@pytest.fixture
def service(database):
    return build_service(database)


@pytest.fixture
def doctor():
    return Identity(user_id=DOCTOR_ID, role="doctor")


@pytest.fixture
def nurse():
    return Identity(user_id=NURSE_ID, role="nurse")


@pytest.fixture
def patient():
    return Identity(user_id=PATIENT_ID, role="patient")


@pytest.fixture
def client(database):
    settings = Settings(database_url="sqlite://", log_level="WARNING")
    app = create_app(settings, database=database)
    with TestClient(app) as test_client:
        yield test_client


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    res = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture
def doctor_headers(client):
    return login(client, "doctor@hospital.com")


@pytest.fixture
def patient_headers(client):
    return login(client, "jane@example.com")

import pytest
from sqlalchemy import func, select

from conftest import AMOXICILLIN, IBUPROFEN, PATIENT_ID
from hospital_rx.core.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from hospital_rx.db.models.prescription import Prescription


def test_prescriber_lifecycle_scenario(service, doctor):
    created = service.create_prescription(doctor, PATIENT_ID, None, [AMOXICILLIN])

    fetched = service.get_prescription(doctor, created.id)
    assert fetched.status == "active"
    assert len(fetched.medications) == 1

    service.change_status(doctor, created.id, "completed")
    assert service.get_prescription(doctor, created.id).status == "completed"

    record = service.send_to_pharmacy(doctor, created.id, 1)
    assert record.status == "sent"

    with pytest.raises(ConflictError) as exc:
        service.send_to_pharmacy(doctor, created.id, 1)
    assert "already sent" in exc.value.message


@pytest.mark.parametrize("caller_fixture", ["nurse", "patient"])
def test_non_prescriber_cannot_create(service, database, request, caller_fixture):
    caller = request.getfixturevalue(caller_fixture)

    with pytest.raises(ForbiddenError):
        service.create_prescription(caller, PATIENT_ID, None, [AMOXICILLIN])

    with database.begin() as session:
        assert session.execute(select(func.count()).select_from(Prescription)).scalar_one() == 0


def test_non_prescriber_cannot_amend(service, doctor, nurse):
    created = service.create_prescription(doctor, PATIENT_ID, None, [AMOXICILLIN])

    with pytest.raises(ForbiddenError):
        service.amend_prescription(nurse, created.id, {"instructions": "changed"})

    assert service.get_prescription(doctor, created.id).instructions is None


def test_forbidden_is_reported_before_not_found(service, nurse):
    with pytest.raises(ForbiddenError):
        service.amend_prescription(nurse, 999, {"instructions": "x"})


def test_amend_replaces_medications(service, doctor):
    created = service.create_prescription(doctor, PATIENT_ID, "Take with food", [AMOXICILLIN])

    amended = service.amend_prescription(doctor, created.id, {"medications": [IBUPROFEN]})

    assert [(m.name, m.dosage) for m in amended.medications] == [("Ibuprofen", "200mg")]
    assert amended.instructions == "Take with food"


def test_any_authenticated_role_may_change_status(service, doctor, patient):
    created = service.create_prescription(doctor, PATIENT_ID, None, [AMOXICILLIN])

    assert service.change_status(patient, created.id, "cancelled").status == "cancelled"


def test_change_status_rejects_unknown_value(service, doctor):
    created = service.create_prescription(doctor, PATIENT_ID, None, [AMOXICILLIN])

    with pytest.raises(ValidationError):
        service.change_status(doctor, created.id, "archived")
    assert service.get_prescription(doctor, created.id).status == "active"


def test_send_to_pharmacy_not_found_is_distinct(service, doctor, patient):
    created = service.create_prescription(doctor, PATIENT_ID, None, [AMOXICILLIN])

    with pytest.raises(NotFoundError):
        service.send_to_pharmacy(patient, created.id, 42)
    with pytest.raises(NotFoundError):
        service.send_to_pharmacy(patient, 4242, 1)

    assert service.list_dispatches(patient, created.id) == []


def test_missing_caller_is_rejected(service):
    with pytest.raises(AuthenticationError):
        service.list_pharmacies(None)
    with pytest.raises(AuthenticationError):
        service.create_prescription(None, PATIENT_ID, None, [AMOXICILLIN])


def test_read_pass_throughs(service, doctor, patient):
    created = service.create_prescription(doctor, PATIENT_ID, None, [AMOXICILLIN])

    assert [p.id for p in service.list_patient_prescriptions(patient, PATIENT_ID)] == [created.id]
    assert [p.id for p in service.list_prescriptions(patient)] == [created.id]
    assert [p.name for p in service.list_pharmacies(patient)] == ["City Pharmacy", "HealthPlus Pharmacy"]
    assert service.get_pharmacy(patient, 1).address.startswith("123 Main St")


def test_amend_with_misspelled_key_is_rejected(service, doctor):
    created = service.create_prescription(doctor, PATIENT_ID, None, [AMOXICILLIN])

    with pytest.raises(ValidationError):
        service.amend_prescription(doctor, created.id, {"medication": [IBUPROFEN]})

    assert [m.name for m in service.get_prescription(doctor, created.id).medications] == ["Amoxicillin"]

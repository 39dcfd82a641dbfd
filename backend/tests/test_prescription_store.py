from datetime import date

import pytest
from sqlalchemy import func, select

from conftest import AMOXICILLIN, DOCTOR_ID, IBUPROFEN, OTHER_PATIENT_ID, PATIENT_ID
from hospital_rx.core.errors import NotFoundError, ValidationError
from hospital_rx.db.models.medication import Medication
from hospital_rx.db.models.prescription import Prescription
from hospital_rx.schemas.prescription import PrescriptionPatch


def _count(database, model) -> int:
    with database.begin() as session:
        return session.execute(select(func.count()).select_from(model)).scalar_one()


def test_create_assigns_defaults_and_owns_lines(store):
    created = store.create(PATIENT_ID, DOCTOR_ID, "Take with food", [AMOXICILLIN])

    assert created.status == "active"
    assert created.patient_id == PATIENT_ID
    assert created.doctor_id == DOCTOR_ID
    assert created.patient_name == "Jane Doe"
    assert isinstance(created.prescription_date, date)

    fetched = store.get(created.id)
    assert len(fetched.medications) == 1
    assert all(m.prescription_id == created.id for m in fetched.medications)
    assert fetched.medications[0].name == "Amoxicillin"


def test_create_rejects_empty_medications_without_persisting(store, database):
    with pytest.raises(ValidationError):
        store.create(PATIENT_ID, DOCTOR_ID, None, [])

    assert _count(database, Prescription) == 0
    assert _count(database, Medication) == 0


@pytest.mark.parametrize("missing", ["name", "dosage", "frequency", "duration"])
def test_create_rejects_incomplete_line(store, database, missing):
    line = dict(AMOXICILLIN)
    line.pop(missing)

    with pytest.raises(ValidationError) as exc:
        store.create(PATIENT_ID, DOCTOR_ID, None, [line])

    assert missing in exc.value.message
    assert _count(database, Prescription) == 0


def test_create_rejects_blank_line_field(store):
    with pytest.raises(ValidationError):
        store.create(PATIENT_ID, DOCTOR_ID, None, [dict(AMOXICILLIN, dosage="   ")])


def test_create_unknown_patient_or_prescriber(store, database):
    with pytest.raises(NotFoundError):
        store.create(999, DOCTOR_ID, None, [AMOXICILLIN])
    with pytest.raises(NotFoundError):
        store.create(PATIENT_ID, 999, None, [AMOXICILLIN])

    assert _count(database, Prescription) == 0


def test_get_missing_prescription(store):
    with pytest.raises(NotFoundError):
        store.get(12345)


def test_list_by_patient_newest_first(store, database):
    first = store.create(PATIENT_ID, DOCTOR_ID, "older", [AMOXICILLIN])
    second = store.create(PATIENT_ID, DOCTOR_ID, "newer", [IBUPROFEN])
    store.create(OTHER_PATIENT_ID, DOCTOR_ID, None, [IBUPROFEN])

    with database.begin() as session:
        session.get(Prescription, first.id).prescription_date = date(2024, 1, 1)

    listed = store.list_by_patient(PATIENT_ID)
    assert [p.id for p in listed] == [second.id, first.id]
    assert all(p.patient_id == PATIENT_ID for p in listed)
    assert len(store.list()) == 3


def test_update_replaces_medications(store, database):
    created = store.create(PATIENT_ID, DOCTOR_ID, None, [AMOXICILLIN, IBUPROFEN])
    replacement = [{"name": "Paracetamol", "dosage": "1g", "frequency": "4x/day", "duration": "3 days"}]

    updated = store.update(created.id, {"medications": replacement})

    assert [m.name for m in updated.medications] == ["Paracetamol"]
    assert [m.name for m in store.get(created.id).medications] == ["Paracetamol"]
    assert _count(database, Medication) == 1


def test_update_is_partial(store):
    created = store.create(PATIENT_ID, DOCTOR_ID, "Take with food", [AMOXICILLIN])

    updated = store.update(created.id, PrescriptionPatch(status="cancelled"))

    assert updated.status == "cancelled"
    assert updated.instructions == "Take with food"
    assert [m.name for m in updated.medications] == ["Amoxicillin"]
    assert updated.updated_at >= created.updated_at


def test_update_rejects_empty_replacement_and_bad_status(store):
    created = store.create(PATIENT_ID, DOCTOR_ID, None, [AMOXICILLIN])

    with pytest.raises(ValidationError):
        store.update(created.id, {"medications": []})
    with pytest.raises(ValidationError):
        store.update(created.id, {"status": "paused"})

    fetched = store.get(created.id)
    assert fetched.status == "active"
    assert len(fetched.medications) == 1


def test_update_missing_prescription(store):
    with pytest.raises(NotFoundError):
        store.update(404, {"instructions": "x"})


def test_set_status_transitions(store):
    created = store.create(PATIENT_ID, DOCTOR_ID, None, [AMOXICILLIN])

    assert store.set_status(created.id, "active").status == "active"
    assert store.set_status(created.id, "completed").status == "completed"
    # Reopening is not blocked at the data layer.
    assert store.set_status(created.id, "active").status == "active"
    assert store.set_status(created.id, "cancelled").status == "cancelled"


def test_set_status_invalid_keeps_existing(store):
    created = store.create(PATIENT_ID, DOCTOR_ID, None, [AMOXICILLIN])

    with pytest.raises(ValidationError):
        store.set_status(created.id, "on-hold")

    assert store.get(created.id).status == "active"


def test_set_status_missing_prescription(store):
    with pytest.raises(NotFoundError):
        store.set_status(777, "completed")


def test_deleting_prescription_removes_lines(store, database):
    created = store.create(PATIENT_ID, DOCTOR_ID, None, [AMOXICILLIN, IBUPROFEN])

    with database.begin() as session:
        session.delete(session.get(Prescription, created.id))

    assert _count(database, Medication) == 0


def test_update_rejects_unknown_patch_key(store):
    created = store.create(PATIENT_ID, DOCTOR_ID, None, [AMOXICILLIN])

    with pytest.raises(ValidationError) as exc:
        store.update(created.id, {"medication": [IBUPROFEN]})

    assert "medication" in exc.value.message
    fetched = store.get(created.id)
    assert [m.name for m in fetched.medications] == ["Amoxicillin"]
    assert fetched.updated_at == created.updated_at


def test_create_rejects_unknown_line_key(store, database):
    with pytest.raises(ValidationError) as exc:
        store.create(PATIENT_ID, DOCTOR_ID, None, [dict(AMOXICILLIN, route="oral")])

    assert "route" in exc.value.message
    assert _count(database, Prescription) == 0

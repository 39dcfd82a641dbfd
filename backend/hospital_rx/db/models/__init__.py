# backend/hospital_rx/db/models/__init__.py

from hospital_rx.db.models.user import User
from hospital_rx.db.models.prescription import Prescription
from hospital_rx.db.models.medication import Medication
from hospital_rx.db.models.pharmacy import Pharmacy
from hospital_rx.db.models.prescription_pharmacy import PrescriptionPharmacy

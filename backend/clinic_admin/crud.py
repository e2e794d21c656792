# backend/clinic_admin/crud.py
from typing import List, Optional

from . import schemas
from .store import EntityKind, RecordStore

# Users
def get_user(store: RecordStore, user_id: int) -> Optional[schemas.User]:
    return store.get_by_id(EntityKind.USERS, user_id)

def get_user_by_username(store: RecordStore, username: str) -> Optional[schemas.User]:
    return store.get_by_username(username)

def get_users(store: RecordStore) -> List[schemas.User]:
    return store.get_all(EntityKind.USERS)

def create_user(store: RecordStore, user: schemas.UserCreate) -> schemas.User:
    return store.create(EntityKind.USERS, user)

# Doctors
def get_doctors(store: RecordStore) -> List[schemas.Doctor]:
    return store.get_all(EntityKind.DOCTORS)

def get_doctor(store: RecordStore, doctor_id: int) -> Optional[schemas.Doctor]:
    return store.get_by_id(EntityKind.DOCTORS, doctor_id)

def create_doctor(store: RecordStore, doctor: schemas.DoctorCreate) -> schemas.Doctor:
    return store.create(EntityKind.DOCTORS, doctor)

# Patients
def get_patients(store: RecordStore) -> List[schemas.Patient]:
    return store.get_all(EntityKind.PATIENTS)

def get_patient(store: RecordStore, patient_id: int) -> Optional[schemas.Patient]:
    return store.get_by_id(EntityKind.PATIENTS, patient_id)

def create_patient(store: RecordStore, patient: schemas.PatientCreate) -> schemas.Patient:
    return store.create(EntityKind.PATIENTS, patient)

# Departments
def get_departments(store: RecordStore) -> List[schemas.Department]:
    return store.get_all(EntityKind.DEPARTMENTS)

def get_department(store: RecordStore, department_id: int) -> Optional[schemas.Department]:
    return store.get_by_id(EntityKind.DEPARTMENTS, department_id)

def create_department(store: RecordStore, department: schemas.DepartmentCreate) -> schemas.Department:
    return store.create(EntityKind.DEPARTMENTS, department)

# Appointments
def get_appointments(store: RecordStore) -> List[schemas.Appointment]:
    return store.get_all(EntityKind.APPOINTMENTS)

def get_appointment(store: RecordStore, appointment_id: int) -> Optional[schemas.Appointment]:
    return store.get_by_id(EntityKind.APPOINTMENTS, appointment_id)

def get_appointments_by_doctor(store: RecordStore, doctor_id: int) -> List[schemas.Appointment]:
    return store.get_by_foreign_key(EntityKind.APPOINTMENTS, "doctor_id", doctor_id)

def get_appointments_by_patient(store: RecordStore, patient_id: int) -> List[schemas.Appointment]:
    return store.get_by_foreign_key(EntityKind.APPOINTMENTS, "patient_id", patient_id)

def create_appointment(store: RecordStore, appointment: schemas.AppointmentCreate) -> schemas.Appointment:
    return store.create(EntityKind.APPOINTMENTS, appointment)

def update_appointment(store: RecordStore, appointment_id: int, changes: schemas.AppointmentUpdate) -> Optional[schemas.Appointment]:
    return store.update(EntityKind.APPOINTMENTS, appointment_id, changes)

def delete_appointment(store: RecordStore, appointment_id: int) -> bool:
    return store.delete(EntityKind.APPOINTMENTS, appointment_id)

# Visits
def get_visits(store: RecordStore) -> List[schemas.Visit]:
    return store.get_all(EntityKind.VISITS)

def get_visit(store: RecordStore, visit_id: int) -> Optional[schemas.Visit]:
    return store.get_by_id(EntityKind.VISITS, visit_id)

def get_visits_by_doctor(store: RecordStore, doctor_id: int) -> List[schemas.Visit]:
    return store.get_by_foreign_key(EntityKind.VISITS, "doctor_id", doctor_id)

def get_visits_by_patient(store: RecordStore, patient_id: int) -> List[schemas.Visit]:
    return store.get_by_foreign_key(EntityKind.VISITS, "patient_id", patient_id)

def create_visit(store: RecordStore, visit: schemas.VisitCreate) -> schemas.Visit:
    return store.create(EntityKind.VISITS, visit)

# Health metrics
def get_health_metrics(store: RecordStore, patient_id: int) -> List[schemas.HealthMetric]:
    return store.get_by_foreign_key(EntityKind.HEALTH_METRICS, "patient_id", patient_id)

def create_health_metric(store: RecordStore, metric: schemas.HealthMetricCreate) -> schemas.HealthMetric:
    return store.create(EntityKind.HEALTH_METRICS, metric)

# backend/clinic_admin/schemas.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


class UserBase(CamelModel):
    username: str
    name: str
    role: str
    email: Optional[str] = None
    avatar: Optional[str] = None

class UserCreate(UserBase):
    password: str

class User(UserCreate):
    id: int

    class Config:
        frozen = True

class UserPublic(UserBase):
    id: int


class AvailableTimeSlot(CamelModel):
    day: str
    times: List[str] = []

class DoctorBase(CamelModel):
    name: str
    specialty: str
    avatar: Optional[str] = None
    rating: Optional[int] = Field(None, ge=0, le=50)
    experience: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    available_time_slots: List[AvailableTimeSlot] = []

class DoctorCreate(DoctorBase):
    pass

class Doctor(DoctorBase):
    id: int

    class Config:
        frozen = True


class PatientBase(CamelModel):
    name: str
    avatar: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    address: Optional[str] = None
    medical_conditions: List[str] = []
    health_metrics: Optional[Dict[str, Any]] = None

class PatientCreate(PatientBase):
    pass

class Patient(PatientBase):
    id: int

    class Config:
        frozen = True


class DepartmentBase(CamelModel):
    name: str
    color: str
    staff_count: int
    patient_count: int

class DepartmentCreate(DepartmentBase):
    pass

class Department(DepartmentBase):
    id: int

    class Config:
        frozen = True


class AppointmentBase(CamelModel):
    patient_id: int
    doctor_id: int
    date: datetime
    time: str
    status: AppointmentStatus
    condition: Optional[str] = None
    notes: Optional[str] = None

class AppointmentCreate(AppointmentBase):
    pass

class Appointment(AppointmentBase):
    id: int

    class Config:
        frozen = True

class AppointmentUpdate(CamelModel):
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    condition: Optional[str] = None
    notes: Optional[str] = None


class VisitBase(CamelModel):
    patient_id: int
    doctor_id: int
    date: datetime
    time: str
    condition: str
    notes: Optional[str] = None

class VisitCreate(VisitBase):
    pass

class Visit(VisitBase):
    id: int

    class Config:
        frozen = True


class HealthMetricBase(CamelModel):
    timestamp: datetime
    heart_rate: Optional[int] = None
    sleep_hours: Optional[float] = None
    blood_pressure: Optional[str] = None
    temperature: Optional[float] = None
    weight: Optional[float] = None

class HealthMetricCreate(HealthMetricBase):
    patient_id: int

class HealthMetric(HealthMetricCreate):
    id: int

    class Config:
        frozen = True


# Derived views

class EnrichedVisit(Visit):
    patient: Optional[Patient] = None
    doctor: Optional[Doctor] = None

class EnrichedAppointment(Appointment):
    patient: Optional[Patient] = None
    doctor: Optional[Doctor] = None

class VisitPage(CamelModel):
    items: List[EnrichedVisit]
    page: int
    total_pages: int
    total: int
    start: int
    end: int

class PatientVisits(CamelModel):
    this_month: int
    last_month: int
    change: int

class DashboardStats(CamelModel):
    today_appointments: int
    remaining_appointments: int
    patient_visits: PatientVisits
    avg_treatment_time: int
    patient_satisfaction: float

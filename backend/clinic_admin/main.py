# backend/clinic_admin/main.py
import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from reporting import aggregates, windows
from . import crud, schemas
from .config import Settings, configure_logging
from .seed_demo import seed
from .store import RecordStore
from .timing import TimingMiddleware

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def api_error(code: str, message: str, status: int = 400, **extra):
    """Return a standardized JSON API error response."""
    logger.error(f"{code}: {message}")
    return JSONResponse({'error': {'code': code, 'message': message, **extra}}, status_code=status)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return api_error('VALIDATION_FAILED', 'Invalid request data', 400, fields=fields)


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return api_error('INTERNAL_ERROR', 'An unexpected error occurred', 500)


# Dependencies
def get_store(request: Request) -> RecordStore:
    return request.app.state.store

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# Users
@router.get("/users/current", response_model=schemas.UserPublic)
def read_current_user(store: RecordStore = Depends(get_store), settings: Settings = Depends(get_settings)):
    # No sessions: the configured user is always the current one
    user = crud.get_user(store, settings.current_user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# Doctors and staff
@router.get("/doctors", response_model=List[schemas.Doctor])
def read_doctors(store: RecordStore = Depends(get_store)):
    return crud.get_doctors(store)

@router.get("/doctors/{doctor_id}", response_model=schemas.Doctor)
def read_doctor(doctor_id: int, store: RecordStore = Depends(get_store)):
    doctor = crud.get_doctor(store, doctor_id)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return doctor

@router.get("/doctors/{doctor_id}/time-slots", response_model=List[str])
def read_doctor_time_slots(doctor_id: int, day: date = Query(..., alias="date"),
                           store: RecordStore = Depends(get_store)):
    doctor = crud.get_doctor(store, doctor_id)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return aggregates.available_time_slots(doctor, day)

@router.get("/staff", response_model=List[schemas.Doctor])
def read_staff(department: Optional[str] = None, search: Optional[str] = None,
               store: RecordStore = Depends(get_store)):
    return aggregates.filter_staff(crud.get_doctors(store), department=department, search=search)

@router.get("/staff/by-department")
def read_staff_by_department(store: RecordStore = Depends(get_store)):
    return aggregates.staff_by_specialty(crud.get_doctors(store), crud.get_departments(store))


# Patients
@router.get("/patients", response_model=List[schemas.Patient])
def read_patients(store: RecordStore = Depends(get_store)):
    return crud.get_patients(store)

@router.get("/patients/{patient_id}", response_model=schemas.Patient)
def read_patient(patient_id: int, store: RecordStore = Depends(get_store)):
    patient = crud.get_patient(store, patient_id)
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient

@router.get("/patients/{patient_id}/health-metrics", response_model=List[schemas.HealthMetric])
def read_health_metrics(patient_id: int, store: RecordStore = Depends(get_store)):
    return crud.get_health_metrics(store, patient_id)

@router.post("/patients/{patient_id}/health-metrics", response_model=schemas.HealthMetric, status_code=201)
def create_health_metric(patient_id: int, metric: schemas.HealthMetricBase,
                         store: RecordStore = Depends(get_store)):
    draft = schemas.HealthMetricCreate(patient_id=patient_id, **metric.model_dump())
    return crud.create_health_metric(store, draft)


# Departments
@router.get("/departments", response_model=List[schemas.Department])
def read_departments(store: RecordStore = Depends(get_store)):
    return crud.get_departments(store)

@router.get("/departments/distribution")
def read_department_distribution(store: RecordStore = Depends(get_store)):
    departments = crud.get_departments(store)
    return {
        "patients": aggregates.patient_distribution(departments),
        "staff": aggregates.staff_distribution(departments),
    }

@router.get("/departments/{department_id}", response_model=schemas.Department)
def read_department(department_id: int, store: RecordStore = Depends(get_store)):
    department = crud.get_department(store, department_id)
    if not department:
        raise HTTPException(status_code=404, detail="Department not found")
    return department


# Appointments
def _select_appointments(store, doctor_id, patient_id, status):
    if doctor_id:
        appointments = crud.get_appointments_by_doctor(store, doctor_id)
    elif patient_id:
        appointments = crud.get_appointments_by_patient(store, patient_id)
    else:
        appointments = crud.get_appointments(store)
    if status:
        appointments = [a for a in appointments if a.status == status]
    return appointments

@router.get("/appointments", response_model=List[schemas.Appointment])
def read_appointments(doctor_id: Optional[int] = Query(None, alias="doctorId"),
                      patient_id: Optional[int] = Query(None, alias="patientId"),
                      status: Optional[schemas.AppointmentStatus] = None,
                      store: RecordStore = Depends(get_store)):
    return _select_appointments(store, doctor_id, patient_id, status)

@router.get("/appointments/enriched", response_model=List[schemas.EnrichedAppointment])
def read_enriched_appointments(doctor_id: Optional[int] = Query(None, alias="doctorId"),
                               patient_id: Optional[int] = Query(None, alias="patientId"),
                               status: Optional[schemas.AppointmentStatus] = None,
                               store: RecordStore = Depends(get_store)):
    appointments = _select_appointments(store, doctor_id, patient_id, status)
    return aggregates.enrich(appointments, crud.get_patients(store), crud.get_doctors(store))

@router.get("/appointments/{appointment_id}", response_model=schemas.Appointment)
def read_appointment(appointment_id: int, store: RecordStore = Depends(get_store)):
    appointment = crud.get_appointment(store, appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment

@router.post("/appointments", response_model=schemas.Appointment, status_code=201)
def create_appointment(appointment: schemas.AppointmentCreate, store: RecordStore = Depends(get_store)):
    created = crud.create_appointment(store, appointment)
    logger.info(f"Created appointment {created.id} for patient {created.patient_id}")
    return created

@router.patch("/appointments/{appointment_id}", response_model=schemas.Appointment)
def update_appointment(appointment_id: int, changes: schemas.AppointmentUpdate,
                       store: RecordStore = Depends(get_store)):
    updated = crud.update_appointment(store, appointment_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return updated

@router.delete("/appointments/{appointment_id}", status_code=204)
def delete_appointment(appointment_id: int, store: RecordStore = Depends(get_store)):
    if not crud.delete_appointment(store, appointment_id):
        raise HTTPException(status_code=404, detail="Appointment not found")
    return Response(status_code=204)


# Visits
@router.get("/visits", response_model=List[schemas.Visit])
def read_visits(doctor_id: Optional[int] = Query(None, alias="doctorId"),
                patient_id: Optional[int] = Query(None, alias="patientId"),
                store: RecordStore = Depends(get_store)):
    if doctor_id:
        return crud.get_visits_by_doctor(store, doctor_id)
    if patient_id:
        return crud.get_visits_by_patient(store, patient_id)
    return crud.get_visits(store)

@router.get("/visits/table", response_model=schemas.VisitPage)
def read_visit_table(window: str = windows.TODAY, page: int = 1,
                     store: RecordStore = Depends(get_store), settings: Settings = Depends(get_settings)):
    enriched = aggregates.enrich(crud.get_visits(store), crud.get_patients(store), crud.get_doctors(store))
    filtered = windows.filter_by_window(enriched, window, week_start=settings.week_start)
    result = windows.paginate(filtered, page, settings.page_size)
    return schemas.VisitPage(
        items=result.items,
        page=result.page,
        total_pages=result.total_pages,
        total=result.total,
        start=result.start,
        end=result.end,
    )

@router.get("/visits/conditions")
def read_visit_conditions(store: RecordStore = Depends(get_store)):
    tally = aggregates.condition_frequency(crud.get_visits(store))
    return [{"name": name, "value": value} for name, value in tally.items()]

@router.get("/visits/{visit_id}", response_model=schemas.Visit)
def read_visit(visit_id: int, store: RecordStore = Depends(get_store)):
    visit = crud.get_visit(store, visit_id)
    if not visit:
        raise HTTPException(status_code=404, detail="Visit not found")
    return visit


# Dashboard and analytics
@router.get("/dashboard/stats", response_model=schemas.DashboardStats)
def read_dashboard_stats(store: RecordStore = Depends(get_store)):
    return aggregates.dashboard_stats(crud.get_appointments(store), crud.get_visits(store))

@router.get("/analytics/report")
def read_analytics_report(time_range: str = Query("thisMonth", alias="timeRange"),
                          store: RecordStore = Depends(get_store)):
    return aggregates.analytics_report(crud.get_visits(store), crud.get_departments(store), time_range)


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.store.clear()

    app = FastAPI(title="Clinic Admin Dashboard API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store if store is not None else RecordStore()
    if settings.seed_demo:
        seed(app.state.store)

    app.add_middleware(TimingMiddleware)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

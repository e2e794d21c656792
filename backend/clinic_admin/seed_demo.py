# backend/clinic_admin/seed_demo.py
import logging
import random
from datetime import datetime, timedelta

from . import crud, schemas
from .store import EntityKind, RecordStore

logger = logging.getLogger(__name__)

DOCTORS = [
    dict(name='Dr. Wade Warren', avatar='https://randomuser.me/api/portraits/women/87.jpg',
         specialty='Cardiologist', rating=49, experience=24, email='wade.warren@medicare.com',
         phone='+1 (555) 123-4567',
         available_time_slots=[{'day': '2024-05-20',
                                'times': ['09:00 AM', '10:00 AM', '11:00 AM', '01:00 PM', '02:00 PM']}]),
    dict(name='Dr. Dianne Russell', avatar='https://randomuser.me/api/portraits/women/44.jpg',
         specialty='Pediatrician', rating=48, experience=15, email='dianne.russell@medicare.com',
         phone='+1 (555) 234-5678'),
    dict(name='Dr. Bessie Cooper', avatar='https://randomuser.me/api/portraits/women/53.jpg',
         specialty='Neurologist', rating=47, experience=18, email='bessie.cooper@medicare.com',
         phone='+1 (555) 345-6789'),
    dict(name='Dr. Kathryn Murphy', avatar='https://randomuser.me/api/portraits/women/72.jpg',
         specialty='Dermatologist', rating=46, experience=12, email='kathryn.murphy@medicare.com',
         phone='+1 (555) 456-7890'),
    dict(name='Dr. Jerome Bell', avatar='https://randomuser.me/api/portraits/men/22.jpg',
         specialty='Orthopedist', rating=45, experience=20, email='jerome.bell@medicare.com',
         phone='+1 (555) 567-8901'),
]

PATIENTS = [
    dict(name='Wade Warren', avatar='https://randomuser.me/api/portraits/men/32.jpg',
         email='ww@info.com', phone='+1 (555) 987-6543', date_of_birth=datetime(1985, 4, 12),
         address='123 Main St, Anytown, USA', medical_conditions=['Mumps Stage 3'],
         health_metrics={'heartRate': 78, 'sleepHours': 7}),
    dict(name='Cody Fisher', avatar='https://randomuser.me/api/portraits/men/55.jpg',
         email='cody@info.com', phone='+1 (555) 876-5432', date_of_birth=datetime(1992, 7, 23),
         address='456 Oak Ave, Somewhere, USA', medical_conditions=['Depression'],
         health_metrics={'heartRate': 68, 'sleepHours': 6}),
    dict(name='Savannah Nguyen', avatar='https://randomuser.me/api/portraits/women/76.jpg',
         email='sav@info.com', phone='+1 (555) 765-4321', date_of_birth=datetime(1988, 1, 15),
         address='789 Pine St, Elsewhere, USA', medical_conditions=['Arthritis'],
         health_metrics={'heartRate': 72, 'sleepHours': 8}),
    dict(name='Jerome Bell', avatar='https://randomuser.me/api/portraits/men/85.jpg',
         email='jer@info.com', phone='+1 (555) 654-3210', date_of_birth=datetime(1976, 9, 30),
         address='101 Cedar Rd, Nowhere, USA', medical_conditions=['Fracture'],
         health_metrics={'heartRate': 65, 'sleepHours': 7}),
]

DEPARTMENTS = [
    dict(name='Cardiology', color='#1366AE', staff_count=15, patient_count=120),
    dict(name='Neurology', color='#4A90E2', staff_count=12, patient_count=90),
    dict(name='Dermatology', color='#66B5F8', staff_count=8, patient_count=60),
    dict(name='Orthopedics', color='#2AB7CA', staff_count=10, patient_count=75),
    dict(name='Emergency', color='#E74C3C', staff_count=20, patient_count=200),
]

VISITS = [
    dict(patient_id=1, doctor_id=2, date=datetime(2018, 4, 4), time='9:00-10:00 PM',
         condition='Mumps Stage 3', notes='Patient showing improvement after medication.'),
    dict(patient_id=2, doctor_id=3, date=datetime(2017, 7, 18), time='10:00-11:00 PM',
         condition='Depression', notes='Prescribed new medication and therapy sessions.'),
    dict(patient_id=3, doctor_id=4, date=datetime(2018, 4, 6), time='11:00-12:00 PM',
         condition='Arthritis', notes='Pain management routine established.'),
    dict(patient_id=4, doctor_id=5, date=datetime(2016, 9, 23), time='1:00-2:00 PM',
         condition='Fracture', notes='Cast applied, follow-up in 4 weeks.'),
]

ADMIN = dict(username='admin', password='admin123', name='Dr. Zack Williams', role='admin',
             email='zack@medicare.com', avatar='https://randomuser.me/api/portraits/men/32.jpg')


def _months_ago(moment: datetime, months: int) -> datetime:
    total = moment.year * 12 + moment.month - 1 - months
    return moment.replace(year=total // 12, month=total % 12 + 1, day=min(moment.day, 28))


def seed(store: RecordStore, now=None, rng=None) -> bool:
    """
    Load the demo clinic into an empty store so the dashboard has something to show.
    Returns False without touching the store if it already holds doctors.
    """
    if store.count(EntityKind.DOCTORS):
        logger.info("Store already seeded. Skipping initialization.")
        return False

    now = now or datetime.now()
    rng = rng or random.Random()

    for doctor in DOCTORS:
        crud.create_doctor(store, schemas.DoctorCreate(**doctor))
    for patient in PATIENTS:
        crud.create_patient(store, schemas.PatientCreate(**patient))
    for department in DEPARTMENTS:
        crud.create_department(store, schemas.DepartmentCreate(**department))
    for visit in VISITS:
        crud.create_visit(store, schemas.VisitCreate(**visit))

    # Heart rate for patient 1, hourly over the last 12 hours
    for i in range(12):
        crud.create_health_metric(store, schemas.HealthMetricCreate(
            patient_id=1,
            timestamp=now - timedelta(hours=i),
            heart_rate=70 + rng.randrange(25),
            blood_pressure='120/80',
            temperature=98,
            weight=170,
        ))
    # Sleep for patient 1, monthly over the last 12 months
    for i in range(12):
        crud.create_health_metric(store, schemas.HealthMetricCreate(
            patient_id=1,
            timestamp=_months_ago(now, i),
            sleep_hours=5 + rng.randrange(4),
        ))

    crud.create_user(store, schemas.UserCreate(**ADMIN))

    # Today's schedule: 8 hourly slots from 09:00, the first 5 already seen
    for i in range(8):
        start = now.replace(hour=9 + i, minute=0, second=0, microsecond=0)
        crud.create_appointment(store, schemas.AppointmentCreate(
            patient_id=(i % 4) + 1,
            doctor_id=(i % 5) + 1,
            date=start,
            time=start.strftime('%I:%M %p'),
            status=schemas.AppointmentStatus.COMPLETED if i < 5 else schemas.AppointmentStatus.SCHEDULED,
            condition=PATIENTS[i % 4]['medical_conditions'][0],
            notes='Regular checkup',
        ))

    logger.info(
        "Seeded demo clinic: %d doctors, %d patients, %d departments, %d visits, %d appointments.",
        store.count(EntityKind.DOCTORS), store.count(EntityKind.PATIENTS),
        store.count(EntityKind.DEPARTMENTS), store.count(EntityKind.VISITS),
        store.count(EntityKind.APPOINTMENTS),
    )
    return True

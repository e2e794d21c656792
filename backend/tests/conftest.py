"""
Shared fixtures for the clinic dashboard test suite.

Every test gets its own ``RecordStore`` so ids and records never leak between
tests. The HTTP fixtures build a fresh app around that store through
``create_app`` instead of using the module-level app.
"""
import random
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from clinic_admin import schemas
from clinic_admin.config import Settings
from clinic_admin.main import create_app
from clinic_admin.seed_demo import seed
from clinic_admin.store import RecordStore

# A Friday; the week (Sunday start) began 2018-04-01
NOW = datetime(2018, 4, 6, 14, 30)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store():
    return RecordStore()


@pytest.fixture
def seeded_store(store, now):
    seed(store, now=now, rng=random.Random(7))
    return store


@pytest.fixture
def settings():
    return Settings(seed_demo=False, page_size=4, current_user_id=1)


@pytest.fixture
def live_store():
    """Demo data seeded against the real clock, for routes that use the current date."""
    live = RecordStore()
    seed(live, rng=random.Random(7))
    return live


@pytest.fixture
def client(live_store, settings):
    app = create_app(settings=settings, store=live_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def empty_client(store, settings):
    app = create_app(settings=settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


def make_visit(**overrides):
    fields = dict(patient_id=1, doctor_id=1, date=datetime(2018, 4, 6), time='9:00-10:00 AM',
                  condition='Checkup', notes=None)
    fields.update(overrides)
    return schemas.VisitCreate(**fields)


def make_appointment(**overrides):
    fields = dict(patient_id=1, doctor_id=1, date=NOW, time='09:00 AM',
                  status=schemas.AppointmentStatus.SCHEDULED, condition='Checkup', notes='Regular checkup')
    fields.update(overrides)
    return schemas.AppointmentCreate(**fields)

# backend/reporting/aggregates.py
"""Derived dashboard and analytics views computed from store scans.

Nothing here mutates its inputs. Records may be pydantic models or plain
mappings; a record missing the field a report needs is skipped on its own
instead of failing the whole report.
"""
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ValidationError

from clinic_admin import schemas
from .records import as_date, as_int, read_field

logger = logging.getLogger(__name__)

MONTH_NAMES = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

# Not derived from stored data; the dashboard shows these figures as-is.
AVG_TREATMENT_TIME = 32
PATIENT_SATISFACTION = 4.8

UNKNOWN_DEPARTMENT_COLOR = "#cccccc"


def _as_fields(record: Any) -> Dict[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump()
    return dict(record)


def _index_by_id(records: Iterable[Any]) -> Dict[int, Any]:
    index = {}
    for record in records or []:
        record_id = as_int(read_field(record, "id"))
        if record_id is not None:
            index.setdefault(record_id, record)
    return index


def _is_appointment(record: Any) -> bool:
    if isinstance(record, schemas.Appointment):
        return True
    if isinstance(record, schemas.Visit):
        return False
    return read_field(record, "status") is not None


def enrich(records, patients, doctors) -> List[Union[schemas.EnrichedVisit, schemas.EnrichedAppointment]]:
    """Attach the patient and doctor each visit or appointment refers to.

    Args:
        records (list): Visits or appointments.
        patients (list): Patients to resolve ``patient_id`` against.
        doctors (list): Doctors to resolve ``doctor_id`` against.

    Returns:
        list: ``EnrichedVisit`` / ``EnrichedAppointment`` objects. ``patient``
              or ``doctor`` is None when the reference does not resolve.
              Records that cannot be read at all are dropped.
    """
    patients_by_id = _index_by_id(patients)
    doctors_by_id = _index_by_id(doctors)
    enriched = []
    for record in records or []:
        if record is None:
            continue
        model = schemas.EnrichedAppointment if _is_appointment(record) else schemas.EnrichedVisit
        patient = patients_by_id.get(as_int(read_field(record, "patient_id")))
        doctor = doctors_by_id.get(as_int(read_field(record, "doctor_id")))
        try:
            enriched.append(model.model_validate({
                **_as_fields(record),
                "patient": _as_fields(patient) if patient is not None else None,
                "doctor": _as_fields(doctor) if doctor is not None else None,
            }))
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning(f"Skipping unreadable record {read_field(record, 'id')!r}: {e}")
    return enriched


def _percentage(count: int, total: int) -> int:
    if total <= 0:
        return 0
    # Math.round semantics: halves round up
    return int(math.floor(100 * count / total + 0.5))


def _count(department: Any, field_name: str) -> int:
    value = read_field(department, field_name)
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return value
    return 0


def department_distribution(departments, field_name: str = "patient_count") -> List[Dict[str, Any]]:
    """Each department's rounded percentage share of ``field_name`` across all departments.

    Returns:
        list: ``{"name", "color", "count", "percentage"}`` per department. When
              every count is zero each department gets 0%.
    """
    departments = [d for d in departments or [] if d is not None]
    total = sum(_count(d, field_name) for d in departments)
    return [
        {
            "name": read_field(d, "name"),
            "color": read_field(d, "color"),
            "count": _count(d, field_name),
            "percentage": _percentage(_count(d, field_name), total),
        }
        for d in departments
    ]


def patient_distribution(departments) -> List[Dict[str, Any]]:
    return [
        {"name": row["name"], "value": row["percentage"], "color": row["color"]}
        for row in department_distribution(departments, "patient_count")
    ]


def staff_distribution(departments) -> List[Dict[str, Any]]:
    return [
        {"name": row["name"], "value": row["count"], "percentage": row["percentage"]}
        for row in department_distribution(departments, "staff_count")
    ]


def department_visits_by_bucket(visits, departments) -> List[Dict[str, Any]]:
    """Approximate visits per department by bucketing doctor ids.

    Visits carry no department reference, so a visit is attributed to the
    department whose id falls in the same ``id % len(departments)`` bucket as
    the visit's doctor id. This is a stand-in for a real department join and
    does not look at doctor specialties; see ``staff_by_specialty`` for that.

    Returns:
        list: ``{"name", "value", "color"}`` per department, in department order.
    """
    departments = list(departments or [])
    visits = list(visits or [])
    bucket_count = len(departments)
    summary = []
    for dept in departments:
        name = read_field(dept, "name")
        color = read_field(dept, "color")
        dept_id = as_int(read_field(dept, "id"))
        if not name or not color:
            summary.append({"name": "Unknown", "value": 0, "color": UNKNOWN_DEPARTMENT_COLOR})
            continue
        if dept_id is None:
            # no bucket to match against
            summary.append({"name": name, "value": 0, "color": color})
            continue
        value = 0
        for visit in visits:
            doctor_id = as_int(read_field(visit, "doctor_id"))
            if doctor_id is not None and doctor_id % bucket_count == dept_id % bucket_count:
                value += 1
        summary.append({"name": name, "value": value, "color": color})
    return summary


def _specialty_matches(doctor: Any, department_name: str) -> bool:
    specialty = read_field(doctor, "specialty")
    return isinstance(specialty, str) and specialty.lower() == department_name.lower()


def staff_by_specialty(doctors, departments) -> List[Dict[str, Any]]:
    """Count doctors per department by case-insensitive specialty == department name."""
    doctors = list(doctors or [])
    rows = []
    for dept in departments or []:
        name = read_field(dept, "name")
        if not isinstance(name, str):
            continue
        rows.append({
            "department": name,
            "count": sum(1 for d in doctors if _specialty_matches(d, name)),
            "color": read_field(dept, "color"),
        })
    return rows


def filter_staff(doctors, department: Optional[str] = None, search: Optional[str] = None) -> list:
    """Doctors matching a department (by specialty) and a free-text search term.

    An empty department or ``all`` disables the department filter. The search
    term matches case-insensitively anywhere in the doctor's name or specialty.
    """
    term = (search or "").lower()
    matches = []
    for doctor in doctors or []:
        name = read_field(doctor, "name")
        specialty = read_field(doctor, "specialty")
        if not isinstance(name, str) or not isinstance(specialty, str):
            continue
        if department and department.lower() != "all" and specialty.lower() != department.lower():
            continue
        if term and term not in name.lower() and term not in specialty.lower():
            continue
        matches.append(doctor)
    return matches


def condition_frequency(visits) -> Dict[str, int]:
    """Tally visit conditions, keyed in first-seen order. Empty and non-string conditions are ignored."""
    counts: Dict[str, int] = {}
    for visit in visits or []:
        condition = read_field(visit, "condition")
        if isinstance(condition, str) and condition:
            counts[condition] = counts.get(condition, 0) + 1
    return counts


def monthly_visits(visits, now=None) -> List[Dict[str, Any]]:
    """Visits per calendar month of ``now``'s year, January first."""
    year = (now or datetime.now()).year
    counts = [0] * 12
    for visit in visits or []:
        day = as_date(read_field(visit, "date"))
        if day is not None and day.year == year:
            counts[day.month - 1] += 1
    return [{"name": MONTH_NAMES[i], "visits": counts[i]} for i in range(12)]


def _previous_month(day: date):
    if day.month == 1:
        return day.year - 1, 12
    return day.year, day.month - 1


def _count_in_month(records, year: int, month: int) -> int:
    total = 0
    for record in records:
        day = as_date(read_field(record, "date"))
        if day is not None and (day.year, day.month) == (year, month):
            total += 1
    return total


def visit_change(current: int, previous: int) -> Dict[str, Any]:
    if current > previous:
        text = f"↑ {current - previous} from last month"
    else:
        text = f"↓ {previous - current} from last month"
    return {"thisMonth": current, "lastMonth": previous, "change": current - previous, "text": text}


def dashboard_stats(appointments, visits, now=None) -> schemas.DashboardStats:
    """Headline numbers for the dashboard.

    Args:
        appointments (list): All appointments.
        visits (list): All visits.
        now (datetime, optional): Reference time; defaults to local now.

    Returns:
        DashboardStats: today's appointment count and how many are not yet
                        completed, this and last calendar month's visit counts,
                        plus the fixed treatment-time and satisfaction figures.
    """
    now = now or datetime.now()
    today = now.date() if isinstance(now, datetime) else now
    todays = [a for a in appointments or [] if as_date(read_field(a, "date")) == today]
    completed = sum(1 for a in todays if read_field(a, "status") == schemas.AppointmentStatus.COMPLETED)

    visits = list(visits or [])
    this_month = _count_in_month(visits, today.year, today.month)
    last_month = _count_in_month(visits, *_previous_month(today))

    return schemas.DashboardStats(
        today_appointments=len(todays),
        remaining_appointments=len(todays) - completed,
        patient_visits=schemas.PatientVisits(
            this_month=this_month,
            last_month=last_month,
            change=this_month - last_month,
        ),
        avg_treatment_time=AVG_TREATMENT_TIME,
        patient_satisfaction=PATIENT_SATISFACTION,
    )


def analytics_report(visits, departments, time_range: str = "thisMonth", now=None) -> Dict[str, Any]:
    """Build the downloadable analytics summary.

    Each section degrades to an empty list (with its ``has...`` flag False)
    rather than failing when the underlying data is missing.
    """
    now = now or datetime.now()
    visits = [v for v in visits or [] if v is not None]
    departments = [d for d in departments or [] if d is not None]

    monthly = monthly_visits(visits, now)
    by_department = department_visits_by_bucket(visits, departments)
    conditions = [{"name": name, "value": value} for name, value in condition_frequency(visits).items()]

    current_index = now.month - 1
    previous_index = 11 if current_index == 0 else current_index - 1

    return {
        "generatedAt": now.isoformat(),
        "timeRange": time_range,
        "visitsSummary": monthly,
        "departmentSummary": by_department,
        "conditionSummary": conditions,
        "hasDepartmentData": any(row["value"] > 0 for row in by_department),
        "hasConditionData": bool(conditions),
        "visitChange": visit_change(monthly[current_index]["visits"], monthly[previous_index]["visits"]),
    }


def available_time_slots(doctor, day: Union[date, str]) -> List[str]:
    """Time labels the doctor offers on ``day``; empty when the day has no entry."""
    if isinstance(day, datetime):
        day = day.date()
    wanted = day.isoformat() if isinstance(day, date) else str(day)
    for slot in read_field(doctor, "available_time_slots") or []:
        if read_field(slot, "day") == wanted:
            return list(read_field(slot, "times") or [])
    return []

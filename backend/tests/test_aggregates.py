"""
Unit tests for the dashboard and analytics aggregations.
"""
from datetime import date, datetime

from clinic_admin import crud, schemas
from reporting import aggregates

from conftest import make_appointment, make_visit

DEPARTMENTS = [
    {"id": 1, "name": "Cardiology", "color": "#1366AE", "staffCount": 15, "patientCount": 120},
    {"id": 2, "name": "Neurology", "color": "#4A90E2", "staffCount": 12, "patientCount": 90},
    {"id": 3, "name": "Dermatology", "color": "#66B5F8", "staffCount": 8, "patientCount": 60},
    {"id": 4, "name": "Orthopedics", "color": "#2AB7CA", "staffCount": 10, "patientCount": 75},
    {"id": 5, "name": "Emergency", "color": "#E74C3C", "staffCount": 20, "patientCount": 200},
]


def test_dashboard_stats_counts_todays_appointments(now):
    appointments = [
        make_appointment(date=now.replace(hour=9 + i),
                         status=schemas.AppointmentStatus.COMPLETED if i < 5 else schemas.AppointmentStatus.SCHEDULED)
        for i in range(8)
    ]
    appointments.append(make_appointment(date=datetime(2018, 4, 5, 10), status=schemas.AppointmentStatus.COMPLETED))

    stats = aggregates.dashboard_stats(appointments, [], now=now)

    assert stats.today_appointments == 8
    assert stats.remaining_appointments == 3


def test_dashboard_stats_fixed_figures(now):
    stats = aggregates.dashboard_stats([], [], now=now)
    assert stats.avg_treatment_time == 32
    assert stats.patient_satisfaction == 4.8


def test_dashboard_visit_months_use_year(now):
    visits = [
        make_visit(date=datetime(2018, 4, 1)),
        make_visit(date=datetime(2018, 4, 6)),
        make_visit(date=datetime(2018, 3, 15)),
        make_visit(date=datetime(2017, 4, 2)),
    ]
    stats = aggregates.dashboard_stats([], visits, now=now)
    assert stats.patient_visits.this_month == 2
    assert stats.patient_visits.last_month == 1
    assert stats.patient_visits.change == 1


def test_dashboard_last_month_wraps_to_december():
    visits = [make_visit(date=datetime(2017, 12, 20)), make_visit(date=datetime(2018, 12, 20))]
    stats = aggregates.dashboard_stats([], visits, now=datetime(2018, 1, 10))
    assert stats.patient_visits.last_month == 1
    assert stats.patient_visits.this_month == 0
    assert stats.patient_visits.change == -1


def test_dashboard_stats_on_seeded_store(seeded_store, now):
    stats = aggregates.dashboard_stats(crud.get_appointments(seeded_store), crud.get_visits(seeded_store), now=now)
    assert stats.today_appointments == 8
    assert stats.remaining_appointments == 3
    assert stats.patient_visits.this_month == 2


def test_dashboard_skips_malformed_appointments(now):
    appointments = [{"date": now, "status": "completed"}, {"status": "completed"}, {"date": "garbage"}, None]
    stats = aggregates.dashboard_stats(appointments, [], now=now)
    assert stats.today_appointments == 1
    assert stats.remaining_appointments == 0


def test_condition_frequency_keeps_first_seen_order():
    visits = [{"condition": c} for c in ["Mumps Stage 3", "Depression", "Arthritis", "Fracture"]]
    assert list(aggregates.condition_frequency(visits).items()) == [
        ("Mumps Stage 3", 1), ("Depression", 1), ("Arthritis", 1), ("Fracture", 1),
    ]


def test_condition_frequency_tallies_and_skips_bad_values():
    visits = [{"condition": "Flu"}, {"condition": ""}, {"condition": 3}, {}, {"condition": "Asthma"},
              {"condition": "Flu"}]
    assert aggregates.condition_frequency(visits) == {"Flu": 2, "Asthma": 1}


def test_department_percentages_sum_close_to_100():
    rows = aggregates.department_distribution(DEPARTMENTS, "patient_count")
    assert [r["percentage"] for r in rows] == [22, 17, 11, 14, 37]
    assert abs(sum(r["percentage"] for r in rows) - 100) <= len(rows) - 1


def test_department_distribution_with_zero_total():
    departments = [dict(d, patientCount=0) for d in DEPARTMENTS]
    rows = aggregates.department_distribution(departments, "patient_count")
    assert all(r["percentage"] == 0 for r in rows)


def test_patient_and_staff_distribution_shapes():
    patients = aggregates.patient_distribution(DEPARTMENTS)
    staff = aggregates.staff_distribution(DEPARTMENTS)
    assert patients[0] == {"name": "Cardiology", "value": 22, "color": "#1366AE"}
    assert staff[4] == {"name": "Emergency", "value": 20, "percentage": 31}
    assert aggregates.patient_distribution([]) == []


def test_department_visits_use_doctor_id_buckets():
    visits = [{"doctorId": d} for d in (2, 3, 4, 5, 7, 10)]
    rows = aggregates.department_visits_by_bucket(visits, DEPARTMENTS)
    # 5 departments: doctor 5 and 10 land with department 5, doctor 7 with department 2
    assert [r["value"] for r in rows] == [0, 2, 1, 1, 2]
    assert rows[1] == {"name": "Neurology", "value": 2, "color": "#4A90E2"}


def test_department_visits_tolerate_bad_records():
    departments = DEPARTMENTS[:2] + [{"id": 3, "name": None, "color": "#66B5F8"}]
    visits = [{"doctorId": 1}, {"doctorId": "1"}, {}, None]
    rows = aggregates.department_visits_by_bucket(visits, departments)
    assert rows[0]["value"] == 1
    assert rows[2] == {"name": "Unknown", "value": 0, "color": "#cccccc"}
    assert aggregates.department_visits_by_bucket(visits, []) == []


def test_staff_by_specialty_is_case_insensitive():
    doctors = [{"name": "Dr. A", "specialty": "cardiology"}, {"name": "Dr. B", "specialty": "Cardiology"},
               {"name": "Dr. C", "specialty": "Cardiologist"}, {"name": "Dr. D", "specialty": None}]
    rows = aggregates.staff_by_specialty(doctors, DEPARTMENTS[:2])
    assert rows == [
        {"department": "Cardiology", "count": 2, "color": "#1366AE"},
        {"department": "Neurology", "count": 0, "color": "#4A90E2"},
    ]


def test_filter_staff_by_department_and_search(seeded_store):
    doctors = crud.get_doctors(seeded_store)
    assert [d.name for d in aggregates.filter_staff(doctors, department="neurologist")] == ["Dr. Bessie Cooper"]
    assert [d.name for d in aggregates.filter_staff(doctors, search="MURPHY")] == ["Dr. Kathryn Murphy"]
    assert [d.name for d in aggregates.filter_staff(doctors, search="ologist", department="all")] == [
        "Dr. Wade Warren", "Dr. Bessie Cooper", "Dr. Kathryn Murphy",
    ]
    assert len(aggregates.filter_staff(doctors)) == 5


def test_enrich_attaches_patient_and_doctor(seeded_store):
    enriched = aggregates.enrich(crud.get_visits(seeded_store), crud.get_patients(seeded_store),
                                 crud.get_doctors(seeded_store))
    assert len(enriched) == 4
    first = enriched[0]
    assert isinstance(first, schemas.EnrichedVisit)
    assert first.patient.name == "Wade Warren"
    assert first.doctor.name == "Dr. Dianne Russell"


def test_enrich_leaves_unresolved_references_empty(store):
    visit = crud.create_visit(store, make_visit(patient_id=99, doctor_id=98))
    enriched = aggregates.enrich([visit], [], [])
    assert enriched[0].id == visit.id
    assert enriched[0].patient is None
    assert enriched[0].doctor is None


def test_enrich_appointments_and_skips_unreadable(store):
    appointment = crud.create_appointment(store, make_appointment())
    enriched = aggregates.enrich([appointment, {"id": 7, "status": "completed"}, None], [], [])
    assert len(enriched) == 1
    assert isinstance(enriched[0], schemas.EnrichedAppointment)


def test_monthly_visits_cover_the_current_year(now):
    visits = [{"date": "2018-04-04"}, {"date": "2018-04-06"}, {"date": "2017-04-06"}, {"date": "2018-01-31"},
              {"date": None}]
    monthly = aggregates.monthly_visits(visits, now=now)
    assert len(monthly) == 12
    assert monthly[0] == {"name": "Jan", "visits": 1}
    assert monthly[3] == {"name": "Apr", "visits": 2}


def test_visit_change_text():
    assert aggregates.visit_change(5, 3)["text"] == "↑ 2 from last month"
    assert aggregates.visit_change(3, 5) == {"thisMonth": 3, "lastMonth": 5, "change": -2,
                                             "text": "↓ 2 from last month"}


def test_analytics_report(seeded_store, now):
    report = aggregates.analytics_report(crud.get_visits(seeded_store), crud.get_departments(seeded_store),
                                         "thisMonth", now=now)
    assert report["timeRange"] == "thisMonth"
    assert report["generatedAt"] == now.isoformat()
    assert report["visitsSummary"][3]["visits"] == 2
    assert report["hasDepartmentData"] is True
    assert [c["name"] for c in report["conditionSummary"]] == ["Mumps Stage 3", "Depression", "Arthritis", "Fracture"]
    assert report["visitChange"]["change"] == 2


def test_analytics_report_with_no_data(now):
    report = aggregates.analytics_report([], [], now=now)
    assert report["departmentSummary"] == []
    assert report["conditionSummary"] == []
    assert report["hasDepartmentData"] is False
    assert report["hasConditionData"] is False


def test_available_time_slots(seeded_store):
    doctor = crud.get_doctor(seeded_store, 1)
    assert aggregates.available_time_slots(doctor, date(2024, 5, 20))[0] == "09:00 AM"
    assert aggregates.available_time_slots(doctor, "2024-05-21") == []
    assert aggregates.available_time_slots(crud.get_doctor(seeded_store, 2), date(2024, 5, 20)) == []


def test_department_visits_without_id_keep_name():
    departments = DEPARTMENTS[:2] + [{"name": "Dermatology", "color": "#66B5F8"}]
    rows = aggregates.department_visits_by_bucket([{"doctorId": 3}, {"doctorId": 1}], departments)
    assert rows[2] == {"name": "Dermatology", "value": 0, "color": "#66B5F8"}
    assert rows[0]["value"] == 1

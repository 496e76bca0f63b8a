from datetime import time, timedelta

from booking.models.business import Location
from booking.models.off_day import OffDay
from booking.models.service import Service
from booking.models.service_schedule import ServiceSchedule
from booking.scheduling.availability import day_of_week

from conftest import FUTURE_DAY, add_hours


def test_available_slots(client, service, nine_to_noon):
    response = client.get(f"/availability/slots?service_id={service.id}&day={FUTURE_DAY.isoformat()}")

    assert response.status_code == 200
    data = response.json()
    assert data["is_closed"] is False
    assert data["is_loading"] is False
    assert data["reason"] is None
    assert data["slots"] == [
        {"time": "09:00", "label": "9:00 AM"},
        {"time": "10:00", "label": "10:00 AM"},
        {"time": "11:00", "label": "11:00 AM"},
    ]


def test_available_slots_unknown_service(client):
    response = client.get(f"/availability/slots?service_id=999&day={FUTURE_DAY.isoformat()}")
    assert response.status_code == 404


def test_available_slots_without_hours_is_closed(client, service):
    response = client.get(f"/availability/slots?service_id={service.id}&day={FUTURE_DAY.isoformat()}")

    assert response.status_code == 200
    data = response.json()
    assert data["is_closed"] is True
    assert data["reason"] == "closed"
    assert data["slots"] == []


def test_available_slots_on_off_day(client, session, business, service, nine_to_noon):
    session.add(OffDay(business_id=business.id, off_date=FUTURE_DAY))
    session.commit()

    data = client.get(f"/availability/slots?service_id={service.id}&day={FUTURE_DAY.isoformat()}").json()
    assert data["reason"] == "off_day"
    assert data["slots"] == []
    assert data["off_days"] == [FUTURE_DAY.isoformat()]


def test_invalid_configuration_returns_422(client, session, service, nine_to_noon):
    weekday = day_of_week(FUTURE_DAY)
    session.add_all(
        [
            ServiceSchedule(service_id=service.id, weekday=weekday, start_time=time(9, 0), end_time=time(12, 0)),
            ServiceSchedule(service_id=service.id, weekday=weekday, start_time=time(11, 0), end_time=time(13, 0)),
        ]
    )
    session.commit()

    response = client.get(f"/availability/slots?service_id={service.id}&day={FUTURE_DAY.isoformat()}")
    assert response.status_code == 422


def test_off_days_for_calendar(client, session, business):
    location = Location(business_id=business.id, name="Centro")
    session.add(location)
    session.commit()
    session.add_all(
        [
            OffDay(business_id=business.id, off_date=FUTURE_DAY),
            OffDay(business_id=business.id, off_date=FUTURE_DAY.replace(day=20), location_id=location.id),
        ]
    )
    session.commit()

    general = client.get(f"/availability/off-days?business_id={business.id}").json()
    assert general == [FUTURE_DAY.isoformat()]

    with_location = client.get(f"/availability/off-days?business_id={business.id}&location_id={location.id}").json()
    assert with_location == [FUTURE_DAY.isoformat(), FUTURE_DAY.replace(day=20).isoformat()]


def test_malformed_range_only_breaks_its_own_weekday(client, session, business, service, nine_to_noon):
    next_day = FUTURE_DAY + timedelta(days=1)
    add_hours(session, business.id, next_day, time(9, 0), time(18, 0), ranges=[(time(14, 0), time(10, 0))])

    ok = client.get(f"/availability/slots?service_id={service.id}&day={FUTURE_DAY.isoformat()}")
    assert ok.status_code == 200
    assert [s["time"] for s in ok.json()["slots"]] == ["09:00", "10:00", "11:00"]

    broken = client.get(f"/availability/slots?service_id={service.id}&day={next_day.isoformat()}")
    assert broken.status_code == 422


def test_zero_capacity_returns_422(client, session, business, nine_to_noon):
    turma = Service(name="Turma", duration_minutes=60, slot_capacity=0, business_id=business.id)
    session.add(turma)
    session.commit()

    response = client.get(f"/availability/slots?service_id={turma.id}&day={FUTURE_DAY.isoformat()}")
    assert response.status_code == 422


def test_inactive_location_returns_404(client, session, business, service, nine_to_noon):
    location = Location(business_id=business.id, name="Antiga", active=False)
    session.add(location)
    session.commit()

    response = client.get(
        f"/availability/slots?service_id={service.id}&day={FUTURE_DAY.isoformat()}&location_id={location.id}"
    )
    assert response.status_code == 404

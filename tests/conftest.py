from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from booking.core.security import get_current_user_id
from booking.database import get_session
from booking.main import app
from booking.models.business import Business
from booking.models.business_hours import BusinessHourRange, BusinessHours
from booking.models.service import Service
from booking.scheduling.availability import day_of_week

OWNER_ID = "owner-1"

# longe o bastante para nunca cair no passado
FUTURE_DAY = date(2099, 1, 5)


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_current_user_id] = lambda: OWNER_ID
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def business(session):
    b = Business(name="Studio", owner_id=OWNER_ID)
    session.add(b)
    session.commit()
    session.refresh(b)
    return b


@pytest.fixture
def service(session, business):
    s = Service(name="Massagem", duration_minutes=60, business_id=business.id)
    session.add(s)
    session.commit()
    session.refresh(s)
    return s


def add_hours(session, business_id, day, open_time, close_time, ranges=(), location_id=None, is_closed=False):
    """Grava o expediente do dia da semana de ``day`` (com turnos opcionais)."""
    hours = BusinessHours(
        business_id=business_id,
        location_id=location_id,
        weekday=day_of_week(day),
        is_closed=is_closed,
        open_time=open_time,
        close_time=close_time,
    )
    session.add(hours)
    session.flush()
    for index, (start, end) in enumerate(ranges):
        session.add(BusinessHourRange(business_hours_id=hours.id, start_time=start, end_time=end, display_order=index))
    session.commit()
    return hours


@pytest.fixture
def nine_to_noon(session, business):
    return add_hours(session, business.id, FUTURE_DAY, time(9, 0), time(12, 0))

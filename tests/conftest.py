"""Shared test fixtures and helpers."""

from datetime import date, datetime, timedelta
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.auth import hash_password
from app.db import get_session, init_db
from app.deps import get_dispatcher
from app.main import create_app
from app.models import AdminSettings, Barber, User

# 2030-01-01 is a Tuesday; the seeded week opens at 07:00 every day but Sunday
NOW = datetime(2030, 1, 1, 9, 0)
WEDNESDAY = date(2030, 1, 2)
SUNDAY = date(2030, 1, 6)


class RecordingDispatcher:
    """Stands in for the Twilio dispatcher and keeps every event it receives."""

    def __init__(self):
        self.events = []

    async def dispatch(self, event) -> bool:
        self.events.append(event)
        return True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def client(engine, dispatcher):
    app = create_app(lifespan=None)

    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    with TestClient(app) as test_client:
        yield test_client


def make_barber(session: Session, name: str = "Carlos", phone: str = "8095550101", access_key: str = "secret-key") -> Barber:
    barber = Barber(name=name, phone=phone, access_key_hash=hash_password(access_key))
    session.add(barber)
    session.commit()
    session.refresh(barber)
    return barber


def update_settings(session: Session, **changes) -> AdminSettings:
    settings = session.get(AdminSettings, 1)
    for field, value in changes.items():
        setattr(settings, field, value)
    session.add(settings)
    session.commit()
    session.refresh(settings)
    return settings


def make_admin(session: Session, email: str = "admin@shop.test", password: str = "admin-password") -> User:
    user = User(email=email, password_hash=hash_password(password), role="admin")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def admin_headers(client: TestClient, session: Session) -> dict:
    make_admin(session)
    response = client.post("/auth/login", data={"username": "admin@shop.test", "password": "admin-password"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def upcoming(day_of_week: int, start: Optional[date] = None) -> date:
    """Next date strictly after ``start`` (default: today) falling on ``day_of_week`` (0=Sunday)."""
    day = (start or date.today()) + timedelta(days=1)
    while (day.weekday() + 1) % 7 != day_of_week:
        day += timedelta(days=1)
    return day


class LockedStore:
    """Replacement for a Session method that fails like a locked SQLite file."""

    def __init__(self):
        self.calls = 0

    def __call__(self, *args, **kwargs):
        self.calls += 1
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

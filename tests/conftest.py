"""Shared test fixtures and helpers."""

import os

# Settings are read once at import time, so configure them before the app loads
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BOOKING_LOCK_BACKEND"] = "memory"
os.environ["PUBLIC_RATE_LIMIT_PER_SECOND"] = "1000"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

from datetime import date, time
from decimal import Decimal
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from appointly.api.dependencies import create_access_token
from appointly.config.database import get_db
from appointly.core.locks import InMemoryBookingLock
from appointly.main import create_app
from appointly.models import Base, Client, Provider, Service
from appointly.services.appointment.admission_controller import BookingAdmissionController
from appointly.services.availability.availability_store import AvailabilityStore

# 2026-10-19 is a Monday (day_of_week 1), the next day a Tuesday
MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)
SUNDAY = date(2026, 10, 25)


def hhmm(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def make_provider(db, name: str = "Ana Torres", email: str = "ana@studio-mail.com") -> Provider:
    provider = Provider(name=name, email=email, business_name=f"{name} Studio")
    db.add(provider)
    db.commit()
    db.refresh(provider)
    return provider


def make_service(
    db,
    provider: Provider,
    duration: int = 30,
    name: str = "Haircut",
    is_active: bool = True,
) -> Service:
    service = Service(
        provider_id=provider.id,
        name=name,
        duration=duration,
        price=Decimal("25.00"),
        is_active=is_active,
    )
    db.add(service)
    db.commit()
    db.refresh(service)
    return service


def make_client(
    db,
    provider: Provider,
    email: str = "jane@mailbox.org",
    name: str = "Jane Doe",
    phone: str = "555-0100",
) -> Client:
    client = Client(provider_id=provider.id, name=name, email=email, phone=phone)
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


def set_week(db, provider: Provider, rules: Optional[list] = None):
    """Default week: Monday 09:00-12:00 only."""
    if rules is None:
        rules = [{"day_of_week": 1, "is_enabled": True, "intervals": [(hhmm("09:00"), hhmm("12:00"))]}]
    return AvailabilityStore(db).set_rules(provider.id, rules)


def at(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def provider(db):
    return make_provider(db)


@pytest.fixture
def service(db, provider):
    return make_service(db, provider)


@pytest.fixture
def customer(db, provider):
    return make_client(db, provider)


@pytest.fixture
def week(db, provider):
    return set_week(db, provider)


@pytest.fixture
def booking_lock():
    return InMemoryBookingLock(blocking_timeout=5.0)


@pytest.fixture
def controller(db, booking_lock):
    return BookingAdmissionController(db, lock=booking_lock)


@pytest.fixture
def api(session_factory):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(provider):
    token = create_access_token({"sub": str(provider.id)})
    return {"Authorization": f"Bearer {token}"}

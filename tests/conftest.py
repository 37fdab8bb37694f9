import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["FLEET_SIMULATION_ENABLED"] = "false"
os.environ["PAYMENT_PROCESSING_SECONDS"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bustrack import models  # noqa: F401
from bustrack.bookings.schemas import Booking, JourneyDetails, PassengerDetails
from bustrack.bookings.store import BookingStore
from bustrack.database import Base, get_db
from bustrack.fleet.registry import FleetRegistry, get_fleet_registry
from bustrack.main import app
from bustrack.payments.gateway import SimulatedPaymentGateway, get_payment_gateway
from bustrack.payments.schemas import PaymentStatus

JOURNEY_DATE = date(2030, 5, 17)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return BookingStore(db)


@pytest.fixture
def registry():
    return FleetRegistry.from_seed()


@pytest.fixture
def gateway():
    return SimulatedPaymentGateway(processing_seconds=0)


@pytest.fixture
def client(session_factory, registry, gateway):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_fleet_registry] = lambda: registry
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def passenger():
    return PassengerDetails(name="Asha Rao", email="asha@example.com", phone="+91 98450 12345")


@pytest.fixture
def journey():
    return JourneyDetails(
        bus_id="BUS001",
        route_number="101",
        from_stop="Majestic",
        to_stop="Silk Board",
        journey_date=JOURNEY_DATE,
    )


def make_booking(booking_id="BKG1", seats=("1A",), email="x@example.com", bus_id="BUS001",
                 journey_date=JOURNEY_DATE, **overrides):
    data = dict(
        booking_id=booking_id,
        passenger_name="Test Passenger",
        passenger_email=email,
        passenger_phone="+91 90000 00000",
        bus_id=bus_id,
        route_number="101",
        from_stop="Majestic",
        to_stop="Lalbagh",
        seats=list(seats),
        total_amount=25 * len(seats),
        journey_date=journey_date,
        payment_status=PaymentStatus.COMPLETED,
        payment_method="gpay",
        transaction_id=f"TXN-{booking_id}",
    )
    data.update(overrides)
    return Booking(**data)

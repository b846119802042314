"""
Shared fixtures: an in-memory SQLite database per test, seeded property,
tenant and lease rows, and an authenticated API client.

Run with: pytest tests/ -v
"""
import os

# Must be set before config/database are imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth import create_access_token
from database import get_session
from models import Base, Lease, Payment, Property, Tenant
from models.payment import PaymentStatus, PaymentType


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
def db(engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def property_row(db):
    prop = Property(
        title="2 bedroom flat, Rue Centrale",
        location="Lausanne",
        price=Decimal("1000.00"),
        agency_fees=Decimal("500.00"),
        status="available",
    )
    db.add(prop)
    db.commit()
    return prop


@pytest.fixture
def tenant(db):
    tenant = Tenant(first_name="Alex", last_name="Martin", email="alex.martin@example.com")
    db.add(tenant)
    db.commit()
    return tenant


@pytest.fixture
def lease(db, property_row, tenant):
    lease = Lease(
        property_id=property_row.id,
        tenant_id=tenant.id,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        monthly_rent=Decimal("1000.00"),
        security_deposit=Decimal("2000.00"),
        payment_frequency="monthly",
        is_active=True,
        status="active",
    )
    db.add(lease)
    property_row.status = "rented"
    db.commit()
    return lease


@pytest.fixture
def make_payment(db, lease):
    """Insert a payment on the seeded lease."""
    def _make(amount="100.00", status=PaymentStatus.PENDING, payment_type=PaymentType.RENT,
              due_date=date(2024, 1, 1), **extra):
        payment = Payment(
            lease_id=extra.pop("lease_id", lease.id),
            amount=Decimal(amount),
            status=status,
            payment_type=payment_type,
            due_date=due_date,
            **extra,
        )
        db.add(payment)
        db.commit()
        return payment
    return _make


@pytest.fixture
def client(db):
    from main import app

    def override_get_session():
        yield db

    app.dependency_overrides[get_session] = override_get_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token({"id": 7})
    return {"Authorization": f"Bearer {token}"}

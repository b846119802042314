"""
Tests for lease creation and the single-payment service.

Run with: pytest tests/test_lease_service.py -v
"""
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from models import Lease, Payment, Property
from models.payment import PaymentStatus, PaymentType
from schemas.lease import LeaseCreate
from schemas.payment import PaymentCreate, PaymentUpdate
from services.errors import (
    InvalidDateRange,
    LeaseNotFound,
    PaymentNotFound,
    PropertyNotFound,
    PropertyUnavailable,
)
from services.lease_service import LeaseService
from services.payment_service import PaymentService


@pytest.fixture
def available_property(db):
    prop = Property(title="Studio near the station", agency_fees=Decimal("300.00"), status="available")
    db.add(prop)
    db.commit()
    return prop


def _lease_data(property_id, tenant_id, **overrides):
    values = {
        "property_id": property_id,
        "tenant_id": tenant_id,
        "start_date": date(2024, 1, 1),
        "end_date": date(2024, 12, 31),
        "monthly_rent": Decimal("800.00"),
        "security_deposit": Decimal("1600.00"),
        "payment_frequency": "monthly",
    }
    values.update(overrides)
    return LeaseCreate(**values)


class TestCreateLease:

    def test_creates_active_lease_with_initial_payments(self, db, available_property, tenant):
        lease = LeaseService.create_lease(db, _lease_data(available_property.id, tenant.id))
        db.commit()

        assert lease.id is not None
        assert lease.is_active is True
        assert lease.status == "active"
        assert lease.signed_by_tenant and lease.signed_by_owner
        assert db.get(Property, available_property.id).status == "rented"

        payments = db.query(Payment).filter(Payment.lease_id == lease.id).all()
        amounts = {p.payment_type: p.amount for p in payments}
        assert amounts == {PaymentType.DEPOSIT: Decimal("1600.00"), PaymentType.AGENCY_FEE: Decimal("300.00")}
        assert all(p.status == PaymentStatus.COMPLETED for p in payments)

    def test_initial_payments_can_be_left_pending(self, db, available_property, tenant):
        data = _lease_data(available_property.id, tenant.id, initial_payments_paid=False)
        lease = LeaseService.create_lease(db, data)
        db.commit()

        payments = db.query(Payment).filter(Payment.lease_id == lease.id).all()
        assert payments
        assert all(p.status == PaymentStatus.PENDING and p.payment_date is None for p in payments)

    def test_frequency_alias_is_stored_normalized(self, db, available_property, tenant):
        lease = LeaseService.create_lease(
            db, _lease_data(available_property.id, tenant.id, payment_frequency="yearly")
        )
        assert lease.payment_frequency == "annual"

    def test_unavailable_property(self, db, property_row, tenant, lease):
        # The seeded lease already rented property_row
        with pytest.raises(PropertyUnavailable) as excinfo:
            LeaseService.create_lease(db, _lease_data(property_row.id, tenant.id))

        assert excinfo.value.status == "rented"
        assert db.query(Lease).count() == 1

    def test_unknown_property(self, db, tenant):
        with pytest.raises(PropertyNotFound):
            LeaseService.create_lease(db, _lease_data(12345, tenant.id))

    def test_unbuildable_history_rejected_before_any_write(self, db, available_property, tenant):
        data = _lease_data(
            available_property.id,
            tenant.id,
            start_date=date(1990, 1, 1),
            end_date=date(2030, 12, 31),
            payment_frequency="daily",
            generate_history=True,
        )

        with pytest.raises(InvalidDateRange):
            LeaseService.create_lease(db, data)

        db.rollback()
        assert db.query(Lease).count() == 0
        assert db.query(Payment).count() == 0
        assert db.get(Property, available_property.id).status == "available"

    def test_end_before_start_rejected(self, available_property, tenant):
        with pytest.raises(ValidationError):
            _lease_data(available_property.id, tenant.id, end_date=date(2023, 12, 31))

    def test_get_lease_with_payments(self, db, lease, make_payment):
        make_payment(due_date=date(2024, 2, 1))
        make_payment(due_date=date(2024, 1, 1))

        found, payments = LeaseService.get_lease_with_payments(db, lease.id)

        assert found.id == lease.id
        assert [p.due_date for p in payments] == [date(2024, 1, 1), date(2024, 2, 1)]

    def test_get_unknown_lease(self, db):
        with pytest.raises(LeaseNotFound):
            LeaseService.get_lease_with_payments(db, 77)


class TestPaymentService:

    def test_create_completed_payment_stamps_payment_date(self, db, lease):
        payment = PaymentService.create_payment(
            db, PaymentCreate(lease_id=lease.id, amount=Decimal("1000.00"), status="completed")
        )
        db.commit()

        assert payment.is_auto_generated is False
        assert payment.payment_date == date.today()

    def test_create_payment_unknown_lease(self, db):
        with pytest.raises(LeaseNotFound):
            PaymentService.create_payment(db, PaymentCreate(lease_id=42, amount=Decimal("10.00")))

    def test_update_payment_records_actor(self, db, make_payment):
        payment = make_payment()

        updated = PaymentService.update_payment(
            db, payment.id, PaymentUpdate(status="completed"), actor="7"
        )
        db.commit()

        assert updated.status == PaymentStatus.COMPLETED
        assert updated.payment_date == date.today()
        assert updated.processed_by == "7"

    def test_get_unknown_payment(self, db):
        with pytest.raises(PaymentNotFound):
            PaymentService.get_payment(db, 31337)

    def test_mark_late_payments(self, db, make_payment):
        overdue = make_payment(status=PaymentStatus.PENDING, due_date=date(2024, 1, 1))
        due_later = make_payment(status=PaymentStatus.PENDING, due_date=date(2024, 3, 1))
        settled = make_payment(status=PaymentStatus.COMPLETED, due_date=date(2024, 1, 1))

        count = PaymentService.mark_late_payments(db, as_of=date(2024, 2, 1))
        db.commit()

        assert count == 1
        assert db.get(Payment, overdue.id).status == PaymentStatus.LATE
        assert db.get(Payment, due_later.id).status == PaymentStatus.PENDING
        assert db.get(Payment, settled.id).status == PaymentStatus.COMPLETED


class TestLeaseModel:

    def test_schedule_start_date_prefers_payment_start_date(self):
        lease = Lease(start_date=date(2024, 1, 1), payment_start_date=date(2024, 1, 15))
        assert lease.schedule_start_date == date(2024, 1, 15)

    def test_schedule_start_date_falls_back_to_start_date(self):
        assert Lease(start_date=date(2024, 1, 1)).schedule_start_date == date(2024, 1, 1)

"""
Tests for payment materialization: historical backfill, recurring schedules
and the initial deposit / agency fee payments.

Run with: pytest tests/test_payment_generation.py -v
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from models import Payment
from models.payment import PaymentStatus, PaymentType
from services import payment_generation, payment_store
from services.errors import (
    InvalidAmount,
    InvalidDateRange,
    InvalidFrequency,
    LeaseNotFound,
    PersistenceFailure,
)
from services.payment_generation import (
    generate_initial_payments,
    materialize_historical_payments,
    materialize_lease_history,
    materialize_recurring_payments,
)


def _rent_payments(db, lease_id):
    return (
        db.query(Payment)
        .filter(Payment.lease_id == lease_id, Payment.payment_type == PaymentType.RENT)
        .order_by(Payment.due_date)
        .all()
    )


class TestHistoricalPayments:

    def test_backfills_each_due_date(self, db, lease):
        result = materialize_historical_payments(
            db, lease.id, Decimal("1000.00"), date(2024, 1, 1), "monthly", as_of=date(2024, 3, 15)
        )

        assert result.created_count == 3
        assert result.message == "Successfully generated 3 payments"
        payments = _rent_payments(db, lease.id)
        assert [p.due_date for p in payments] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
        for payment in payments:
            assert payment.status == PaymentStatus.UNDEFINED
            assert payment.payment_date is None
            assert payment.is_auto_generated is True
            assert payment.amount == Decimal("1000.00")
            assert payment.notes.startswith("Auto-generated historical payment")

    def test_second_run_creates_nothing(self, db, lease):
        args = (db, lease.id, Decimal("1000.00"), date(2024, 1, 1), "monthly")
        materialize_historical_payments(*args, as_of=date(2024, 3, 15))

        again = materialize_historical_payments(*args, as_of=date(2024, 3, 15))

        assert again.created_count == 0
        assert again.created_records == []
        assert again.message == "No new payments to generate"
        assert len(_rent_payments(db, lease.id)) == 3

    def test_later_run_only_adds_missing_dates(self, db, lease):
        args = (db, lease.id, Decimal("1000.00"), date(2024, 1, 1), "monthly")
        materialize_historical_payments(*args, as_of=date(2024, 3, 15))

        later = materialize_historical_payments(*args, as_of=date(2024, 5, 1))

        assert later.created_count == 2
        assert [p.due_date for p in later.created_records] == [date(2024, 4, 1), date(2024, 5, 1)]
        assert len(_rent_payments(db, lease.id)) == 5

    def test_existing_manual_rent_payment_is_not_duplicated(self, db, lease, make_payment):
        make_payment(amount="1000.00", status=PaymentStatus.COMPLETED, due_date=date(2024, 2, 1))

        result = materialize_historical_payments(
            db, lease.id, Decimal("1000.00"), date(2024, 1, 1), as_of=date(2024, 3, 1)
        )

        assert result.created_count == 2
        assert {p.due_date for p in result.created_records} == {date(2024, 1, 1), date(2024, 3, 1)}

    def test_future_start_creates_nothing(self, db, lease):
        result = materialize_historical_payments(
            db, lease.id, Decimal("1000.00"), date(2024, 6, 1), as_of=date(2024, 5, 1)
        )
        assert result.created_count == 0

    @pytest.mark.parametrize("amount", [0, -50, "abc", None])
    def test_invalid_amount_writes_nothing(self, db, lease, amount):
        with pytest.raises(InvalidAmount):
            materialize_historical_payments(db, lease.id, amount, date(2024, 1, 1), as_of=date(2024, 3, 1))
        assert _rent_payments(db, lease.id) == []

    def test_invalid_frequency_writes_nothing(self, db, lease):
        with pytest.raises(InvalidFrequency):
            materialize_historical_payments(
                db, lease.id, Decimal("1000.00"), date(2024, 1, 1), "fortnightly", as_of=date(2024, 3, 1)
            )
        assert _rent_payments(db, lease.id) == []

    def test_lease_history_uses_lease_terms(self, db, lease):
        lease.payment_start_date = date(2024, 2, 15)
        lease.payment_frequency = "quarterly"
        db.commit()

        result = materialize_lease_history(db, lease.id, as_of=date(2024, 12, 31))

        assert [p.due_date for p in result.created_records] == [
            date(2024, 2, 15), date(2024, 5, 15), date(2024, 8, 15), date(2024, 11, 15)
        ]
        assert all(p.amount == Decimal("1000.00") for p in result.created_records)

    def test_lease_history_unknown_lease(self, db):
        with pytest.raises(LeaseNotFound):
            materialize_lease_history(db, 999, as_of=date(2024, 12, 31))


class TestRecurringPayments:

    def test_pending_payments_over_range(self, db, lease):
        result = materialize_recurring_payments(
            db, lease.id, Decimal("950.00"), date(2024, 1, 1), date(2024, 6, 30), "monthly"
        )

        assert result.created_count == 6
        for payment in result.created_records:
            assert payment.status == PaymentStatus.PENDING
            assert payment.payment_type == PaymentType.RENT
            assert payment.payment_method == "bank_transfer"
            assert payment.amount == Decimal("950.00")

    def test_recurring_is_idempotent(self, db, lease):
        args = (db, lease.id, Decimal("950.00"), date(2024, 1, 1), date(2024, 6, 30))
        materialize_recurring_payments(*args)
        assert materialize_recurring_payments(*args).created_count == 0
        assert len(_rent_payments(db, lease.id)) == 6

    def test_start_after_end(self, db, lease):
        with pytest.raises(InvalidDateRange):
            materialize_recurring_payments(
                db, lease.id, Decimal("950.00"), date(2024, 7, 1), date(2024, 6, 30)
            )

    def test_other_payment_type_has_its_own_schedule(self, db, lease):
        materialize_recurring_payments(db, lease.id, Decimal("950.00"), date(2024, 1, 1), date(2024, 3, 31))

        result = materialize_recurring_payments(
            db, lease.id, Decimal("40.00"), date(2024, 1, 1), date(2024, 3, 31),
            payment_type=PaymentType.OTHER,
        )

        assert result.created_count == 3


class TestInitialPayments:

    def test_deposit_and_agency_fee_recorded_as_paid(self, db, lease):
        created = generate_initial_payments(db, lease, agency_fee=Decimal("500.00"))
        db.commit()

        by_type = {p.payment_type: p for p in created}
        assert set(by_type) == {PaymentType.DEPOSIT, PaymentType.AGENCY_FEE}
        assert by_type[PaymentType.DEPOSIT].amount == Decimal("2000.00")
        assert by_type[PaymentType.AGENCY_FEE].amount == Decimal("500.00")
        for payment in created:
            assert payment.status == PaymentStatus.COMPLETED
            assert payment.payment_date == lease.start_date
            assert payment.due_date == lease.start_date

    def test_unpaid_initial_payments_are_pending(self, db, lease):
        created = generate_initial_payments(db, lease, agency_fee=Decimal("500.00"), as_paid=False)

        assert all(p.status == PaymentStatus.PENDING for p in created)
        assert all(p.payment_date is None for p in created)

    def test_zero_amounts_are_skipped(self, db, lease):
        lease.security_deposit = Decimal("0")
        created = generate_initial_payments(db, lease, agency_fee=None)
        assert created == []

    def test_existing_types_are_not_duplicated(self, db, lease):
        generate_initial_payments(db, lease, agency_fee=Decimal("500.00"))
        db.commit()

        again = generate_initial_payments(db, lease, agency_fee=Decimal("500.00"))

        assert again == []
        assert db.query(Payment).filter(Payment.lease_id == lease.id).count() == 2


class TestBatchIntegrity:

    def test_concurrent_duplicate_is_rejected_and_retry_creates_nothing(self, db, lease, monkeypatch):
        args = (db, lease.id, Decimal("1000.00"), date(2024, 1, 1), "monthly")
        materialize_historical_payments(*args, as_of=date(2024, 3, 1))

        # Another writer inserted these dates after this run read the existing ones
        monkeypatch.setattr(payment_store, "find_due_dates", lambda session, lease_id, payment_type: set())
        with pytest.raises(PersistenceFailure):
            materialize_historical_payments(*args, as_of=date(2024, 3, 1))
        monkeypatch.undo()

        retry = materialize_historical_payments(*args, as_of=date(2024, 3, 1))

        assert retry.created_count == 0
        assert len(_rent_payments(db, lease.id)) == 3

    def test_failed_commit_leaves_no_partial_batch(self, db, lease, monkeypatch):
        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "commit", failing_commit)
        with pytest.raises(PersistenceFailure):
            materialize_historical_payments(
                db, lease.id, Decimal("1000.00"), date(2024, 1, 1), as_of=date(2024, 6, 1)
            )
        monkeypatch.undo()

        assert _rent_payments(db, lease.id) == []

    def test_lease_lock_released_after_run(self, db, lease):
        materialize_historical_payments(
            db, lease.id, Decimal("1000.00"), date(2024, 1, 1), as_of=date(2024, 2, 1)
        )
        assert payment_generation._lease_locks == {}
        assert payment_generation._lease_lock_users == {}

"""
Tests for per-lease payment statistics and totals by payment type.

Run with: pytest tests/test_payment_stats.py -v
"""
from datetime import date
from decimal import Decimal

import pytest

from models.payment import PaymentStatus, PaymentType
from services.errors import LeaseNotFound
from services.payment_stats import compute_lease_stats, payment_totals_by_type


class TestComputeLeaseStats:

    def test_figures_for_mixed_statuses(self, db, lease, make_payment):
        make_payment(amount="700.00", status=PaymentStatus.COMPLETED, due_date=date(2024, 1, 1))
        make_payment(amount="300.00", status=PaymentStatus.PENDING, due_date=date(2024, 2, 1))
        make_payment(amount="1000.00", status=PaymentStatus.LATE, due_date=date(2024, 3, 1))
        make_payment(amount="1000.00", status=PaymentStatus.UNDEFINED, due_date=date(2024, 4, 1))
        make_payment(amount="1000.00", status=PaymentStatus.CANCELLED, due_date=date(2024, 5, 1))

        stats = compute_lease_stats(db, lease.id)

        assert stats.total_paid == Decimal("700.00")
        assert stats.total_due == Decimal("1000.00")
        assert stats.balance == Decimal("300.00")
        assert stats.pending_count == 1
        assert stats.late_count == 1
        assert stats.undefined_count == 1

    def test_lease_without_payments(self, db, lease):
        stats = compute_lease_stats(db, lease.id)

        assert stats.total_paid == Decimal("0")
        assert stats.balance == Decimal("1000.00")
        assert stats.to_dict()["pending_count"] == 0

    def test_overpayment_gives_negative_balance(self, db, lease, make_payment):
        make_payment(amount="1000.00", status=PaymentStatus.COMPLETED, due_date=date(2024, 1, 1))
        make_payment(amount="1000.00", status=PaymentStatus.COMPLETED, due_date=date(2024, 2, 1))

        assert compute_lease_stats(db, lease.id).balance == Decimal("-1000.00")

    def test_unknown_lease(self, db):
        with pytest.raises(LeaseNotFound):
            compute_lease_stats(db, 404)


class TestPaymentTotalsByType:

    def test_totals_grouped_by_type(self, db, lease, make_payment):
        make_payment(amount="2000.00", status=PaymentStatus.COMPLETED, payment_type=PaymentType.DEPOSIT)
        make_payment(amount="1000.00", status=PaymentStatus.COMPLETED, due_date=date(2024, 1, 1))
        make_payment(amount="1000.00", status=PaymentStatus.PENDING, due_date=date(2024, 2, 1))
        make_payment(amount="1000.00", status=PaymentStatus.UNDEFINED, due_date=date(2024, 3, 1))
        make_payment(amount="1000.00", status=PaymentStatus.LATE, due_date=date(2024, 4, 1))

        totals = payment_totals_by_type(db, lease.id)

        assert set(totals) == {"rent", "deposit", "agency_fee", "other"}
        assert totals["rent"] == {
            "total": Decimal("4000.00"),
            "paid": Decimal("1000.00"),
            "pending": Decimal("2000.00"),
        }
        assert totals["deposit"]["paid"] == Decimal("2000.00")
        assert totals["agency_fee"]["total"] == Decimal("0")

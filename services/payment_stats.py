# services/payment_stats.py
"""
Per-lease payment figures.
"""
from dataclasses import dataclass, asdict
from decimal import Decimal
from typing import Dict

from sqlalchemy.orm import Session

from models.payment import PaymentStatus, PaymentType
from services import payment_store


@dataclass
class LeaseStats:
     total_paid: Decimal
     total_due: Decimal
     pending_count: int
     late_count: int
     undefined_count: int
     balance: Decimal

     def to_dict(self) -> dict:
          return asdict(self)


def compute_lease_stats(db: Session, lease_id: int) -> LeaseStats:
     """
     Paid total, outstanding balance and status counts for a lease.

     total_due is the lease's monthly rent (one period), not the sum of the
     generated payments; balance = total_due - total_paid.

     Raises:
          LeaseNotFound: If the lease does not exist
          LookupFailed: If the database call fails
     """
     lease = payment_store.find_lease_by_id(db, lease_id)
     payments = payment_store.find_payments_by_lease(db, lease_id)

     total_paid = sum(
          (Decimal(p.amount or 0) for p in payments if p.status == PaymentStatus.COMPLETED),
          Decimal("0"),
     )
     total_due = Decimal(lease.monthly_rent or 0)

     return LeaseStats(
          total_paid=total_paid,
          total_due=total_due,
          pending_count=sum(1 for p in payments if p.status == PaymentStatus.PENDING),
          late_count=sum(1 for p in payments if p.status == PaymentStatus.LATE),
          undefined_count=sum(1 for p in payments if p.status == PaymentStatus.UNDEFINED),
          balance=total_due - total_paid,
     )


def payment_totals_by_type(db: Session, lease_id: int) -> Dict[str, Dict[str, Decimal]]:
     """
     Total, paid and pending amounts per payment type.

     Pending covers both PENDING and UNDEFINED payments.
     """
     payment_store.find_lease_by_id(db, lease_id)
     payments = payment_store.find_payments_by_lease(db, lease_id)

     totals = {
          payment_type.value: {"total": Decimal("0"), "paid": Decimal("0"), "pending": Decimal("0")}
          for payment_type in PaymentType
     }
     for payment in payments:
          bucket = totals[(payment.payment_type or PaymentType.OTHER).value]
          amount = Decimal(payment.amount or 0)
          bucket["total"] += amount
          if payment.status == PaymentStatus.COMPLETED:
               bucket["paid"] += amount
          elif payment.status in (PaymentStatus.PENDING, PaymentStatus.UNDEFINED):
               bucket["pending"] += amount

     return totals

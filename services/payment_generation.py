# services/payment_generation.py
"""
Payment generation - turns a lease's payment schedule into payment rows.

Generation is idempotent: due dates that already have a payment of the same
type are skipped, so running it twice creates nothing the second time.
Runs for the same lease are serialized in-process, and the
uq_payments_auto_schedule index rejects duplicates written by another
process (the losing writer gets PersistenceFailure; retrying creates 0).
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from models import Lease, Payment
from models.payment import PaymentStatus, PaymentType
from services import payment_store
from services.errors import InvalidAmount, InvalidDateRange, PersistenceFailure, describe_db_error
from services.frequency import FrequencyLike, parse_frequency
from services.schedule import DateLike, coerce_date, generate_due_dates

logger = logging.getLogger(__name__)


@dataclass
class MaterializationResult:
     """Outcome of a generation run."""
     created_count: int
     created_records: List[Payment] = field(default_factory=list)

     @property
     def message(self) -> str:
          if not self.created_count:
               return "No new payments to generate"
          return f"Successfully generated {self.created_count} payments"


# ---------------------------------------------------------------------------
# Per-lease serialization
# ---------------------------------------------------------------------------

_lease_locks: Dict[int, threading.Lock] = {}
_lease_lock_users: Dict[int, int] = {}
_registry_lock = threading.Lock()


@contextmanager
def _lease_lock(lease_id: int):
     """Hold the lease's lock; the entry is dropped once no thread uses it."""
     with _registry_lock:
          lock = _lease_locks.setdefault(lease_id, threading.Lock())
          _lease_lock_users[lease_id] = _lease_lock_users.get(lease_id, 0) + 1
     try:
          with lock:
               yield
     finally:
          with _registry_lock:
               _lease_lock_users[lease_id] -= 1
               if not _lease_lock_users[lease_id]:
                    del _lease_lock_users[lease_id]
                    del _lease_locks[lease_id]


def _coerce_amount(amount: Any) -> Decimal:
     try:
          value = Decimal(str(amount))
     except (InvalidOperation, ValueError):
          raise InvalidAmount(f"Invalid payment amount: {amount!r}") from None
     if not value.is_finite() or value <= 0:
          raise InvalidAmount(f"Payment amount must be positive, got {amount!r}")
     return value


def _materialize(
     db: Session,
     lease_id: int,
     amount: Decimal,
     due_dates: List[date],
     payment_type: PaymentType,
     status: PaymentStatus,
     notes: Optional[str],
     payment_method: Optional[str] = None
) -> MaterializationResult:
     """Insert one payment per due date not yet recorded, then commit."""
     if not due_dates:
          return MaterializationResult(created_count=0)

     with _lease_lock(lease_id):
          existing = payment_store.find_due_dates(db, lease_id, payment_type)
          missing = [due for due in due_dates if due not in existing]
          if not missing:
               logger.info("Lease %s: no new %s payments to generate", lease_id, payment_type.value)
               return MaterializationResult(created_count=0)

          drafts = [
               {
                    "lease_id": lease_id,
                    "amount": amount,
                    "due_date": due,
                    "payment_date": None,
                    "status": status,
                    "payment_type": payment_type,
                    "payment_method": payment_method,
                    "is_auto_generated": True,
                    "notes": notes,
               }
               for due in missing
          ]
          created = payment_store.insert_payments(db, drafts)
          try:
               db.commit()
          except SQLAlchemyError as exc:
               db.rollback()
               logger.exception("Lease %s: payment batch rolled back", lease_id)
               raise PersistenceFailure(
                    f"Failed to generate payments: {describe_db_error(exc)}", cause=exc
               ) from exc

     logger.info(
          "Lease %s: generated %d %s payments (%s to %s)",
          lease_id, len(created), payment_type.value, missing[0], missing[-1]
     )
     return MaterializationResult(created_count=len(created), created_records=created)


def materialize_historical_payments(
     db: Session,
     lease_id: int,
     rent_amount: Any,
     start_date: DateLike,
     frequency: FrequencyLike = "monthly",
     as_of: Optional[DateLike] = None
) -> MaterializationResult:
     """
     Backfill rent payments from start_date up to today.

     Each missing due date gets a payment with status UNDEFINED, no payment
     date, and an auto-generated note; all of them are written in one batch.

     Args:
          db: SQLAlchemy database session
          lease_id: ID of the lease
          rent_amount: Amount of each rent payment
          start_date: First due date
          frequency: Payment frequency
          as_of: Cut-off date (default: today)

     Returns:
          MaterializationResult; created_count is 0 when nothing was missing

     Raises:
          InvalidAmount, InvalidFrequency, InvalidDateRange: before any database call
          LookupFailed, PersistenceFailure: if the database call fails
     """
     amount = _coerce_amount(rent_amount)
     cutoff = coerce_date(as_of, "as_of") if as_of is not None else date.today()
     due_dates = generate_due_dates(start_date, frequency, cutoff)

     stamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
     return _materialize(
          db,
          lease_id,
          amount,
          due_dates,
          payment_type=PaymentType.RENT,
          status=PaymentStatus.UNDEFINED,
          notes=f"Auto-generated historical payment ({stamp})",
     )


def materialize_recurring_payments(
     db: Session,
     lease_id: int,
     amount: Any,
     start_date: DateLike,
     end_date: DateLike,
     frequency: FrequencyLike = "monthly",
     payment_type: PaymentType = PaymentType.RENT
) -> MaterializationResult:
     """
     Generate pending payments for every due date between start_date and end_date.

     Raises:
          InvalidDateRange: If start_date is after end_date
     """
     value = _coerce_amount(amount)
     start = coerce_date(start_date, "start_date")
     end = coerce_date(end_date, "end_date")
     if start > end:
          raise InvalidDateRange("Start date must be before end date")
     parse_frequency(frequency)

     due_dates = generate_due_dates(start, frequency, end)
     return _materialize(
          db,
          lease_id,
          value,
          due_dates,
          payment_type=payment_type,
          status=PaymentStatus.PENDING,
          notes=None,
          payment_method=settings.DEFAULT_PAYMENT_METHOD,
     )


def materialize_lease_history(
     db: Session,
     lease_id: int,
     as_of: Optional[DateLike] = None
) -> MaterializationResult:
     """Backfill rent for a stored lease using its own rent, start date and frequency."""
     lease = payment_store.find_lease_by_id(db, lease_id)
     return materialize_historical_payments(
          db,
          lease.id,
          lease.monthly_rent,
          lease.schedule_start_date,
          lease.payment_frequency,
          as_of=as_of,
     )


def generate_initial_payments(
     db: Session,
     lease: Lease,
     agency_fee: Any = None,
     as_paid: bool = True,
     payment_date: Optional[date] = None
) -> List[Payment]:
     """
     Create the one-time deposit and agency fee payments of a lease.

     A payment is only created when its amount is positive and the lease has
     none of that type yet. Rows are flushed, not committed, so they belong
     to the caller's transaction.
     """
     effective_date = payment_date or lease.start_date or date.today()
     charges = [
          (PaymentType.DEPOSIT, lease.security_deposit, "Security deposit"),
          (PaymentType.AGENCY_FEE, agency_fee, "Agency fee"),
     ]

     drafts = []
     for payment_type, amount, label in charges:
          if not amount or Decimal(str(amount)) <= 0:
               continue
          if payment_store.find_payments_by_lease(db, lease.id, payment_type):
               continue
          drafts.append({
               "lease_id": lease.id,
               "amount": Decimal(str(amount)),
               "due_date": effective_date,
               "payment_date": effective_date if as_paid else None,
               "status": PaymentStatus.COMPLETED if as_paid else PaymentStatus.PENDING,
               "payment_type": payment_type,
               "payment_method": settings.DEFAULT_PAYMENT_METHOD,
               "is_auto_generated": True,
               "notes": label,
          })

     created = payment_store.insert_payments(db, drafts)
     if created:
          logger.info("Lease %s: created %d initial payment(s)", lease.id, len(created))
     return created

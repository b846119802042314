# services/payment_store.py
"""
Persistence layer for leases, payments and bulk update records.

Every function takes the request's SQLAlchemy session. Reads raise
LookupFailed and writes raise PersistenceFailure when the database call
fails; a failed write rolls the session back so no partial batch survives.
Writes only flush: committing is left to the caller.
"""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Lease, Payment, PaymentBulkUpdate, PaymentBulkUpdateItem, Property
from models.payment import PaymentStatus, PaymentType
from services.errors import (
     LeaseNotFound,
     LookupFailed,
     PersistenceFailure,
     PropertyNotFound,
     describe_db_error,
)

logger = logging.getLogger(__name__)


@contextmanager
def _reading(action: str):
     try:
          yield
     except SQLAlchemyError as exc:
          logger.error("Failed to %s: %s", action, exc)
          raise LookupFailed(f"Failed to {action}: {describe_db_error(exc)}", cause=exc) from exc


@contextmanager
def _writing(db: Session, action: str):
     try:
          yield
     except SQLAlchemyError as exc:
          db.rollback()
          logger.error("Failed to %s, transaction rolled back: %s", action, exc)
          raise PersistenceFailure(f"Failed to {action}: {describe_db_error(exc)}", cause=exc) from exc


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def find_lease_by_id(db: Session, lease_id: int) -> Lease:
     """Load a lease or raise LeaseNotFound."""
     with _reading(f"fetch lease {lease_id}"):
          lease = db.query(Lease).filter(Lease.id == lease_id).first()
     if lease is None:
          raise LeaseNotFound(lease_id)
     return lease


def find_property_by_id(db: Session, property_id: int) -> Property:
     """Load a property or raise PropertyNotFound."""
     with _reading(f"fetch property {property_id}"):
          prop = db.query(Property).filter(Property.id == property_id).first()
     if prop is None:
          raise PropertyNotFound(property_id)
     return prop


def find_payments_by_lease(
     db: Session,
     lease_id: int,
     payment_type: Optional[PaymentType] = None
) -> List[Payment]:
     """All payments of a lease ordered by due date, optionally of one type."""
     with _reading(f"fetch payments for lease {lease_id}"):
          query = db.query(Payment).filter(Payment.lease_id == lease_id)
          if payment_type is not None:
               query = query.filter(Payment.payment_type == payment_type)
          return query.order_by(Payment.due_date.asc(), Payment.id.asc()).all()


def find_due_dates(db: Session, lease_id: int, payment_type: PaymentType) -> Set[date]:
     """Due dates already recorded for a lease and payment type."""
     with _reading(f"check existing payments for lease {lease_id}"):
          rows = (
               db.query(Payment.due_date)
               .filter(
                    Payment.lease_id == lease_id,
                    Payment.payment_type == payment_type,
                    Payment.due_date.isnot(None),
               )
               .all()
          )
     return {row[0] for row in rows}


def find_payments_by_ids(db: Session, payment_ids: Iterable[int]) -> List[Payment]:
     ids = list(payment_ids)
     with _reading("fetch payments"):
          return db.query(Payment).filter(Payment.id.in_(ids)).all()


def find_overdue_payment_ids(db: Session, as_of: date) -> List[int]:
     """Pending payments whose due date is before as_of."""
     with _reading("fetch overdue payments"):
          rows = (
               db.query(Payment.id)
               .filter(Payment.status == PaymentStatus.PENDING, Payment.due_date < as_of)
               .all()
          )
     return [row[0] for row in rows]


def find_bulk_update(db: Session, bulk_update_id: int) -> Optional[PaymentBulkUpdate]:
     with _reading(f"fetch bulk update {bulk_update_id}"):
          return db.query(PaymentBulkUpdate).filter(PaymentBulkUpdate.id == bulk_update_id).first()


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def insert_lease(db: Session, values: Mapping[str, Any]) -> Lease:
     with _writing(db, "create lease"):
          lease = Lease(**values)
          db.add(lease)
          db.flush()  # Flush to get the ID without committing
     return lease


def insert_payments(db: Session, drafts: List[Dict[str, Any]]) -> List[Payment]:
     """Insert a batch of payments in the current transaction."""
     if not drafts:
          return []
     with _writing(db, f"insert {len(drafts)} payment(s)"):
          payments = [Payment(**draft) for draft in drafts]
          db.add_all(payments)
          db.flush()
     return payments


def update_payments(db: Session, payment_ids: Iterable[int], patch: Mapping[str, Any]) -> List[Payment]:
     """Apply the same column values to every listed payment."""
     ids = list(payment_ids)
     with _writing(db, f"update {len(ids)} payment(s)"):
          payments = db.query(Payment).filter(Payment.id.in_(ids)).all()
          for payment in payments:
               for column, value in patch.items():
                    setattr(payment, column, value)
          db.flush()
     return payments


def update_property_status(db: Session, prop: Property, status: str) -> Property:
     with _writing(db, f"update property {prop.id} status"):
          prop.status = status
          db.flush()
     return prop


def insert_bulk_update_record(
     db: Session,
     payments_count: int,
     status: PaymentStatus,
     notes: Optional[str] = None,
     user_id: Optional[str] = None
) -> PaymentBulkUpdate:
     with _writing(db, "create bulk update record"):
          record = PaymentBulkUpdate(
               user_id=user_id,
               payments_count=payments_count,
               status=status,
               notes=notes,
          )
          db.add(record)
          db.flush()
     return record


def insert_bulk_update_items(db: Session, items: List[Dict[str, Any]]) -> None:
     with _writing(db, f"create {len(items)} bulk update item(s)"):
          db.add_all([PaymentBulkUpdateItem(**item) for item in items])
          db.flush()

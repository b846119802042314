# services/payment_service.py
"""
Payment Service - Business logic layer for single-payment operations.

This service handles manual payment entry, updates, and the late-payment
sweep, separate from the API layer.
"""
import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from models import Payment
from models.payment import PaymentStatus
from schemas.payment import PaymentCreate, PaymentUpdate
from services import payment_store
from services.errors import PaymentNotFound

logger = logging.getLogger(__name__)


class PaymentService:
     """Service class for payment-related business logic."""

     @staticmethod
     def get_payment(db: Session, payment_id: int) -> Payment:
          """
          Load a payment by ID.

          Raises:
               PaymentNotFound: If the payment doesn't exist
          """
          payments = payment_store.find_payments_by_ids(db, [payment_id])
          if not payments:
               raise PaymentNotFound({payment_id})
          return payments[0]

     @staticmethod
     def create_payment(db: Session, data: PaymentCreate) -> Payment:
          """
          Record a manually entered payment.

          Args:
               db: SQLAlchemy database session
               data: Validated payment fields

          Returns:
               Created Payment object (flushed, not committed)

          Raises:
               LeaseNotFound: If the lease doesn't exist
          """
          # Verify lease exists
          payment_store.find_lease_by_id(db, data.lease_id)

          values = data.model_dump()
          values["is_auto_generated"] = False
          if values["status"] == PaymentStatus.COMPLETED and values["payment_date"] is None:
               values["payment_date"] = date.today()

          payment = payment_store.insert_payments(db, [values])[0]
          logger.info("Lease %s: recorded %s payment %s", data.lease_id, data.payment_type.value, payment.id)
          return payment

     @staticmethod
     def update_payment(
          db: Session,
          payment_id: int,
          data: PaymentUpdate,
          actor: Optional[str] = None
     ) -> Payment:
          """
          Update the provided fields of a payment.

          Common use cases:
          - Mark payment as completed
          - Fix amount or due date
          - Mark as late
          """
          payment = PaymentService.get_payment(db, payment_id)
          patch = data.model_dump(exclude_unset=True)
          if patch.get("status") == PaymentStatus.COMPLETED and not patch.get("payment_date") and payment.payment_date is None:
               patch["payment_date"] = date.today()
          if actor is not None:
               patch["processed_by"] = str(actor)
          if not patch:
               return payment
          return payment_store.update_payments(db, [payment.id], patch)[0]

     @staticmethod
     def mark_late_payments(db: Session, as_of: Optional[date] = None) -> int:
          """
          Mark all pending payments past their due date as LATE.

          This should be called by a scheduled job daily.

          Args:
               db: SQLAlchemy database session
               as_of: Reference date (default: today)

          Returns:
               Number of payments marked as late
          """
          today = as_of or date.today()

          overdue_ids = payment_store.find_overdue_payment_ids(db, today)
          if not overdue_ids:
               return 0

          updated = payment_store.update_payments(db, overdue_ids, {"status": PaymentStatus.LATE})
          logger.info("Marked %d payment(s) late as of %s", len(updated), today)
          return len(updated)

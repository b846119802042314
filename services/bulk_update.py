# services/bulk_update.py
"""
Bulk payment status changes with an audit trail.

Order of operations:
1. Snapshot the current status of every selected payment
2. Create the bulk update record (count, new status, notes, actor)
3. Update every payment and commit
4. Write one item per payment (previous -> new status) and commit

Step 4 is best-effort: if it fails the status change stays committed, the
failure is logged, and the result reports audit_recorded=False.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.payment import PaymentStatus
from services import payment_store
from services.errors import (
     EmptySelection,
     PaymentNotFound,
     PaymentServiceError,
     PersistenceFailure,
     describe_db_error,
)

logger = logging.getLogger(__name__)


@dataclass
class BulkUpdateResult:
     updated_count: int
     bulk_update_id: int
     audit_recorded: bool = True


def apply_bulk_status(
     db: Session,
     payment_ids: Iterable[int],
     new_status: PaymentStatus,
     note: Optional[str] = None,
     actor: Optional[Any] = None
) -> BulkUpdateResult:
     """
     Move every selected payment to new_status.

     Args:
          db: SQLAlchemy database session
          payment_ids: Payments to update (duplicates are ignored)
          new_status: Status applied to all of them
          note: Replaces the payments' notes when given
          actor: User performing the change, stored as processed_by

     Returns:
          BulkUpdateResult

     Raises:
          EmptySelection: If no payment ID is given (no database call is made)
          PaymentNotFound: If any ID does not exist (nothing is written)
          LookupFailed, PersistenceFailure: if the database call fails
     """
     ids = list(dict.fromkeys(payment_ids))
     if not ids:
          raise EmptySelection()
     status = PaymentStatus(new_status)
     user_id = str(actor) if actor is not None else None

     # Before-snapshot for the audit trail
     payments = payment_store.find_payments_by_ids(db, ids)
     previous_status = {payment.id: payment.status for payment in payments}
     missing = set(ids) - set(previous_status)
     if missing:
          raise PaymentNotFound(missing)

     bulk_update = payment_store.insert_bulk_update_record(
          db,
          payments_count=len(ids),
          status=status,
          notes=note,
          user_id=user_id,
     )

     patch = {"status": status}
     if note:
          patch["notes"] = note
     if user_id is not None:
          patch["processed_by"] = user_id
     updated = payment_store.update_payments(db, ids, patch)
     try:
          db.commit()
     except SQLAlchemyError as exc:
          db.rollback()
          logger.exception("Bulk status update to %s rolled back", status.value)
          raise PersistenceFailure(
               f"Failed to update payments: {describe_db_error(exc)}", cause=exc
          ) from exc

     bulk_update_id = bulk_update.id
     logger.info(
          "Bulk update %s: %d payment(s) set to %s by %s",
          bulk_update_id, len(updated), status.value, user_id or "unknown user"
     )

     items = [
          {
               "bulk_update_id": bulk_update_id,
               "payment_id": payment_id,
               "previous_status": previous_status[payment_id].value if previous_status[payment_id] else None,
               "new_status": status.value,
          }
          for payment_id in ids
     ]
     audit_recorded = True
     try:
          payment_store.insert_bulk_update_items(db, items)
          db.commit()
     except (PaymentServiceError, SQLAlchemyError):
          # Payments were already updated
          db.rollback()
          logger.exception("Error creating bulk update items for bulk update %s", bulk_update_id)
          audit_recorded = False

     return BulkUpdateResult(
          updated_count=len(updated),
          bulk_update_id=bulk_update_id,
          audit_recorded=audit_recorded,
     )

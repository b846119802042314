# services/lease_service.py
"""
Lease Service - creating leases and reading them back with their payments.

Lease creation runs in the caller's transaction: the lease row, its initial
deposit and agency fee payments, and the property status change are flushed
together and committed (or rolled back) as one unit by the caller.
"""
import logging
from datetime import date
from typing import List, Tuple

from sqlalchemy.orm import Session

from models import Lease, Payment
from models.lease import LeaseStatus
from models.property import PropertyStatus
from schemas.lease import LeaseCreate
from services import payment_store
from services.errors import PropertyUnavailable
from services.payment_generation import generate_initial_payments
from services.schedule import generate_due_dates

logger = logging.getLogger(__name__)


class LeaseService:
     """Service class for lease-related business logic."""

     @staticmethod
     def create_lease(db: Session, data: LeaseCreate) -> Lease:
          """
          Create an active lease on an available property.

          Steps:
               1. Check the property exists and is available (and, with
                  generate_history, that the rent schedule up to today is valid)
               2. Insert the lease (active, signed by both parties)
               3. Create the deposit and agency fee payments
               4. Mark the property as rented

          Args:
               db: SQLAlchemy database session
               data: Validated lease fields

          Returns:
               Created Lease object (flushed, not committed)

          Raises:
               PropertyNotFound: If the property doesn't exist
               PropertyUnavailable: If the property is not available
               InvalidFrequency, InvalidDateRange: If generate_history is set and the
                    schedule cannot be generated
          """
          prop = payment_store.find_property_by_id(db, data.property_id)
          if not prop.is_available:
               raise PropertyUnavailable(prop.id, prop.status)
          if data.generate_history:
               # The backfill runs after commit; reject a schedule it could not produce
               generate_due_dates(data.payment_start_date or data.start_date, data.payment_frequency, date.today())

          values = data.model_dump(exclude={"initial_payments_paid", "generate_history"})
          values["payment_frequency"] = data.payment_frequency.value
          values.update(
               is_active=True,
               signed_by_tenant=True,
               signed_by_owner=True,
               status=LeaseStatus.ACTIVE.value,
          )
          lease = payment_store.insert_lease(db, values)

          generate_initial_payments(
               db,
               lease,
               agency_fee=prop.agency_fees,
               as_paid=data.initial_payments_paid,
               payment_date=lease.start_date,
          )
          payment_store.update_property_status(db, prop, PropertyStatus.RENTED.value)

          logger.info("Created lease %s for tenant %s on property %s", lease.id, lease.tenant_id, prop.id)
          return lease

     @staticmethod
     def get_lease_with_payments(db: Session, lease_id: int) -> Tuple[Lease, List[Payment]]:
          """
          Load a lease and its payments ordered by due date.

          Raises:
               LeaseNotFound: If the lease doesn't exist
          """
          lease = payment_store.find_lease_by_id(db, lease_id)
          payments = payment_store.find_payments_by_lease(db, lease_id)
          return lease, payments

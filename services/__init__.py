# services/__init__.py
from .errors import (
     PaymentServiceError,
     InvalidFrequency,
     InvalidDateRange,
     InvalidAmount,
     EmptySelection,
     LookupFailed,
     LeaseNotFound,
     PaymentNotFound,
     PropertyNotFound,
     PropertyUnavailable,
     PersistenceFailure,
)
from .frequency import next_due_date, shift_date, parse_frequency
from .schedule import generate_due_dates
from .payment_generation import (
     MaterializationResult,
     materialize_historical_payments,
     materialize_recurring_payments,
     materialize_lease_history,
     generate_initial_payments,
)
from .bulk_update import BulkUpdateResult, apply_bulk_status
from .payment_stats import LeaseStats, compute_lease_stats, payment_totals_by_type
from .payment_service import PaymentService
from .lease_service import LeaseService

__all__ = [
     "PaymentServiceError",
     "InvalidFrequency",
     "InvalidDateRange",
     "InvalidAmount",
     "EmptySelection",
     "LookupFailed",
     "LeaseNotFound",
     "PaymentNotFound",
     "PropertyNotFound",
     "PropertyUnavailable",
     "PersistenceFailure",
     "next_due_date",
     "shift_date",
     "parse_frequency",
     "generate_due_dates",
     "MaterializationResult",
     "materialize_historical_payments",
     "materialize_recurring_payments",
     "materialize_lease_history",
     "generate_initial_payments",
     "BulkUpdateResult",
     "apply_bulk_status",
     "LeaseStats",
     "compute_lease_stats",
     "payment_totals_by_type",
     "PaymentService",
     "LeaseService",
]

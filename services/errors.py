# services/errors.py
"""
Errors raised by the payment services.

Validation errors also subclass ValueError and are raised before any
database call. Lookup and persistence errors wrap the SQLAlchemy error and
carry its message.
"""
from typing import Optional


class PaymentServiceError(Exception):
     """Base class for every error raised by the payment services."""

     def __init__(self, message: str, cause: Optional[BaseException] = None):
          super().__init__(message)
          self.message = message
          self.cause = cause

     def __str__(self) -> str:
          return self.message


class InvalidFrequency(PaymentServiceError, ValueError):
     """Unrecognized payment frequency."""

     def __init__(self, frequency):
          super().__init__(f"Unrecognized payment frequency: {frequency!r}")
          self.frequency = frequency


class InvalidDateRange(PaymentServiceError, ValueError):
     """Malformed start date, inverted range, or a schedule that is too long."""


class InvalidAmount(PaymentServiceError, ValueError):
     """Non-positive payment amount."""


class EmptySelection(PaymentServiceError, ValueError):
     """Bulk operation invoked without any payment."""

     def __init__(self, message: str = "No payment selected"):
          super().__init__(message)


class LookupFailed(PaymentServiceError):
     """A read against the database failed or found nothing."""


class LeaseNotFound(LookupFailed):
     def __init__(self, lease_id):
          super().__init__(f"Lease with ID {lease_id} not found")
          self.lease_id = lease_id


class PaymentNotFound(LookupFailed):
     def __init__(self, payment_ids):
          ids = ", ".join(str(pid) for pid in sorted(payment_ids))
          super().__init__(f"Payment(s) not found: {ids}")
          self.payment_ids = set(payment_ids)


class PropertyNotFound(LookupFailed):
     def __init__(self, property_id):
          super().__init__(f"Property with ID {property_id} not found")
          self.property_id = property_id


class PropertyUnavailable(PaymentServiceError):
     """Lease requested on a property that is not available."""

     def __init__(self, property_id, status):
          super().__init__(
               f"Cannot create lease: Property is not available (current status: {status})"
          )
          self.property_id = property_id
          self.status = status


class PersistenceFailure(PaymentServiceError):
     """A write against the database failed; the transaction was rolled back."""


def describe_db_error(exc: BaseException) -> str:
     """Driver message of a SQLAlchemy error, falling back to str(exc)."""
     orig = getattr(exc, "orig", None)
     return str(orig) if orig is not None else str(exc)

# models/__init__.py
from .base import Base
from .property import Property, PropertyStatus
from .tenant import Tenant
from .lease import Lease, LeaseStatus, PaymentFrequency
from .payment import Payment, PaymentStatus, PaymentType
from .payment_bulk_update import PaymentBulkUpdate, PaymentBulkUpdateItem

__all__ = [
     "Base",
     "Property",
     "PropertyStatus",
     "Tenant",
     "Lease",
     "LeaseStatus",
     "PaymentFrequency",
     "Payment",
     "PaymentStatus",
     "PaymentType",
     "PaymentBulkUpdate",
     "PaymentBulkUpdateItem",
]

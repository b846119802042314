# models/payment.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Date, Boolean, Text, ForeignKey, Enum, Index, text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class PaymentStatus(str, enum.Enum):
     """Settlement status of a payment."""
     PENDING = "pending"
     COMPLETED = "completed"
     FAILED = "failed"
     LATE = "late"
     CANCELLED = "cancelled"
     UNDEFINED = "undefined"

     @classmethod
     def _missing_(cls, value):
          # "paid" is the legacy label for a settled payment
          if isinstance(value, str):
               normalized = value.strip().lower()
               if normalized == "paid":
                    return cls.COMPLETED
               for member in cls:
                    if member.value == normalized:
                         return member
          return None


class PaymentType(str, enum.Enum):
     """What a payment is for."""
     RENT = "rent"
     DEPOSIT = "deposit"
     AGENCY_FEE = "agency_fee"
     OTHER = "other"


def _enum_values(enum_cls):
     return [member.value for member in enum_cls]


class Payment(TimestampMixin, Base):
     """
     Payment model - one settlement record tied to a lease.

     Rent rows are materialized from the lease's payment schedule
     (is_auto_generated=True); deposit and agency fee rows are created with
     the lease; anything else is entered manually. Payments are never deleted
     by the services, only moved between statuses.
     """
     __tablename__ = "payments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     lease_id = Column(
          Integer,
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     # Payment details
     amount = Column(Numeric(12, 2), nullable=False)
     due_date = Column(Date, nullable=True, index=True)
     payment_date = Column(Date, nullable=True)  # null until settled
     payment_method = Column(String(50), nullable=True)
     status = Column(
          Enum(
               PaymentStatus,
               name="payment_status",
               native_enum=False,
               create_constraint=True,
               values_callable=_enum_values,
          ),
          default=PaymentStatus.PENDING,
          nullable=False,
          index=True
     )
     payment_type = Column(
          Enum(
               PaymentType,
               name="payment_type",
               native_enum=False,
               create_constraint=True,
               values_callable=_enum_values,
          ),
          default=PaymentType.RENT,
          nullable=False
     )
     is_auto_generated = Column(Boolean, default=False, nullable=False)
     notes = Column(Text, nullable=True)
     transaction_id = Column(String(255), nullable=True)
     processed_by = Column(String(64), nullable=True)

     # Relationships
     lease = relationship("Lease", back_populates="payments")

     __table_args__ = (
          # One generated row per (lease, due date, type); manual entries are unconstrained
          Index(
               "uq_payments_auto_schedule",
               "lease_id",
               "due_date",
               "payment_type",
               unique=True,
               sqlite_where=text("is_auto_generated = 1"),
               mssql_where=text("is_auto_generated = 1"),
               postgresql_where=text("is_auto_generated"),
          ),
     )

     def __repr__(self):
          return (
               f"<Payment(id={self.id}, lease_id={self.lease_id}, amount={self.amount}, "
               f"status='{self.status.value}', due_date={self.due_date})>"
          )


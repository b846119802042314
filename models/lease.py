# models/lease.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Date, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class PaymentFrequency(str, enum.Enum):
     """How often rent falls due on a lease."""
     DAILY = "daily"
     WEEKLY = "weekly"
     MONTHLY = "monthly"
     QUARTERLY = "quarterly"
     BIANNUAL = "biannual"
     ANNUAL = "annual"

     @classmethod
     def _missing_(cls, value):
          # Accept the spellings used by older lease forms
          if isinstance(value, str):
               normalized = value.strip().lower()
               normalized = _FREQUENCY_ALIASES.get(normalized, normalized)
               for member in cls:
                    if member.value == normalized:
                         return member
          return None


_FREQUENCY_ALIASES = {
     "semiannual": "biannual",
     "semi-annual": "biannual",
     "semi_annual": "biannual",
     "biannually": "biannual",
     "yearly": "annual",
     "annually": "annual",
}


class LeaseStatus(str, enum.Enum):
     """Lifecycle status of a lease."""
     DRAFT = "draft"
     PENDING = "pending"
     ACTIVE = "active"
     EXPIRED = "expired"
     TERMINATED = "terminated"


class Lease(TimestampMixin, Base):
     """
     Lease model - tenancy contract between a tenant and a property.

     payment_frequency is stored as plain text so that legacy values load;
     it is validated when a payment schedule is generated.
     """
     __tablename__ = "leases"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)

     # Lease period
     start_date = Column(Date, nullable=False)
     end_date = Column(Date, nullable=False)
     payment_start_date = Column(Date, nullable=True)  # may differ from start_date

     # Pricing
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     security_deposit = Column(Numeric(12, 2), nullable=True)

     # Payment terms
     payment_frequency = Column(String(16), default=PaymentFrequency.MONTHLY.value, nullable=False)
     payment_day = Column(Integer, nullable=True)  # day of month

     # Terms
     lease_type = Column(String(50), nullable=True)
     special_conditions = Column(Text, nullable=True)
     has_renewal_option = Column(Boolean, default=False, nullable=False)
     signed_by_tenant = Column(Boolean, default=False, nullable=False)
     signed_by_owner = Column(Boolean, default=False, nullable=False)

     # Status
     is_active = Column(Boolean, default=False, nullable=False)
     status = Column(String(20), default=LeaseStatus.DRAFT.value, nullable=False)

     # Defined before the relationships: "property" below shadows the builtin
     @property
     def schedule_start_date(self):
          """First rent due date: payment_start_date when set, else start_date."""
          return self.payment_start_date or self.start_date

     # Relationships
     property = relationship("Property", back_populates="leases")
     tenant = relationship("Tenant", back_populates="leases")
     payments = relationship(
          "Payment",
          back_populates="lease",
          cascade="all, delete-orphan",
          order_by="Payment.due_date",
     )

     def __repr__(self):
          return f"<Lease(id={self.id}, tenant_id={self.tenant_id}, property_id={self.property_id})>"

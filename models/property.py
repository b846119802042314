# models/property.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, Text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class PropertyStatus(str, enum.Enum):
     """Listing status of a property."""
     AVAILABLE = "available"
     RENTED = "rented"
     SOLD = "sold"
     PENDING = "pending"


class Property(TimestampMixin, Base):
     """
     Property model - a listing managed by an agency.
     Only the fields the lease and payment flows need are mapped.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     agency_id = Column(Integer, nullable=True, index=True)
     title = Column(String(255), nullable=False)
     location = Column(String(255), nullable=True)
     description = Column(Text, nullable=True)
     price = Column(Numeric(12, 2), nullable=True)
     agency_fees = Column(Numeric(12, 2), nullable=True)
     status = Column(String(50), default=PropertyStatus.AVAILABLE.value, nullable=False)  # available, rented, sold

     # Relationships
     leases = relationship("Lease", back_populates="property")

     def __repr__(self):
          return f"<Property(id={self.id}, title='{self.title}', status='{self.status}')>"

     @property
     def is_available(self) -> bool:
          return self.status == PropertyStatus.AVAILABLE.value

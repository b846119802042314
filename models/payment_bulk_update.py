# models/payment_bulk_update.py
"""
Audit trail for bulk payment status changes.

A PaymentBulkUpdate groups one status transition applied to many payments;
each PaymentBulkUpdateItem records the previous and new status of a single
payment. Items are written once and never modified.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base
from .payment import PaymentStatus, _enum_values


class PaymentBulkUpdate(Base):
     """One bulk status change initiated by a user."""
     __tablename__ = "payment_bulk_updates"

     id = Column(Integer, primary_key=True, autoincrement=True)
     user_id = Column(String(64), nullable=True)  # initiating actor
     payments_count = Column(Integer, nullable=False)
     status = Column(
          Enum(
               PaymentStatus,
               name="payment_bulk_status",
               native_enum=False,
               create_constraint=True,
               values_callable=_enum_values,
          ),
          nullable=False
     )
     notes = Column(Text, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     items = relationship(
          "PaymentBulkUpdateItem",
          back_populates="bulk_update",
          cascade="all, delete-orphan",
          order_by="PaymentBulkUpdateItem.id",
     )

     def __repr__(self):
          return f"<PaymentBulkUpdate(id={self.id}, count={self.payments_count}, status='{self.status.value}')>"


class PaymentBulkUpdateItem(Base):
     """Before/after status of one payment inside a bulk update."""
     __tablename__ = "payment_bulk_update_items"

     id = Column(Integer, primary_key=True, autoincrement=True)
     bulk_update_id = Column(
          Integer,
          ForeignKey("payment_bulk_updates.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     payment_id = Column(
          Integer,
          ForeignKey("payments.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     previous_status = Column(String(20), nullable=True)  # null when the payment had no status
     new_status = Column(String(20), nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     bulk_update = relationship("PaymentBulkUpdate", back_populates="items")

     def __repr__(self):
          return (
               f"<PaymentBulkUpdateItem(payment_id={self.payment_id}, "
               f"{self.previous_status} -> {self.new_status})>"
          )

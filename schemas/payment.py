# schemas/payment.py
"""
Pydantic schemas for the payment API.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from models.lease import PaymentFrequency
from models.payment import PaymentStatus, PaymentType


class PaymentCreate(BaseModel):
     """Schema for recording a payment manually."""
     lease_id: int = Field(..., gt=0, description="Lease ID (must exist)")
     amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
     due_date: Optional[date] = None
     payment_date: Optional[date] = None
     payment_method: Optional[str] = Field(None, max_length=50)
     status: PaymentStatus = Field(default=PaymentStatus.PENDING)
     payment_type: PaymentType = Field(default=PaymentType.RENT)
     transaction_id: Optional[str] = Field(None, max_length=255)
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "lease_id": 1,
                    "amount": 1000.00,
                    "due_date": "2024-02-01",
                    "payment_date": "2024-02-03",
                    "payment_method": "bank_transfer",
                    "status": "completed",
                    "payment_type": "rent"
               }
          }
     )


class PaymentUpdate(BaseModel):
     """Schema for updating an existing payment. Only provided fields change."""
     amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     due_date: Optional[date] = None
     payment_date: Optional[date] = None
     payment_method: Optional[str] = Field(None, max_length=50)
     status: Optional[PaymentStatus] = None
     transaction_id: Optional[str] = Field(None, max_length=255)
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "status": "completed",
                    "payment_date": "2024-02-03"
               }
          }
     )


class PaymentResponse(BaseModel):
     """Schema for payment response."""
     id: int
     lease_id: int
     amount: Decimal
     due_date: Optional[date] = None
     payment_date: Optional[date] = None
     payment_method: Optional[str] = None
     status: PaymentStatus
     payment_type: PaymentType
     is_auto_generated: bool
     notes: Optional[str] = None
     transaction_id: Optional[str] = None
     processed_by: Optional[str] = None
     created_at: Optional[datetime] = None
     updated_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class PaymentListResponse(BaseModel):
     payments: List[PaymentResponse]
     total: int


class HistoricalGenerationRequest(BaseModel):
     """Backfill rent from the lease's payment start date up to as_of."""
     as_of: Optional[date] = Field(None, description="Cut-off date (defaults to today)")


class RecurringGenerationRequest(BaseModel):
     """Generate pending payments over a date range (defaults to the lease term)."""
     start_date: Optional[date] = None
     end_date: Optional[date] = None
     amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
     frequency: Optional[PaymentFrequency] = None
     payment_type: PaymentType = PaymentType.RENT


class GenerationResponse(BaseModel):
     lease_id: int
     created_count: int
     message: str
     payments: List[PaymentResponse]


class BulkStatusRequest(BaseModel):
     """Apply one status to many payments."""
     payment_ids: List[int] = Field(..., description="Payments to update")
     status: PaymentStatus
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "payment_ids": [12, 13],
                    "status": "late",
                    "notes": "overdue"
               }
          }
     )


class BulkStatusResponse(BaseModel):
     updated_count: int
     bulk_update_id: int
     audit_recorded: bool


class BulkUpdateItemResponse(BaseModel):
     payment_id: int
     previous_status: Optional[str] = None
     new_status: str

     model_config = ConfigDict(from_attributes=True)


class BulkUpdateResponse(BaseModel):
     id: int
     user_id: Optional[str] = None
     payments_count: int
     status: PaymentStatus
     notes: Optional[str] = None
     created_at: Optional[datetime] = None
     items: List[BulkUpdateItemResponse]

     model_config = ConfigDict(from_attributes=True)


class LeaseStatsResponse(BaseModel):
     lease_id: int
     total_paid: Decimal
     total_due: Decimal
     pending_count: int
     late_count: int
     undefined_count: int
     balance: Decimal


class PaymentTotalsResponse(BaseModel):
     lease_id: int
     totals: Dict[str, Dict[str, Decimal]]

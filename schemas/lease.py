# schemas/lease.py
"""
Pydantic schemas for Lease API request/response validation.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, model_validator

from models.lease import PaymentFrequency
from schemas.payment import PaymentResponse


class LeaseCreate(BaseModel):
     """Schema for creating a new lease."""
     property_id: int = Field(..., gt=0, description="Property ID (must exist and be available)")
     tenant_id: int = Field(..., gt=0, description="Tenant ID")
     start_date: date = Field(..., description="Lease start date")
     end_date: date = Field(..., description="Lease end date")
     payment_start_date: Optional[date] = Field(None, description="First rent due date (defaults to start_date)")
     monthly_rent: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, description="Rent per period")
     security_deposit: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
     payment_frequency: PaymentFrequency = Field(default=PaymentFrequency.MONTHLY)
     payment_day: Optional[int] = Field(None, ge=1, le=31, description="Day of month rent is due")
     has_renewal_option: bool = False
     lease_type: Optional[str] = Field(None, max_length=50)
     special_conditions: Optional[str] = None
     initial_payments_paid: bool = Field(default=True, description="Record deposit and agency fee as already paid")
     generate_history: bool = Field(default=False, description="Backfill rent payments up to today")

     @model_validator(mode="after")
     def check_dates(self):
          if self.end_date < self.start_date:
               raise ValueError("end_date must be on or after start_date")
          return self

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": 1,
                    "tenant_id": 1,
                    "start_date": "2024-01-01",
                    "end_date": "2024-12-31",
                    "monthly_rent": 1000.00,
                    "security_deposit": 2000.00,
                    "payment_frequency": "monthly",
                    "payment_day": 1,
                    "generate_history": True
               }
          }
     )


class LeaseResponse(BaseModel):
     """Schema for lease response."""
     id: int
     property_id: int
     tenant_id: int
     start_date: date
     end_date: date
     payment_start_date: Optional[date] = None
     monthly_rent: Decimal
     security_deposit: Optional[Decimal] = None
     payment_frequency: str
     payment_day: Optional[int] = None
     is_active: bool
     status: str
     created_at: Optional[datetime] = None

     # Optional related data
     tenant_name: Optional[str] = None
     property_title: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class LeaseWithPaymentsResponse(BaseModel):
     """Lease together with its payments ordered by due date."""
     lease: LeaseResponse
     payments: List[PaymentResponse]

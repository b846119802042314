# routers/leases.py
"""
Lease API routes.

Provides lease creation, payment schedule generation and per-lease payment
figures. Service errors are translated to HTTP responses by the handlers
registered in main.py.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from auth import verify_token
from database import get_session
from models import Lease
from schemas.lease import LeaseCreate, LeaseResponse, LeaseWithPaymentsResponse
from schemas.payment import (
     GenerationResponse,
     HistoricalGenerationRequest,
     LeaseStatsResponse,
     PaymentListResponse,
     PaymentResponse,
     PaymentTotalsResponse,
     RecurringGenerationRequest,
)
from services import payment_store
from services.errors import PaymentServiceError
from services.lease_service import LeaseService
from services.payment_generation import (
     MaterializationResult,
     materialize_lease_history,
     materialize_recurring_payments,
)
from services.payment_stats import compute_lease_stats, payment_totals_by_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/leases", tags=["leases"])


@router.post(
     "",
     response_model=LeaseResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new lease"
)
def create_lease(
     lease_data: LeaseCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Create an active lease on an available property.

     - Records the security deposit and agency fee as payments
     - Marks the property as rented
     - **generate_history**: also backfill rent payments up to today
     """
     lease = LeaseService.create_lease(db, lease_data)
     db.commit()
     db.refresh(lease)

     if lease_data.generate_history:
          # The lease is committed; a failed backfill can be rerun via /payments/historical
          try:
               result = materialize_lease_history(db, lease.id)
               logger.info("Lease %s: %s", lease.id, result.message)
          except PaymentServiceError:
               logger.exception("Lease %s: historical payment generation failed", lease.id)

     return _build_lease_response(lease)


@router.get(
     "/{lease_id}",
     response_model=LeaseWithPaymentsResponse,
     summary="Get lease with its payments"
)
def get_lease(
     lease_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     lease, payments = LeaseService.get_lease_with_payments(db, lease_id)
     return LeaseWithPaymentsResponse(
          lease=_build_lease_response(lease),
          payments=[PaymentResponse.model_validate(p) for p in payments],
     )


@router.get(
     "/{lease_id}/payments",
     response_model=PaymentListResponse,
     summary="List payments of a lease"
)
def list_lease_payments(
     lease_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Payments of a lease ordered by due date."""
     payment_store.find_lease_by_id(db, lease_id)
     payments = payment_store.find_payments_by_lease(db, lease_id)
     return PaymentListResponse(
          payments=[PaymentResponse.model_validate(p) for p in payments],
          total=len(payments),
     )


@router.post(
     "/{lease_id}/payments/historical",
     response_model=GenerationResponse,
     summary="Backfill historical rent payments"
)
def generate_historical_payments(
     lease_id: int,
     body: Optional[HistoricalGenerationRequest] = Body(None),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Create the missing rent payments from the lease's payment start date up
     to today (or **as_of**). Existing due dates are skipped, so calling this
     again creates nothing.
     """
     as_of = body.as_of if body else None
     result = materialize_lease_history(db, lease_id, as_of=as_of)
     return _build_generation_response(lease_id, result)


@router.post(
     "/{lease_id}/payments/recurring",
     response_model=GenerationResponse,
     summary="Generate payments over the lease term"
)
def generate_recurring_payments(
     lease_id: int,
     body: Optional[RecurringGenerationRequest] = Body(None),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Create pending payments for every due date between **start_date** and
     **end_date** (default: the lease's payment start and end dates).
     """
     body = body or RecurringGenerationRequest()
     lease = payment_store.find_lease_by_id(db, lease_id)
     result = materialize_recurring_payments(
          db,
          lease.id,
          body.amount if body.amount is not None else lease.monthly_rent,
          body.start_date or lease.schedule_start_date,
          body.end_date or lease.end_date,
          body.frequency or lease.payment_frequency,
          payment_type=body.payment_type,
     )
     return _build_generation_response(lease_id, result)


@router.get(
     "/{lease_id}/payment-stats",
     response_model=LeaseStatsResponse,
     summary="Get payment statistics for a lease"
)
def get_lease_payment_stats(
     lease_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Returns:
     - Total paid (completed payments)
     - Total due (one period of rent)
     - Balance
     - Pending, late and undefined payment counts
     """
     stats = compute_lease_stats(db, lease_id)
     return LeaseStatsResponse(lease_id=lease_id, **stats.to_dict())


@router.get(
     "/{lease_id}/payment-totals",
     response_model=PaymentTotalsResponse,
     summary="Get payment totals by type"
)
def get_lease_payment_totals(
     lease_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return PaymentTotalsResponse(lease_id=lease_id, totals=payment_totals_by_type(db, lease_id))


def _build_generation_response(lease_id: int, result: MaterializationResult) -> GenerationResponse:
     return GenerationResponse(
          lease_id=lease_id,
          created_count=result.created_count,
          message=result.message,
          payments=[PaymentResponse.model_validate(p) for p in result.created_records],
     )


def _build_lease_response(lease: Lease) -> LeaseResponse:
     """
     Helper function to build LeaseResponse with related data.
     """
     response = LeaseResponse.model_validate(lease)
     if lease.tenant is not None:
          response.tenant_name = lease.tenant.full_name
     if lease.property is not None:
          response.property_title = lease.property.title
     return response

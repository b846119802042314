# routers/payments.py
"""
Payment API routes.

Manual payment entry and updates, bulk status changes with their audit
trail, and the late-payment sweep.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from auth import current_actor, verify_token
from database import get_session
from schemas.payment import (
     BulkStatusRequest,
     BulkStatusResponse,
     BulkUpdateResponse,
     PaymentCreate,
     PaymentResponse,
     PaymentUpdate,
)
from services import payment_store
from services.bulk_update import apply_bulk_status
from services.payment_service import PaymentService

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post(
     "",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a payment"
)
def create_payment(
     payment_data: PaymentCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Record a manually entered payment for a lease.

     - **lease_id**: ID of the lease
     - **amount**: Payment amount (must be positive)
     - **status**: Settlement status (defaults to pending)
     - **payment_type**: rent, deposit, agency_fee or other
     """
     payment = PaymentService.create_payment(db, payment_data)
     db.commit()
     db.refresh(payment)
     return PaymentResponse.model_validate(payment)


@router.post(
     "/bulk-status",
     response_model=BulkStatusResponse,
     summary="Update the status of many payments"
)
def bulk_update_status(
     body: BulkStatusRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Apply one status (and optional notes) to every listed payment.

     Each change is recorded in the bulk update audit trail with the
     payment's previous status.
     """
     result = apply_bulk_status(
          db,
          body.payment_ids,
          body.status,
          note=body.notes,
          actor=current_actor(token),
     )
     return BulkStatusResponse(
          updated_count=result.updated_count,
          bulk_update_id=result.bulk_update_id,
          audit_recorded=result.audit_recorded,
     )


@router.get(
     "/bulk-updates/{bulk_update_id}",
     response_model=BulkUpdateResponse,
     summary="Get a bulk update and its items"
)
def get_bulk_update(
     bulk_update_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     record = payment_store.find_bulk_update(db, bulk_update_id)
     if not record:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Bulk update with ID {bulk_update_id} not found"
          )
     return BulkUpdateResponse.model_validate(record)


@router.post(
     "/mark-late",
     summary="Mark overdue pending payments as late"
)
def mark_late_payments(
     as_of: Optional[date] = Query(None, description="Reference date (defaults to today)"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     count = PaymentService.mark_late_payments(db, as_of=as_of)
     db.commit()
     return {"marked_late": count}


@router.get(
     "/{payment_id}",
     response_model=PaymentResponse,
     summary="Get payment by ID"
)
def get_payment(
     payment_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return PaymentResponse.model_validate(PaymentService.get_payment(db, payment_id))


@router.put(
     "/{payment_id}",
     response_model=PaymentResponse,
     summary="Update payment"
)
def update_payment(
     payment_id: int,
     payment_data: PaymentUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Update an existing payment.

     Only provided fields will be updated. Marking a payment completed
     stamps today's date as its payment date when none is set.
     """
     payment = PaymentService.update_payment(db, payment_id, payment_data, actor=current_actor(token))
     db.commit()
     db.refresh(payment)
     return PaymentResponse.model_validate(payment)

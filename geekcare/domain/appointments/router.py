"""Appointment router - FastAPI endpoints for appointments"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Account, get_current_account, get_current_member, get_current_physician
from ...database import get_db
from ...models import Member, Physician
from ...rate_limiter import create_rate_limiter
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    BatchStatusResponse,
    BatchStatusUpdate,
    PaymentConfirmRequest,
    RescheduleRequest,
    StatusUpdate,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

# 10 booking attempts per minute per client
booking_rate_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="booking")


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


# ============================================================================
# BOOKING
# ============================================================================


@router.post("", response_model=AppointmentResponse, status_code=201)
async def book_appointment(
    data: AppointmentCreate,
    member: Member = Depends(get_current_member),
    service: AppointmentService = Depends(get_appointment_service),
    _: None = Depends(booking_rate_limit),
):
    """Book a consultation; 409 when the slot is outside the schedule or already taken"""
    return service.book(member, data)


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    scope: str = Query("upcoming", description="upcoming, past or all"),
    account: Account = Depends(get_current_account),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.list_appointments(account, scope)


# ============================================================================
# PHYSICIAN BULK ACTIONS
# ============================================================================


@router.post("/batch-status", response_model=BatchStatusResponse)
async def batch_update_status(
    data: BatchStatusUpdate,
    physician: Physician = Depends(get_current_physician),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Mark several appointments completed or cancelled"""
    return service.batch_update_status(physician, data)


# ============================================================================
# SINGLE APPOINTMENT
# ============================================================================


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    account: Account = Depends(get_current_account),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_appointment(account, appointment_id)


@router.post("/{appointment_id}/reschedule", response_model=AppointmentResponse)
async def reschedule_appointment(
    appointment_id: str,
    data: RescheduleRequest,
    account: Account = Depends(get_current_account),
    service: AppointmentService = Depends(get_appointment_service),
    _: None = Depends(booking_rate_limit),
):
    return service.reschedule(account, appointment_id, data)


@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment(
    appointment_id: str,
    account: Account = Depends(get_current_account),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.cancel(account, appointment_id)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    data: StatusUpdate,
    physician: Physician = Depends(get_current_physician),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.update_status(physician, appointment_id, data)


@router.post("/{appointment_id}/payments/confirm", response_model=AppointmentResponse)
async def confirm_payment(
    appointment_id: str,
    data: PaymentConfirmRequest,
    account: Account = Depends(get_current_account),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Record a gateway payment once its signature checks out"""
    return service.confirm_payment(account, appointment_id, data)


__all__ = ["router"]

"""Appointment service - Business logic for booking, rescheduling and payments"""

import logging
from datetime import timedelta

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ... import config
from ...auth import Account
from ...models import Appointment, Member, Physician
from ...payment_security import PaymentSignatureError, verify_payment_signature
from ...shared.timeutils import clinic_now, to_clinic_naive
from ..scheduling.service import SchedulingService
from .repository import AppointmentRepository
from .schemas import (
    AppointmentCreate,
    BatchStatusResponse,
    BatchStatusUpdate,
    PaymentConfirmRequest,
    RescheduleRequest,
    StatusUpdate,
)

logger = logging.getLogger(__name__)

SCOPES = {"upcoming", "past", "all"}


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.scheduling = SchedulingService(db)

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to {action}: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Failed to {action}") from e

    def _reserve(self, physician: Physician, start, end, exclude_appointment_id=None) -> None:
        """Lock the physician and verify the interval; releases the lock on rejection"""
        try:
            self.scheduling.ensure_bookable(
                physician, start, end, exclude_appointment_id=exclude_appointment_id
            )
        except HTTPException:
            self.db.rollback()
            raise

    # ------------------------------------------------------------------
    # Booking
    # ------------------------------------------------------------------

    def book(self, member: Member, data: AppointmentCreate) -> Appointment:
        physician = self.scheduling.get_physician(data.physician_id)
        start = to_clinic_naive(data.start_time)
        end = start + timedelta(minutes=physician.consultation_duration)

        logger.info(f"📅 Booking request: member {member.id} with physician {physician.id} at {start}")
        self._reserve(physician, start, end)

        payment = None
        if data.payment_method == "onsite":
            payment = {
                "amount": physician.consultation_fee,
                "currency": config.DEFAULT_CURRENCY,
                "status": "pending",
                "payment_method": "onsite",
            }

        appointment = self.repo.add_appointment(
            self.db,
            details=data.details.model_dump() if data.details else None,
            payment=payment,
            physician_id=physician.id,
            member_id=member.id,
            start_time=start,
            end_time=end,
            status="scheduled",
        )
        self._commit("book appointment")
        logger.info(f"✅ Appointment {appointment.id} booked for {start}")
        return self.repo.get_appointment(self.db, appointment.id)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def list_appointments(self, account: Account, scope: str = "upcoming") -> list[Appointment]:
        if scope not in SCOPES:
            raise HTTPException(status_code=400, detail="scope must be one of: upcoming, past, all")
        return self.repo.list_for_participant(
            self.db, account.id, account.is_physician, scope, clinic_now()
        )

    def get_appointment(self, account: Account, appointment_id: str) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        if account.id not in (appointment.member_id, appointment.physician_id):
            logger.warning(f"🚫 {account.id} tried to access appointment {appointment_id}")
            raise HTTPException(status_code=403, detail="You do not have access to this appointment")
        return appointment

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------

    def reschedule(self, account: Account, appointment_id: str, data: RescheduleRequest) -> Appointment:
        appointment = self.get_appointment(account, appointment_id)
        if account.id != appointment.member_id:
            raise HTTPException(status_code=403, detail="Only the member can reschedule an appointment")
        if appointment.status != "scheduled":
            raise HTTPException(status_code=400, detail="Only scheduled appointments can be rescheduled")

        physician = appointment.physician
        start = to_clinic_naive(data.start_time)
        end = start + timedelta(minutes=physician.consultation_duration)
        self._reserve(physician, start, end, exclude_appointment_id=appointment.id)

        appointment.start_time = start
        appointment.end_time = end
        self._commit("reschedule appointment")
        logger.info(f"📅 Appointment {appointment.id} rescheduled to {start}")
        return self.repo.get_appointment(self.db, appointment.id)

    def cancel(self, account: Account, appointment_id: str) -> Appointment:
        appointment = self.get_appointment(account, appointment_id)
        if appointment.status != "scheduled":
            raise HTTPException(status_code=400, detail="Only scheduled appointments can be cancelled")

        appointment.status = "cancelled"
        self._commit("cancel appointment")
        logger.info(f"🚫 Appointment {appointment.id} cancelled by {account.role} {account.id}")
        return appointment

    def update_status(self, physician: Physician, appointment_id: str, data: StatusUpdate) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment or appointment.physician_id != physician.id:
            raise HTTPException(status_code=404, detail="Appointment not found")
        if appointment.status != "scheduled":
            raise HTTPException(
                status_code=400,
                detail=f"Appointment is already {appointment.status}",
            )

        appointment.status = data.status
        self._commit("update appointment status")
        return appointment

    def batch_update_status(self, physician: Physician, data: BatchStatusUpdate) -> BatchStatusResponse:
        """Apply a status to many appointments; ones not scheduled or not owned are skipped"""
        requested = list(dict.fromkeys(data.appointment_ids))
        found = {
            a.id: a for a in self.repo.get_physician_appointments(self.db, physician.id, requested)
        }

        updated, skipped = [], []
        for appointment_id in requested:
            appointment = found.get(appointment_id)
            if appointment is None or appointment.status != "scheduled":
                skipped.append(appointment_id)
                continue
            appointment.status = data.status
            updated.append(appointment_id)

        self._commit("update appointment statuses")
        logger.info(f"✅ Batch status '{data.status}': {len(updated)} updated, {len(skipped)} skipped")
        return BatchStatusResponse(updated=updated, skipped=skipped)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def confirm_payment(
        self, account: Account, appointment_id: str, data: PaymentConfirmRequest
    ) -> Appointment:
        """Record a completed gateway payment after verifying its signature"""
        appointment = self.get_appointment(account, appointment_id)
        if account.id != appointment.member_id:
            raise HTTPException(status_code=403, detail="Only the member can pay for an appointment")

        if not config.PAYMENT_GATEWAY_KEY_SECRET:
            logger.error("❌ PAYMENT_GATEWAY_KEY_SECRET not configured")
            raise HTTPException(status_code=500, detail="Payment verification not configured")

        payment = appointment.payment
        try:
            verify_payment_signature(
                config.PAYMENT_GATEWAY_KEY_SECRET, data.order_id, data.payment_id, data.signature
            )
        except PaymentSignatureError as e:
            if payment is not None and payment.status == "pending":
                payment.status = "failed"
                self._commit("record failed payment")
            raise HTTPException(status_code=400, detail="Payment verification failed") from e

        if payment is not None and payment.status == "completed":
            if payment.payment_id == data.payment_id:
                return appointment
            raise HTTPException(status_code=409, detail="Appointment is already paid")

        if payment is None:
            self.repo.add_payment(
                self.db,
                appointment,
                amount=appointment.physician.consultation_fee,
                currency=config.DEFAULT_CURRENCY,
                status="completed",
                payment_method="online",
                payment_id=data.payment_id,
            )
        else:
            payment.status = "completed"
            payment.payment_method = "online"
            payment.payment_id = data.payment_id

        self._commit("record payment")
        logger.info(f"💳 Payment {data.payment_id} recorded for appointment {appointment.id}")
        return self.repo.get_appointment(self.db, appointment.id)

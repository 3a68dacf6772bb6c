"""Appointment repository - Database operations for appointments and payments"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentDetail, AppointmentPayment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def _with_relations(db: Session):
        return db.query(Appointment).options(
            joinedload(Appointment.details),
            joinedload(Appointment.payment),
            joinedload(Appointment.physician),
            joinedload(Appointment.member),
        )

    @staticmethod
    def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
        return (
            AppointmentRepository._with_relations(db)
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def list_for_participant(
        db: Session, participant_id: str, is_physician: bool, scope: str, now: datetime
    ) -> list[Appointment]:
        column = Appointment.physician_id if is_physician else Appointment.member_id
        query = AppointmentRepository._with_relations(db).filter(column == participant_id)

        if scope == "upcoming":
            return (
                query.filter(Appointment.status == "scheduled", Appointment.start_time >= now)
                .order_by(Appointment.start_time)
                .all()
            )
        if scope == "past":
            query = query.filter(
                or_(Appointment.start_time < now, Appointment.status != "scheduled")
            )
        return query.order_by(Appointment.start_time.desc()).all()

    @staticmethod
    def get_physician_appointments(
        db: Session, physician_id: str, appointment_ids: list[str]
    ) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.physician_id == physician_id,
                Appointment.id.in_(appointment_ids),
            )
            .all()
        )

    @staticmethod
    def add_appointment(
        db: Session,
        details: Optional[dict] = None,
        payment: Optional[dict] = None,
        **appointment_data,
    ) -> Appointment:
        """Stage an appointment with its detail and payment rows; the caller commits"""
        appointment = Appointment(**appointment_data)
        if details:
            appointment.details = AppointmentDetail(**details)
        if payment:
            appointment.payment = AppointmentPayment(**payment)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def add_payment(db: Session, appointment: Appointment, **payment_data) -> AppointmentPayment:
        payment = AppointmentPayment(appointment_id=appointment.id, **payment_data)
        db.add(payment)
        db.flush()
        return payment

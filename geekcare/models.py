import uuid
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_uuid():
    """Generate a string UUID primary key"""
    return str(uuid.uuid4())


class Physician(Base):
    __tablename__ = "physicians"

    # Same value as the auth provider's user id (JWT "sub")
    id = Column(String(255), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    mobile_number = Column(String(50), nullable=True)
    residence = Column(String(255), nullable=True)
    gender = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    consultation_fee = Column(Float, default=0, nullable=False)
    consultation_duration = Column(Integer, default=30, nullable=False)  # minutes
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    specialties = relationship(
        "PhysicianSpecialty",
        back_populates="physician",
        cascade="all, delete-orphan",
        order_by="PhysicianSpecialty.id",
    )
    languages = relationship(
        "PhysicianLanguage",
        back_populates="physician",
        cascade="all, delete-orphan",
        order_by="PhysicianLanguage.id",
    )
    schedule_slots = relationship(
        "ScheduleSlot", back_populates="physician", cascade="all, delete-orphan"
    )
    appointments = relationship("Appointment", back_populates="physician")

    @property
    def specialty_names(self) -> list[str]:
        return [s.specialty for s in self.specialties]

    @property
    def language_names(self) -> list[str]:
        return [lang.language for lang in self.languages]


class PhysicianSpecialty(Base):
    __tablename__ = "physician_specialties"

    id = Column(Integer, primary_key=True, index=True)
    physician_id = Column(String(255), ForeignKey("physicians.id"), nullable=False, index=True)
    specialty = Column(String(100), nullable=False)

    physician = relationship("Physician", back_populates="specialties")


class PhysicianLanguage(Base):
    __tablename__ = "physician_languages"

    id = Column(Integer, primary_key=True, index=True)
    physician_id = Column(String(255), ForeignKey("physicians.id"), nullable=False, index=True)
    language = Column(String(100), nullable=False)

    physician = relationship("Physician", back_populates="languages")


class Member(Base):
    __tablename__ = "members"

    id = Column(String(255), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    mobile_number = Column(String(50), nullable=True)
    residence = Column(String(255), nullable=True)
    gender = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointments = relationship("Appointment", back_populates="member")
    medical_records = relationship(
        "MedicalRecord", back_populates="member", cascade="all, delete-orphan"
    )


class ScheduleSlot(Base):
    """A bookable window: recurring by weekday, or tied to one calendar date"""

    __tablename__ = "physician_schedules"

    id = Column(Integer, primary_key=True, index=True)
    physician_id = Column(String(255), ForeignKey("physicians.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=True, index=True)  # 0=Sunday .. 6=Saturday
    specific_date = Column(Date, nullable=True, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    physician = relationship("Physician", back_populates="schedule_slots")

    @property
    def is_recurring(self) -> bool:
        return self.specific_date is None


class Appointment(Base):
    __tablename__ = "physician_appointments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    physician_id = Column(String(255), ForeignKey("physicians.id"), nullable=False, index=True)
    member_id = Column(String(255), ForeignKey("members.id"), nullable=False, index=True)
    # Naive wall-clock datetimes in CLINIC_TIMEZONE
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    # Status workflow: scheduled → completed | cancelled
    status = Column(String(20), default="scheduled", nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    physician = relationship("Physician", back_populates="appointments")
    member = relationship("Member", back_populates="appointments")
    details = relationship(
        "AppointmentDetail",
        back_populates="appointment",
        uselist=False,
        cascade="all, delete-orphan",
    )
    payment = relationship(
        "AppointmentPayment",
        back_populates="appointment",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def physician_name(self) -> Optional[str]:
        return self.physician.full_name if self.physician else None

    @property
    def member_name(self) -> Optional[str]:
        return self.member.full_name if self.member else None


class AppointmentDetail(Base):
    """Patient intake answers captured at booking time"""

    __tablename__ = "appointment_details"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(
        String(36), ForeignKey("physician_appointments.id"), unique=True, nullable=False
    )
    patient_name = Column(String(255), nullable=True)
    patient_age = Column(Integer, nullable=True)
    reason = Column(Text, nullable=True)
    symptoms = Column(Text, nullable=True)
    medical_history = Column(Text, nullable=True)

    appointment = relationship("Appointment", back_populates="details")


class AppointmentPayment(Base):
    __tablename__ = "appointment_payments"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(
        String(36), ForeignKey("physician_appointments.id"), unique=True, nullable=False
    )
    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, completed, failed
    payment_method = Column(String(20), nullable=False)  # onsite, online
    payment_id = Column(String(255), nullable=True)  # Gateway payment reference
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    appointment = relationship("Appointment", back_populates="payment")


class ChatRoom(Base):
    __tablename__ = "chat_rooms"
    __table_args__ = (UniqueConstraint("member_id", "physician_id", name="uq_chat_room_pair"),)

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(String(255), ForeignKey("members.id"), nullable=False, index=True)
    physician_id = Column(String(255), ForeignKey("physicians.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    member = relationship("Member")
    physician = relationship("Physician")
    messages = relationship(
        "ChatMessage",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="ChatMessage.created_at",
    )


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    chat_room_id = Column(Integer, ForeignKey("chat_rooms.id"), nullable=False, index=True)
    sender_id = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    voice_message_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)

    room = relationship("ChatRoom", back_populates="messages")


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(String(255), ForeignKey("members.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    type = Column(String(50), default="document", nullable=False)
    date = Column(DateTime, server_default=func.now(), nullable=False)
    file_key = Column(String(500), nullable=False)  # Object storage key, not URL
    content_type = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)

    member = relationship("Member", back_populates="medical_records")


class SupportTicket(Base):
    __tablename__ = "support_tickets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    user_type = Column(String(20), nullable=False)  # member, physician
    email = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=True)
    category = Column(String(50), default="technical", nullable=False)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    attachments = Column(JSON, nullable=True)  # List of storage keys
    status = Column(String(20), default="open", nullable=False)  # open, in_progress, resolved, closed
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class MedicalQuery(Base):
    """Question a member asks the physician pool; any physician may answer"""

    __tablename__ = "medical_queries"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(String(255), ForeignKey("members.id"), nullable=False, index=True)
    physician_id = Column(String(255), ForeignKey("physicians.id"), nullable=True)
    subject = Column(String(255), nullable=False)
    question = Column(Text, nullable=False)
    response = Column(Text, nullable=True)
    status = Column(String(20), default="pending", nullable=False, index=True)  # pending, answered
    created_at = Column(DateTime, server_default=func.now())
    answered_at = Column(DateTime, nullable=True)

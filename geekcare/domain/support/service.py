"""Support service - Business logic for support tickets and medical queries"""

import logging
from typing import Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ... import storage
from ...auth import Account
from ...models import MedicalQuery, Member, Physician, SupportTicket
from ...shared.timeutils import clinic_now
from ...utils.sanitization import MAX_TITLE_LENGTH, clean_text
from .repository import SupportRepository
from .schemas import (
    QUERY_STATUSES,
    TICKET_CATEGORIES,
    MedicalQueryAnswer,
    MedicalQueryCreate,
    SupportTicketResponse,
    TicketAttachment,
)

logger = logging.getLogger(__name__)

MAX_ATTACHMENTS = 5
MAX_ATTACHMENT_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_ATTACHMENT_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "text/plain",
}
ALLOWED_ATTACHMENT_EXTENSIONS = (".pdf", ".jpg", ".jpeg", ".png", ".webp", ".gif", ".txt")


def to_ticket_response(ticket: SupportTicket) -> SupportTicketResponse:
    return SupportTicketResponse(
        id=ticket.id,
        user_id=ticket.user_id,
        user_type=ticket.user_type,
        email=ticket.email,
        full_name=ticket.full_name,
        category=ticket.category,
        subject=ticket.subject,
        message=ticket.message,
        status=ticket.status,
        attachments=[
            TicketAttachment(key=key, url=storage.presigned_url_or_none(key))
            for key in (ticket.attachments or [])
        ],
        created_at=ticket.created_at,
        updated_at=ticket.updated_at,
    )


class SupportService:
    """Service layer for support business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SupportRepository()

    # ------------------------------------------------------------------
    # Tickets
    # ------------------------------------------------------------------

    async def create_ticket(
        self,
        account: Account,
        category: str,
        subject: str,
        message: str,
        files: Optional[list[UploadFile]] = None,
    ) -> SupportTicketResponse:
        category = (category or "technical").strip().lower()
        if category not in TICKET_CATEGORIES:
            raise HTTPException(
                status_code=400,
                detail=f"category must be one of: {', '.join(sorted(TICKET_CATEGORIES))}",
            )

        try:
            subject = clean_text(subject, max_length=MAX_TITLE_LENGTH)
            message = clean_text(message)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        if not subject or not message:
            raise HTTPException(status_code=400, detail="Subject and message are required")

        files = [f for f in (files or []) if f and f.filename]
        if len(files) > MAX_ATTACHMENTS:
            raise HTTPException(
                status_code=400, detail=f"You can attach at most {MAX_ATTACHMENTS} files"
            )

        keys = []
        for file in files:
            keys.append(
                await storage.store_upload(
                    file,
                    prefix=f"support-attachments/{account.id}/ticket",
                    allowed_types=ALLOWED_ATTACHMENT_TYPES,
                    allowed_extensions=ALLOWED_ATTACHMENT_EXTENSIONS,
                    max_size=MAX_ATTACHMENT_SIZE,
                )
            )

        try:
            ticket = self.repo.create_ticket(
                self.db,
                user_id=account.id,
                user_type=account.role,
                email=account.profile.email,
                full_name=account.profile.full_name,
                category=category,
                subject=subject,
                message=message,
                attachments=keys,
                status="open",
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            for key in keys:
                storage.delete_object(key)
            logger.error(f"❌ Failed to create support ticket for {account.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create support ticket") from e

        logger.info(f"🎫 Support ticket {ticket.id} ({category}) created by {account.role} {account.id}")
        return to_ticket_response(ticket)

    def list_tickets(self, account: Account) -> list[SupportTicketResponse]:
        return [to_ticket_response(t) for t in self.repo.get_tickets(self.db, account.id)]

    def get_ticket(self, account: Account, ticket_id: int) -> SupportTicketResponse:
        ticket = self.repo.get_ticket(self.db, ticket_id, account.id)
        if not ticket:
            raise HTTPException(status_code=404, detail="Support ticket not found")
        return to_ticket_response(ticket)

    # ------------------------------------------------------------------
    # Medical queries
    # ------------------------------------------------------------------

    def ask_query(self, member: Member, data: MedicalQueryCreate) -> MedicalQuery:
        query = self.repo.create_query(
            self.db, member.id, subject=data.subject, question=data.question, status="pending"
        )
        logger.info(f"❓ Medical query {query.id} submitted by member {member.id}")
        return query

    def list_queries(self, account: Account, status: Optional[str] = None) -> list[MedicalQuery]:
        if status is not None and status not in QUERY_STATUSES:
            raise HTTPException(status_code=400, detail="status must be 'pending' or 'answered'")
        if account.is_physician:
            return self.repo.get_physician_queries(self.db, account.id, status or "pending")
        return self.repo.get_member_queries(self.db, account.id, status)

    def answer_query(
        self, physician: Physician, query_id: int, data: MedicalQueryAnswer
    ) -> MedicalQuery:
        if not self.repo.get_query(self.db, query_id):
            raise HTTPException(status_code=404, detail="Medical query not found")

        if not self.repo.answer_query(self.db, query_id, physician.id, data.response, clinic_now()):
            raise HTTPException(status_code=409, detail="This query has already been answered")

        logger.info(f"✅ Medical query {query_id} answered by physician {physician.id}")
        return self.repo.get_query(self.db, query_id)

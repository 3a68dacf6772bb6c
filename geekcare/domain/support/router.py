"""Support router - FastAPI endpoints for support tickets and medical queries"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import Account, get_current_account, get_current_member, get_current_physician
from ...database import get_db
from ...models import Member, Physician
from ...rate_limiter import create_rate_limiter
from .schemas import (
    MedicalQueryAnswer,
    MedicalQueryCreate,
    MedicalQueryResponse,
    SupportTicketResponse,
)
from .service import SupportService

router = APIRouter(prefix="/support", tags=["Support"])

# 10 tickets per hour per client
ticket_rate_limit = create_rate_limiter(limit=10, window_seconds=3600, key_prefix="support_ticket")


def get_support_service(db: Session = Depends(get_db)) -> SupportService:
    """Dependency injection for SupportService"""
    return SupportService(db)


# ============================================================================
# SUPPORT TICKETS
# ============================================================================


@router.post("/tickets", response_model=SupportTicketResponse, status_code=201)
async def create_ticket(
    subject: str = Form(...),
    message: str = Form(...),
    category: str = Form("technical"),
    files: Optional[list[UploadFile]] = File(None),
    account: Account = Depends(get_current_account),
    service: SupportService = Depends(get_support_service),
    _: None = Depends(ticket_rate_limit),
):
    """Open a support ticket with optional attachments"""
    return await service.create_ticket(account, category, subject, message, files)


@router.get("/tickets", response_model=list[SupportTicketResponse])
async def list_tickets(
    account: Account = Depends(get_current_account),
    service: SupportService = Depends(get_support_service),
):
    return service.list_tickets(account)


@router.get("/tickets/{ticket_id}", response_model=SupportTicketResponse)
async def get_ticket(
    ticket_id: int,
    account: Account = Depends(get_current_account),
    service: SupportService = Depends(get_support_service),
):
    return service.get_ticket(account, ticket_id)


# ============================================================================
# MEDICAL QUERIES
# ============================================================================


@router.post("/queries", response_model=MedicalQueryResponse, status_code=201)
async def ask_query(
    data: MedicalQueryCreate,
    member: Member = Depends(get_current_member),
    service: SupportService = Depends(get_support_service),
):
    """Ask the physician pool a medical question"""
    return service.ask_query(member, data)


@router.get("/queries", response_model=list[MedicalQueryResponse])
async def list_queries(
    status: Optional[str] = Query(None, description="pending or answered"),
    account: Account = Depends(get_current_account),
    service: SupportService = Depends(get_support_service),
):
    """Members see their own queries; physicians see the pending queue"""
    return service.list_queries(account, status)


@router.post("/queries/{query_id}/answer", response_model=MedicalQueryResponse)
async def answer_query(
    query_id: int,
    data: MedicalQueryAnswer,
    physician: Physician = Depends(get_current_physician),
    service: SupportService = Depends(get_support_service),
):
    return service.answer_query(physician, query_id, data)


__all__ = ["router"]

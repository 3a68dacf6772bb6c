"""Medical record router - FastAPI endpoints for medical records"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_member
from ...database import get_db
from ...models import Member
from .schemas import MedicalRecordResponse
from .service import MedicalRecordService

router = APIRouter(prefix="/records", tags=["Medical Records"])


def get_record_service(db: Session = Depends(get_db)) -> MedicalRecordService:
    """Dependency injection for MedicalRecordService"""
    return MedicalRecordService(db)


@router.get("", response_model=list[MedicalRecordResponse])
async def list_records(
    member: Member = Depends(get_current_member),
    service: MedicalRecordService = Depends(get_record_service),
):
    """Member's records, newest first, with short-lived download URLs"""
    return service.list_records(member)


@router.post("", response_model=MedicalRecordResponse, status_code=201)
async def upload_record(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    type: str = Form("document"),
    description: Optional[str] = Form(None),
    member: Member = Depends(get_current_member),
    service: MedicalRecordService = Depends(get_record_service),
):
    """Upload a PDF or image (max 10MB)"""
    return await service.upload_record(member, file, title, type, description)


@router.delete("/{record_id}")
async def delete_record(
    record_id: int,
    member: Member = Depends(get_current_member),
    service: MedicalRecordService = Depends(get_record_service),
):
    return service.delete_record(member, record_id)


__all__ = ["router"]

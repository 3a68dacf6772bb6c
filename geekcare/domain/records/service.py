"""Medical record service - Business logic for member medical records"""

import logging
import os
from typing import Optional

from fastapi import HTTPException, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ... import storage
from ...models import MedicalRecord, Member
from ...utils.sanitization import MAX_TITLE_LENGTH, clean_text
from .repository import MedicalRecordRepository
from .schemas import RECORD_TYPES, MedicalRecordResponse

logger = logging.getLogger(__name__)

MAX_RECORD_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_RECORD_TYPES = {
    "application/pdf",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
}
ALLOWED_RECORD_EXTENSIONS = (".pdf", ".jpg", ".jpeg", ".png", ".webp")


def to_response(record: MedicalRecord) -> MedicalRecordResponse:
    response = MedicalRecordResponse.model_validate(record)
    response.url = storage.presigned_url_or_none(record.file_key)
    return response


class MedicalRecordService:
    """Service layer for medical record business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MedicalRecordRepository()

    def list_records(self, member: Member) -> list[MedicalRecordResponse]:
        return [to_response(r) for r in self.repo.get_records(self.db, member.id)]

    async def upload_record(
        self,
        member: Member,
        file: UploadFile,
        title: Optional[str] = None,
        record_type: str = "document",
        description: Optional[str] = None,
    ) -> MedicalRecordResponse:
        if record_type not in RECORD_TYPES:
            raise HTTPException(
                status_code=400,
                detail=f"type must be one of: {', '.join(sorted(RECORD_TYPES))}",
            )

        try:
            title = clean_text(title or "", max_length=MAX_TITLE_LENGTH)
            description = clean_text(description or "", max_length=2000) or None
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        key = await storage.store_upload(
            file,
            prefix=f"medical-records/{member.id}",
            allowed_types=ALLOWED_RECORD_TYPES,
            allowed_extensions=ALLOWED_RECORD_EXTENSIONS,
            max_size=MAX_RECORD_SIZE,
        )

        if not title:
            title = clean_text(os.path.splitext(file.filename)[0], max_length=MAX_TITLE_LENGTH)

        try:
            record = self.repo.create_record(
                self.db,
                member.id,
                title=title,
                type=record_type,
                file_key=key,
                content_type=file.content_type,
                description=description,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            storage.delete_object(key)
            logger.error(f"❌ Failed to save medical record for member {member.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to save medical record") from e

        logger.info(f"✅ Medical record {record.id} uploaded for member {member.id}")
        return to_response(record)

    def delete_record(self, member: Member, record_id: int) -> dict:
        record = self.repo.get_record(self.db, record_id, member.id)
        if not record:
            raise HTTPException(status_code=404, detail="Medical record not found")

        key = record.file_key
        self.repo.delete_record(self.db, record)
        storage.delete_object(key)
        logger.info(f"🗑️ Medical record {record_id} deleted for member {member.id}")
        return {"message": "Medical record deleted"}

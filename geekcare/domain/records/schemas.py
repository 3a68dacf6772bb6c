"""Medical record schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

RECORD_TYPES = {"document", "lab_result", "prescription", "imaging", "other"}


class MedicalRecordResponse(BaseModel):
    id: int
    member_id: str
    title: str
    type: str
    date: datetime
    file_key: str
    content_type: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None  # Presigned, short-lived

    class Config:
        from_attributes = True

"""Medical record repository - Database operations for medical records"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import MedicalRecord


class MedicalRecordRepository:
    """Repository for medical record database operations"""

    @staticmethod
    def get_records(db: Session, member_id: str) -> list[MedicalRecord]:
        return (
            db.query(MedicalRecord)
            .filter(MedicalRecord.member_id == member_id)
            .order_by(MedicalRecord.date.desc(), MedicalRecord.id.desc())
            .all()
        )

    @staticmethod
    def get_record(db: Session, record_id: int, member_id: str) -> Optional[MedicalRecord]:
        return (
            db.query(MedicalRecord)
            .filter(MedicalRecord.id == record_id, MedicalRecord.member_id == member_id)
            .first()
        )

    @staticmethod
    def create_record(db: Session, member_id: str, **record_data) -> MedicalRecord:
        record = MedicalRecord(member_id=member_id, **record_data)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def delete_record(db: Session, record: MedicalRecord) -> None:
        db.delete(record)
        db.commit()

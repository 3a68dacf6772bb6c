"""Account repository - Database operations for profile registration"""

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Member, Physician, PhysicianLanguage, PhysicianSpecialty


class AccountRepository:
    """Repository for account database operations"""

    @staticmethod
    def email_exists(db: Session, email: str) -> bool:
        """Emails are unique across members and physicians"""
        email = email.lower()
        if db.query(Physician.id).filter(func.lower(Physician.email) == email).first():
            return True
        return db.query(Member.id).filter(func.lower(Member.email) == email).first() is not None

    @staticmethod
    def uid_exists(db: Session, uid: str) -> bool:
        if db.query(Physician.id).filter(Physician.id == uid).first():
            return True
        return db.query(Member.id).filter(Member.id == uid).first() is not None

    @staticmethod
    def create_member(db: Session, **member_data) -> Member:
        member = Member(**member_data)
        db.add(member)
        db.commit()
        db.refresh(member)
        return member

    @staticmethod
    def create_physician(
        db: Session, specialties: list[str], languages: list[str], **physician_data
    ) -> Physician:
        physician = Physician(**physician_data)
        physician.specialties = [PhysicianSpecialty(specialty=s) for s in specialties]
        physician.languages = [PhysicianLanguage(language=lang) for lang in languages]
        db.add(physician)
        db.commit()
        db.refresh(physician)
        return physician

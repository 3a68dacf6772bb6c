"""Support repository - Database operations for tickets and medical queries"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import MedicalQuery, SupportTicket


class SupportRepository:
    """Repository for support database operations"""

    @staticmethod
    def create_ticket(db: Session, **ticket_data) -> SupportTicket:
        ticket = SupportTicket(**ticket_data)
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        return ticket

    @staticmethod
    def get_tickets(db: Session, user_id: str) -> list[SupportTicket]:
        return (
            db.query(SupportTicket)
            .filter(SupportTicket.user_id == user_id)
            .order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc())
            .all()
        )

    @staticmethod
    def get_ticket(db: Session, ticket_id: int, user_id: str) -> Optional[SupportTicket]:
        return (
            db.query(SupportTicket)
            .filter(SupportTicket.id == ticket_id, SupportTicket.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_query(db: Session, member_id: str, **query_data) -> MedicalQuery:
        query = MedicalQuery(member_id=member_id, **query_data)
        db.add(query)
        db.commit()
        db.refresh(query)
        return query

    @staticmethod
    def get_query(db: Session, query_id: int) -> Optional[MedicalQuery]:
        return db.query(MedicalQuery).filter(MedicalQuery.id == query_id).first()

    @staticmethod
    def get_member_queries(
        db: Session, member_id: str, status: Optional[str] = None
    ) -> list[MedicalQuery]:
        query = db.query(MedicalQuery).filter(MedicalQuery.member_id == member_id)
        if status:
            query = query.filter(MedicalQuery.status == status)
        return query.order_by(MedicalQuery.created_at.desc(), MedicalQuery.id.desc()).all()

    @staticmethod
    def get_physician_queries(
        db: Session, physician_id: str, status: str = "pending"
    ) -> list[MedicalQuery]:
        """Pending queries are shared by all physicians; answered ones belong to the responder"""
        query = db.query(MedicalQuery).filter(MedicalQuery.status == status)
        if status == "answered":
            query = query.filter(MedicalQuery.physician_id == physician_id)
        return query.order_by(MedicalQuery.created_at.desc(), MedicalQuery.id.desc()).all()

    @staticmethod
    def answer_query(
        db: Session, query_id: int, physician_id: str, response: str, answered_at
    ) -> bool:
        """Conditional write: only a pending query can be answered. False if it was not pending."""
        updated = (
            db.query(MedicalQuery)
            .filter(MedicalQuery.id == query_id, MedicalQuery.status == "pending")
            .update(
                {
                    "response": response,
                    "physician_id": physician_id,
                    "status": "answered",
                    "answered_at": answered_at,
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated == 1

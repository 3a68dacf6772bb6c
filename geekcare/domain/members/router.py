"""Member router - FastAPI endpoints for the member profile"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_member
from ...database import get_db
from ...models import Member
from .schemas import MemberDashboard, MemberProfile, MemberProfileUpdate
from .service import MemberService

router = APIRouter(prefix="/members", tags=["Members"])


def get_member_service(db: Session = Depends(get_db)) -> MemberService:
    """Dependency injection for MemberService"""
    return MemberService(db)


@router.get("/me/profile", response_model=MemberProfile)
async def get_my_profile(member: Member = Depends(get_current_member)):
    return member


@router.patch("/me/profile", response_model=MemberProfile)
async def update_my_profile(
    data: MemberProfileUpdate,
    member: Member = Depends(get_current_member),
    service: MemberService = Depends(get_member_service),
):
    return service.update_profile(member, data)


@router.get("/me/dashboard", response_model=MemberDashboard)
async def get_my_dashboard(
    member: Member = Depends(get_current_member),
    service: MemberService = Depends(get_member_service),
):
    """Next scheduled appointments and activity counts"""
    return service.get_dashboard(member)


__all__ = ["router"]

"""Physician router - FastAPI endpoints for physician search and profile"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_identity, get_current_physician
from ...database import get_db
from ...models import Physician
from .schemas import (
    PhysicianDashboard,
    PhysicianProfile,
    PhysicianProfileUpdate,
    PhysicianSummary,
)
from .service import PhysicianService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/physicians", tags=["Physicians"])


def get_physician_service(db: Session = Depends(get_db)) -> PhysicianService:
    """Dependency injection for PhysicianService"""
    return PhysicianService(db)


# ============================================================================
# OWN PROFILE & DASHBOARD
# ============================================================================


@router.get("/me/profile", response_model=PhysicianProfile)
async def get_my_profile(physician: Physician = Depends(get_current_physician)):
    return physician


@router.patch("/me/profile", response_model=PhysicianProfile)
async def update_my_profile(
    data: PhysicianProfileUpdate,
    physician: Physician = Depends(get_current_physician),
    service: PhysicianService = Depends(get_physician_service),
):
    """Update profile fields; specialties and languages replace the stored lists"""
    return service.update_profile(physician, data)


@router.get("/me/dashboard", response_model=PhysicianDashboard)
async def get_my_dashboard(
    physician: Physician = Depends(get_current_physician),
    service: PhysicianService = Depends(get_physician_service),
):
    """Upcoming week of appointments and the pending medical query queue"""
    return service.get_dashboard(physician)


# ============================================================================
# SEARCH
# ============================================================================


@router.get("", response_model=list[PhysicianSummary], dependencies=[Depends(get_current_identity)])
async def search_physicians(
    specialty: Optional[str] = Query(None),
    gender: Optional[str] = Query(None),
    language: Optional[str] = Query(None),
    min_fee: Optional[float] = Query(None, ge=0),
    max_fee: Optional[float] = Query(None, ge=0),
    name: Optional[str] = Query(None, max_length=100),
    service: PhysicianService = Depends(get_physician_service),
):
    """Search physicians by specialty, gender, language, fee range and name"""
    return service.search(
        specialty=specialty,
        gender=gender,
        language=language,
        min_fee=min_fee,
        max_fee=max_fee,
        name=name,
    )


@router.get(
    "/{physician_id}",
    response_model=PhysicianSummary,
    dependencies=[Depends(get_current_identity)],
)
async def get_physician(
    physician_id: str,
    service: PhysicianService = Depends(get_physician_service),
):
    return service.get_physician(physician_id)


__all__ = ["router"]

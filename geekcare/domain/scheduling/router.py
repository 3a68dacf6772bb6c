"""Scheduling router - FastAPI endpoints for physician schedules and availability"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_identity, get_current_physician
from ...database import get_db
from ...models import Physician
from .schemas import (
    AvailabilityResponse,
    CalendarResponse,
    OverrideRequest,
    SlotCreate,
    SlotResponse,
    SlotUpdate,
    WeeklyScheduleRequest,
)
from .service import SchedulingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedule", tags=["Schedule"])
availability_router = APIRouter(prefix="/physicians", tags=["Availability"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


# ============================================================================
# AVAILABILITY (any signed-in user)
# ============================================================================


@availability_router.get(
    "/{physician_id}/availability",
    response_model=AvailabilityResponse,
    dependencies=[Depends(get_current_identity)],
)
async def get_availability(
    physician_id: str,
    day: date = Query(..., alias="date"),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Open consultation slots for a physician on one date"""
    return service.get_availability(physician_id, day)


# ============================================================================
# SLOT MANAGEMENT
# ============================================================================


@router.get("/slots", response_model=list[SlotResponse])
async def list_slots(
    physician: Physician = Depends(get_current_physician),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.list_slots(physician)


@router.post("/slots", response_model=SlotResponse, status_code=201)
async def create_slot(
    data: SlotCreate,
    physician: Physician = Depends(get_current_physician),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Add a recurring or date-specific slot"""
    return service.create_slot(physician, data)


@router.patch("/slots/{slot_id}", response_model=SlotResponse)
async def update_slot(
    slot_id: int,
    data: SlotUpdate,
    physician: Physician = Depends(get_current_physician),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.update_slot(physician, slot_id, data)


@router.delete("/slots/{slot_id}")
async def delete_slot(
    slot_id: int,
    physician: Physician = Depends(get_current_physician),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.delete_slot(physician, slot_id)


# ============================================================================
# WEEKLY SCHEDULE & DATE OVERRIDES
# ============================================================================


@router.put("/weekly", response_model=list[SlotResponse])
async def replace_weekly_schedule(
    data: WeeklyScheduleRequest,
    physician: Physician = Depends(get_current_physician),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Replace every recurring slot with the submitted week"""
    return service.replace_weekly(physician, data)


@router.put("/overrides/{day}", response_model=list[SlotResponse])
async def set_date_override(
    day: date,
    data: OverrideRequest,
    physician: Physician = Depends(get_current_physician),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Replace the date-specific slots for one date (empty list = day off)"""
    return service.set_override(physician, day, data)


@router.delete("/overrides/{day}")
async def delete_date_override(
    day: date,
    physician: Physician = Depends(get_current_physician),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return service.delete_override(physician, day)


@router.get("/calendar", response_model=CalendarResponse)
async def get_month_calendar(
    month: str = Query(..., description="Month in YYYY-MM format"),
    physician: Physician = Depends(get_current_physician),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Per-day open slots and booking counts for one month"""
    return service.month_calendar(physician, month)


__all__ = ["router", "availability_router"]

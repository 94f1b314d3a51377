from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.apis.deps import get_db, public_access
from app.schemas.catalog.catalog_schema import ActivityOut, FacilityOut, FacilitySlotsOut
from app.services.catalog.catalog_service import (
    get_activities, get_activity_facilities, get_facility_slots
)

router = APIRouter()

@router.get("/activities/", response_model=List[ActivityOut], dependencies=[Depends(public_access)])
async def list_activities(db: AsyncSession = Depends(get_db)):
    return await get_activities(db)

@router.get("/activities/{activity_id}/facilities/", response_model=List[FacilityOut], dependencies=[Depends(public_access)])
async def list_facilities(activity_id: str, db: AsyncSession = Depends(get_db)):
    return await get_activity_facilities(db, activity_id)

@router.get("/facilities/{facility_id}/slots/", response_model=FacilitySlotsOut, dependencies=[Depends(public_access)])
async def list_slots(
    facility_id: str,
    booking_date: date = Query(..., alias="date", description="Fecha en formato YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db)
):
    """
    Horarios de una instalación para una fecha.
    Los slots ocupados por reservas confirmadas vienen con `available=false`.
    """
    return await get_facility_slots(db, facility_id, booking_date)

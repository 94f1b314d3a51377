from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import date


class ActivityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    hourly_rate: int  # paise por slot


class FacilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    activity_id: str
    name: str
    is_available: bool


class TimeSlot(BaseModel):
    label: str  # "05:00 PM"
    available: bool


class FacilitySlotsOut(BaseModel):
    facility_id: str
    date: date
    slots: List[TimeSlot]

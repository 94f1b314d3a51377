from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import date, datetime


class OrderDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    booking_date: date
    start_time: str
    end_time: str
    selected_slots: List[str]
    amount: int
    currency: str
    customer_email: str
    customer_phone: str
    activity_name: str
    facility_name: str
    status: str


class OrderDetailsResponse(BaseModel):
    success: bool
    message: str
    data: OrderDetails


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    facility_id: str
    booking_date: date
    start_time: str
    end_time: str
    total_amount: int
    customer_email: str
    customer_phone: str
    status: str
    created_at: Optional[datetime] = None


class BookingResponse(BaseModel):
    success: bool
    message: str
    data: BookingOut


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: str


class DashboardData(BaseModel):
    profile: Optional[ProfileOut] = None
    bookings: List[BookingOut]


class DashboardResponse(BaseModel):
    success: bool
    message: str
    data: DashboardData

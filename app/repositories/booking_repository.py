from datetime import date
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.booking.bookings import Booking
from app.models.catalog.facility import Facility


class BookingRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        return booking

    async def list_confirmed_for_facility(self, facility_id: str, booking_date: date) -> List[Booking]:
        result = await self.db.execute(
            select(Booking).where(
                Booking.facility_id == facility_id,
                Booking.booking_date == booking_date,
                Booking.status == "confirmed",
            )
        )
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> List[Booking]:
        result = await self.db.execute(
            select(Booking)
            .options(joinedload(Booking.facility).joinedload(Facility.activity))
            .where(Booking.user_id == user_id)
            .order_by(Booking.booking_date.desc(), Booking.created_at.desc())
        )
        return list(result.scalars().all())

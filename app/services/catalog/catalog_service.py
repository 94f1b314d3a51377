from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.booking_repository import BookingRepository
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.order_repository import OrderRepository
from app.services.bookings.exceptions import ResourceNotFound
from app.services.bookings.slot_service import SlotService


async def get_activities(db: AsyncSession):
    return await CatalogRepository(db).list_activities()


async def get_activity_facilities(db: AsyncSession, activity_id: str):
    catalog = CatalogRepository(db)
    if not await catalog.get_activity(activity_id):
        raise ResourceNotFound("Activity not found")
    return await catalog.list_facilities(activity_id)


async def get_facility_slots(db: AsyncSession, facility_id: str, booking_date: date):
    facility = await CatalogRepository(db).get_facility(facility_id)
    if not facility:
        raise ResourceNotFound("Facility not found")
    slots = await SlotService(BookingRepository(db), OrderRepository(db)).available_slots(facility, booking_date)
    return {"facility_id": facility.id, "date": booking_date, "slots": slots}

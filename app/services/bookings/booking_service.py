import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.booking.bookings import Booking
from app.models.users.profile import Profile
from app.repositories.booking_repository import BookingRepository
from app.schemas.auths.auth_schema import UserIdentity
from app.schemas.bookings.checkout_schema import CheckoutRequest
from app.services.bookings.checkout_service import validate_booking_request
from app.services.bookings.exceptions import BookingError

logger = logging.getLogger(__name__)


async def book_directly(db: AsyncSession, request: CheckoutRequest, user: UserIdentity) -> Booking:
    """Reserva sin pago en línea (se paga en el local): crea la reserva confirmada sin orden."""
    selection = await validate_booking_request(db, request)

    booking = Booking(
        user_id=user.user_id,
        facility_id=selection.facility.id,
        booking_date=selection.booking_date,
        start_time=selection.start_time,
        end_time=selection.end_time,
        total_amount=request.total_amount,
        customer_email=request.customer_email,
        customer_phone=request.customer_phone,
        status="confirmed",
    )
    try:
        await BookingRepository(db).add(booking)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"❌ Error creando la reserva directa: {str(e)}")
        raise BookingError("Failed to create booking")

    await db.refresh(booking)
    logger.info(f"✅ Reserva directa {booking.id} creada para el usuario {user.user_id}")
    return booking


async def get_user_dashboard(db: AsyncSession, user: UserIdentity) -> dict:
    result = await db.execute(select(Profile).where(Profile.user_id == user.user_id))
    profile = result.scalar_one_or_none()
    bookings = await BookingRepository(db).list_for_user(user.user_id)
    return {"profile": profile, "bookings": bookings}

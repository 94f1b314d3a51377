import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs.settings import settings
from app.models.booking.orders import Order
from app.models.catalog.facility import Facility
from app.repositories.booking_repository import BookingRepository
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.order_repository import OrderRepository
from app.schemas.auths.auth_schema import UserIdentity
from app.schemas.bookings.checkout_schema import CheckoutRequest, CheckoutResponse
from app.services.bookings.exceptions import InvalidRequest, OrderPersistenceError, SlotUnavailable
from app.services.bookings.slot_service import SlotService, format_slot, parse_slot, slot_range

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "facility_id",
    "activity_name",
    "facility_name",
    "booking_date",
    "start_time",
    "end_time",
    "selected_slots",
    "total_amount",
    "customer_email",
    "customer_phone",
)


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


@dataclass
class BookingSelection:
    """Solicitud ya validada, con los slots normalizados y los nombres del catálogo."""
    facility: Facility
    booking_date: date
    selected_slots: List[str]
    start_time: str
    end_time: str

    @property
    def activity_name(self) -> str:
        return self.facility.activity.name

    @property
    def facility_name(self) -> str:
        return self.facility.name


def _normalize_label(label: str) -> str:
    return format_slot(parse_slot(label))


async def validate_booking_request(db: AsyncSession, request: CheckoutRequest) -> BookingSelection:
    """
    Valida una solicitud de reserva antes de tocar Stripe o la base de datos.
    Los slots se normalizan ("5:00 PM" -> "05:00 PM") antes de cualquier comparación,
    y los nombres de actividad e instalación se toman del catálogo, no del cliente.
    """
    missing = [name for name in REQUIRED_FIELDS if _is_blank(getattr(request, name))]
    if missing:
        logger.warning(f"Solicitud de reserva incompleta, faltan: {missing}")
        raise InvalidRequest(f"Missing required booking information: {', '.join(missing)}")

    if request.total_amount <= 0:
        raise InvalidRequest("Total amount must be a positive amount in paise")
    if "@" not in request.customer_email:
        raise InvalidRequest("Invalid email address")

    selected_slots = [_normalize_label(label) for label in request.selected_slots]
    if len(set(selected_slots)) != len(selected_slots):
        raise InvalidRequest("Duplicate time slots selected")

    try:
        booking_date = date.fromisoformat(request.booking_date)
    except ValueError:
        raise InvalidRequest("Booking date must use the YYYY-MM-DD format")
    if booking_date < date.today():
        raise InvalidRequest("Cannot book a date in the past")

    start_time, end_time = slot_range(selected_slots)
    if (_normalize_label(request.start_time), _normalize_label(request.end_time)) != (start_time, end_time):
        raise InvalidRequest(f"Start and end time must be {start_time} - {end_time}")

    facility = await CatalogRepository(db).get_facility(request.facility_id)
    if not facility:
        raise InvalidRequest("Unknown facility")
    if not facility.is_available:
        raise SlotUnavailable("This facility is not available for booking")

    if (request.activity_name.strip(), request.facility_name.strip()) != (facility.activity.name, facility.name):
        logger.warning(
            f"Nombres del cliente ignorados para {facility.id}: "
            f"{request.activity_name!r} / {request.facility_name!r}"
        )

    expected_amount = len(selected_slots) * facility.activity.hourly_rate
    if request.total_amount != expected_amount:
        logger.warning(
            f"Monto inconsistente para {facility.id}: recibido {request.total_amount}, esperado {expected_amount}"
        )
        raise InvalidRequest("Total amount does not match the selected slots")

    await SlotService(BookingRepository(db), OrderRepository(db)).ensure_available(
        facility, booking_date, selected_slots
    )
    return BookingSelection(facility, booking_date, selected_slots, start_time, end_time)


class CheckoutService:

    def __init__(self, db: AsyncSession, gateway):
        self.db = db
        self.gateway = gateway
        self.orders = OrderRepository(db)

    async def create_checkout(
        self, request: CheckoutRequest, user: Optional[UserIdentity] = None
    ) -> CheckoutResponse:
        selection = await validate_booking_request(self.db, request)
        facility = selection.facility
        user_id = user.user_id if user else None

        logger.info(
            f"Creando checkout: {selection.activity_name} / {selection.facility_name}, "
            f"{request.total_amount} {settings.CURRENCY}, {request.customer_email}"
        )

        # 1. Reutilizar el cliente de Stripe si ya existe
        customer_id = await self.gateway.find_customer_by_email(request.customer_email)

        # 2. Sesión de pago; si falla no se escribe ninguna orden
        line_item = {
            "price_data": {
                "currency": settings.CURRENCY,
                "product_data": {
                    "name": f"{selection.activity_name} - {selection.facility_name}",
                    "description": (
                        f"Gaming session on {selection.booking_date.isoformat()} "
                        f"from {selection.start_time} to {selection.end_time}"
                    ),
                },
                "unit_amount": request.total_amount,
            },
            "quantity": 1,
        }
        session = await self.gateway.create_checkout_session(
            customer_id=customer_id,
            customer_email=request.customer_email,
            line_item=line_item,
            success_url=f"{settings.FRONTEND_URL}/booking-success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{settings.FRONTEND_URL}/booking",
            metadata={
                "facility_id": facility.id,
                "booking_date": selection.booking_date.isoformat(),
                "start_time": selection.start_time,
                "end_time": selection.end_time,
                "customer_email": request.customer_email,
                "customer_phone": request.customer_phone,
                "user_id": user_id or "guest",
            },
        )
        logger.info(f"Sesión de Stripe creada: {session.id}")

        # 3. Orden pendiente con todo lo necesario para crear la reserva después
        order = Order(
            user_id=user_id,
            facility_id=facility.id,
            payment_session_id=session.id,
            booking_date=selection.booking_date,
            start_time=selection.start_time,
            end_time=selection.end_time,
            selected_slots=selection.selected_slots,
            amount=request.total_amount,
            currency=settings.CURRENCY,
            customer_email=request.customer_email,
            customer_phone=request.customer_phone,
            activity_name=selection.activity_name,
            facility_name=selection.facility_name,
            status="pending",
        )
        try:
            await self.orders.add(order)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            # TODO: barrido periódico de sesiones de Stripe sin orden asociada
            logger.error(f"❌ Error guardando la orden, sesión de Stripe huérfana {session.id}: {str(e)}")
            raise OrderPersistenceError()

        logger.info(f"✅ Orden {order.id} creada para la sesión {session.id}")
        return CheckoutResponse(url=session.url, session_id=session.id, order_id=order.id)

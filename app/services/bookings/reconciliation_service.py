import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs.settings import settings
from app.models.booking.bookings import Booking
from app.models.booking.orders import Order
from app.repositories.booking_repository import BookingRepository
from app.repositories.order_repository import OrderRepository
from app.services.bookings.exceptions import (
    OrderNotFound,
    OrderPersistenceError,
    PaymentNotCompleted,
    SlotUnavailable,
)
from app.services.bookings.slot_service import SlotService

logger = logging.getLogger(__name__)

PAID_STATUSES = {"paid", "no_payment_required"}
CONFLICT_MESSAGE = "The selected slots were booked by someone else. Please contact support for a refund."


class ReconciliationService:
    """
    Convierte una orden pagada en una reserva confirmada exactamente una vez.

    La transición pending -> paid se aplica con un UPDATE condicionado; solo la
    petición que afecta la fila crea la reserva, dentro de la misma transacción.
    Recargas de la página de éxito o reintentos del webhook no duplican reservas.
    Si otra reserva confirmada ya ocupa los slots, la orden pasa a conflict y no
    se crea ninguna reserva.
    """

    def __init__(self, db: AsyncSession, gateway=None, verify_payment: bool = None):
        self.db = db
        self.gateway = gateway
        self.verify_payment = settings.VERIFY_PAYMENT_STATUS if verify_payment is None else verify_payment
        self.orders = OrderRepository(db)
        self.bookings = BookingRepository(db)
        self.slots = SlotService(self.bookings)

    async def reconcile(self, payment_session_id: str, payment_status: Optional[str] = None) -> Order:
        order = await self.orders.get_by_session_id(payment_session_id)
        if not order:
            logger.warning(f"Orden no encontrada para la sesión {payment_session_id}")
            raise OrderNotFound()

        if order.status == "paid":
            logger.info(f"Orden {order.id} ya conciliada, se omite la creación de la reserva")
            return order
        if order.status == "conflict":
            raise SlotUnavailable(CONFLICT_MESSAGE)

        await self._ensure_paid(payment_session_id, payment_status)

        try:
            taken = await self.slots.booked_slots(order.facility_id, order.booking_date, order.selected_slots)
            if taken:
                confirmed = False
                flagged = await self.orders.mark_conflict_if_pending(payment_session_id)
                await self.db.commit()
                if flagged:
                    # pagada pero sin reserva: requiere reembolso manual
                    logger.error(
                        f"❌ Orden {order.id} pagada con slots ya reservados ({', '.join(taken)}), "
                        f"sesión {payment_session_id}"
                    )
                    raise SlotUnavailable(CONFLICT_MESSAGE)
            else:
                confirmed = await self.orders.mark_paid_if_pending(payment_session_id)
                if confirmed:
                    await self.bookings.add(Booking(
                        user_id=order.user_id,
                        facility_id=order.facility_id,
                        booking_date=order.booking_date,
                        start_time=order.start_time,
                        end_time=order.end_time,
                        total_amount=order.amount,
                        customer_email=order.customer_email,
                        customer_phone=order.customer_phone,
                        status="confirmed",
                    ))
                await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"❌ Error conciliando la orden {order.id}: {str(e)}")
            raise OrderPersistenceError("Could not confirm your booking, please retry")

        if confirmed:
            logger.info(f"✅ Reserva confirmada para la orden {order.id}")
        else:
            logger.info(f"Orden {order.id} conciliada por otra petición concurrente")

        await self.db.refresh(order)
        return order

    async def _ensure_paid(self, payment_session_id: str, payment_status: Optional[str]) -> None:
        if payment_status is None:
            if not self.verify_payment or self.gateway is None:
                return
            payment_status = await self.gateway.get_payment_status(payment_session_id)
        if payment_status not in PAID_STATUSES:
            logger.warning(f"Sesión {payment_session_id} sin pago completado ({payment_status})")
            raise PaymentNotCompleted()

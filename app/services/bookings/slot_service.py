"""
Rejilla de horarios por instalación y fecha.

Los slots se identifican por su etiqueta en formato 12 h ("05:00 PM"). Un slot no
está disponible si la instalación está fuera de servicio, si está bloqueado por
configuración, o si lo cubre una reserva confirmada o una orden pendiente reciente
de esa instalación y fecha.
"""

from datetime import UTC, date, datetime, time, timedelta
from typing import Iterable, List, Optional, Set, Tuple

from app.configs.settings import settings
from app.models.booking.orders import Order
from app.models.catalog.facility import Facility
from app.repositories.booking_repository import BookingRepository
from app.repositories.order_repository import OrderRepository
from app.schemas.catalog.catalog_schema import TimeSlot
from app.services.bookings.exceptions import InvalidRequest, SlotUnavailable

SLOT_FORMAT = "%I:%M %p"


def parse_slot(label: str) -> time:
    try:
        return datetime.strptime(label.strip(), SLOT_FORMAT).time()
    except (AttributeError, ValueError):
        raise InvalidRequest(f"Invalid time slot: {label!r}")


def format_slot(value: time) -> str:
    return value.strftime(SLOT_FORMAT)


def build_day_grid(
    opening: str = None,
    closing: str = None,
    slot_minutes: int = None,
) -> List[time]:
    opening_time = parse_slot(opening or settings.SLOT_OPENING_TIME)
    closing_time = parse_slot(closing or settings.SLOT_CLOSING_TIME)
    step = timedelta(minutes=slot_minutes or settings.SLOT_MINUTES)

    current = datetime.combine(date.min, opening_time)
    end = datetime.combine(date.min, closing_time)
    grid = []
    while current < end:
        grid.append(current.time())
        current += step
    return grid


def slot_range(labels: Iterable[str], slot_minutes: int = None) -> Tuple[str, str]:
    """
    Devuelve (inicio, fin) de una selección: el primer slot en orden cronológico
    y la hora en que termina el último.
    """
    times = sorted(parse_slot(label) for label in labels)
    if not times:
        raise InvalidRequest("At least one time slot must be selected")
    step = timedelta(minutes=slot_minutes or settings.SLOT_MINUTES)
    last_end = (datetime.combine(date.min, times[-1]) + step).time()
    return format_slot(times[0]), format_slot(last_end)


def is_covered(slot: time, start_label: str, end_label: str) -> bool:
    start = parse_slot(start_label)
    end = parse_slot(end_label)
    if end <= start:
        # la reserva termina a medianoche o después
        return slot >= start
    return start <= slot < end


def is_hold_active(order: Order, now: datetime = None) -> bool:
    """Una orden pendiente retiene sus slots durante PENDING_HOLD_MINUTES desde su creación."""
    created = order.created_at
    if created is None:
        return True
    if created.tzinfo is None:
        # SQLite devuelve CURRENT_TIMESTAMP en UTC sin zona
        created = created.replace(tzinfo=UTC)
    now = now or datetime.now(UTC)
    return now - created < timedelta(minutes=settings.PENDING_HOLD_MINUTES)


class SlotService:

    def __init__(self, bookings: BookingRepository, orders: Optional[OrderRepository] = None):
        self.bookings = bookings
        self.orders = orders

    async def _taken_ranges(self, facility_id: str, booking_date: date) -> List[Tuple[str, str]]:
        existing = await self.bookings.list_confirmed_for_facility(facility_id, booking_date)
        ranges = [(b.start_time, b.end_time) for b in existing]
        if self.orders is not None:
            pending = await self.orders.list_pending_for_facility(facility_id, booking_date)
            ranges += [(o.start_time, o.end_time) for o in pending if is_hold_active(o)]
        return ranges

    async def available_slots(self, facility: Facility, booking_date: date) -> List[TimeSlot]:
        grid = build_day_grid()
        blocked: Set[time] = {parse_slot(label) for label in settings.UNAVAILABLE_SLOTS}
        taken = await self._taken_ranges(facility.id, booking_date)

        slots = []
        for slot in grid:
            available = (
                bool(facility.is_available)
                and slot not in blocked
                and not any(is_covered(slot, start, end) for start, end in taken)
            )
            slots.append(TimeSlot(label=format_slot(slot), available=available))
        return slots

    async def ensure_available(self, facility: Facility, booking_date: date, labels: Iterable[str]) -> None:
        wanted = {format_slot(parse_slot(label)) for label in labels}
        slots = await self.available_slots(facility, booking_date)
        open_labels = {slot.label for slot in slots if slot.available}
        taken = sorted(wanted - open_labels, key=parse_slot)
        if taken:
            raise SlotUnavailable(f"Slots no longer available: {', '.join(taken)}")

    async def booked_slots(self, facility_id: str, booking_date: date, labels: Iterable[str]) -> List[str]:
        """Slots de `labels` que ya cubre una reserva confirmada (sin contar órdenes pendientes)."""
        existing = await self.bookings.list_confirmed_for_facility(facility_id, booking_date)
        return [
            label for label in labels
            if any(is_covered(parse_slot(label), b.start_time, b.end_time) for b in existing)
        ]

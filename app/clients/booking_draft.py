"""
Borrador de reserva: el asistente de cuatro pasos del frontend
(Actividad -> Instalación -> Horarios -> Contacto y pago) como máquina de estados.

Cada transición valida el estado actual; si no es válida se lanza un error y el
borrador queda igual. Volver atrás nunca descarta lo ya seleccionado, y un envío
fallido deja el borrador listo para reintentar.
"""

import logging
from datetime import date
from enum import Enum
from typing import Callable, List, Optional

from app.clients.booking_api_client import BookingApiClient, BookingApiError
from app.clients.notifier import LoggingNotifier, Notifier
from app.schemas.bookings.checkout_schema import CheckoutResponse
from app.schemas.catalog.catalog_schema import ActivityOut, FacilityOut, TimeSlot
from app.services.bookings.slot_service import slot_range

logger = logging.getLogger(__name__)


class DraftStep(str, Enum):
    CHOOSING_ACTIVITY = "choosing_activity"
    CHOOSING_FACILITY = "choosing_facility"
    CHOOSING_SLOTS = "choosing_slots"
    ENTERING_CONTACT = "entering_contact"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


PREVIOUS_STEP = {
    DraftStep.CHOOSING_FACILITY: DraftStep.CHOOSING_ACTIVITY,
    DraftStep.CHOOSING_SLOTS: DraftStep.CHOOSING_FACILITY,
    DraftStep.ENTERING_CONTACT: DraftStep.CHOOSING_SLOTS,
    DraftStep.FAILED: DraftStep.ENTERING_CONTACT,
}


class DraftError(Exception):
    pass


class DraftTransitionError(DraftError):
    """La acción no está permitida en el paso actual."""


class InvalidDraft(DraftError):
    """Datos no válidos para el paso actual (corregibles por el usuario)."""


class BookingDraft:

    def __init__(
        self,
        api: BookingApiClient,
        notifier: Optional[Notifier] = None,
        today: Callable[[], date] = date.today,
    ):
        self.api = api
        self.notifier = notifier or LoggingNotifier()
        self.today = today

        self.step = DraftStep.CHOOSING_ACTIVITY
        self.activity: Optional[ActivityOut] = None
        self.facility: Optional[FacilityOut] = None
        self.date: Optional[date] = None
        self.selected_slots: List[str] = []
        self.customer_email = ""
        self.customer_phone = ""

        self.facilities: List[FacilityOut] = []
        self.slots: List[TimeSlot] = []
        self.checkout: Optional[CheckoutResponse] = None
        self.error: Optional[str] = None

    @property
    def total_amount(self) -> int:
        if not self.activity:
            return 0
        return len(self.selected_slots) * self.activity.hourly_rate

    def _require(self, *steps: DraftStep) -> None:
        if self.step not in steps:
            raise DraftTransitionError(
                f"Cannot do that while {self.step.value}"
            )

    async def select_activity(self, activity: ActivityOut) -> bool:
        self._require(DraftStep.CHOOSING_ACTIVITY)
        try:
            facilities = await self.api.list_facilities(activity.id)
        except BookingApiError as e:
            self.notifier.notify("Error", "Failed to load facilities", variant="destructive")
            logger.warning(f"No se pudieron cargar las instalaciones de {activity.id}: {e.message}")
            return False

        if self.activity is None or self.activity.id != activity.id:
            self.facility = None
            self.date = None
            self.slots = []
            self.selected_slots = []
        self.activity = activity
        self.facilities = facilities
        self.step = DraftStep.CHOOSING_FACILITY
        return True

    def select_facility(self, facility: FacilityOut) -> None:
        self._require(DraftStep.CHOOSING_FACILITY)
        if not facility.is_available:
            raise InvalidDraft(f"{facility.name} is not available")
        if facility.activity_id != self.activity.id:
            raise InvalidDraft(f"{facility.name} does not offer {self.activity.name}")

        if self.facility is None or self.facility.id != facility.id:
            self.date = None
            self.slots = []
            self.selected_slots = []
        self.facility = facility
        self.step = DraftStep.CHOOSING_SLOTS

    async def select_date(self, booking_date: date) -> bool:
        self._require(DraftStep.CHOOSING_SLOTS)
        if booking_date < self.today():
            raise InvalidDraft("Cannot book a date in the past")
        try:
            slots = await self.api.get_slots(self.facility.id, booking_date)
        except BookingApiError as e:
            self.notifier.notify("Error", "Failed to load time slots", variant="destructive")
            logger.warning(f"No se pudieron cargar los horarios de {self.facility.id}: {e.message}")
            return False

        if booking_date != self.date:
            self.selected_slots = []
        self.date = booking_date
        self.slots = slots
        return True

    def toggle_slot(self, label: str) -> List[str]:
        self._require(DraftStep.CHOOSING_SLOTS)
        if self.date is None:
            raise InvalidDraft("Pick a date first")

        if label in self.selected_slots:
            self.selected_slots = [slot for slot in self.selected_slots if slot != label]
            return self.selected_slots

        slot = next((s for s in self.slots if s.label == label), None)
        if slot is None or not slot.available:
            raise InvalidDraft(f"{label} is not available")
        self.selected_slots = self.selected_slots + [label]
        return self.selected_slots

    def confirm_slots(self) -> None:
        self._require(DraftStep.CHOOSING_SLOTS)
        if self.date is None or not self.selected_slots:
            raise InvalidDraft("Select at least one time slot")
        self.step = DraftStep.ENTERING_CONTACT

    def back(self) -> DraftStep:
        if self.step in (DraftStep.SUBMITTING, DraftStep.SUCCEEDED):
            raise DraftTransitionError(f"Cannot go back while {self.step.value}")
        self.step = PREVIOUS_STEP.get(self.step, self.step)
        return self.step

    def to_checkout_request(self) -> dict:
        start_time, end_time = slot_range(self.selected_slots)
        return {
            "facilityId": self.facility.id,
            "activityName": self.activity.name,
            "facilityName": self.facility.name,
            "bookingDate": self.date.isoformat(),
            "startTime": start_time,
            "endTime": end_time,
            "selectedSlots": list(self.selected_slots),
            "totalAmount": self.total_amount,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
        }

    async def submit(self, email: str, phone: str) -> Optional[CheckoutResponse]:
        self._require(DraftStep.ENTERING_CONTACT, DraftStep.FAILED)
        email = (email or "").strip()
        phone = (phone or "").strip()
        if not email or "@" not in email:
            raise InvalidDraft("Please enter a valid email address")
        if not phone:
            raise InvalidDraft("Please enter a phone number")

        self.customer_email = email
        self.customer_phone = phone
        self.error = None
        self.step = DraftStep.SUBMITTING

        try:
            self.checkout = await self.api.create_checkout(self.to_checkout_request())
        except BookingApiError as e:
            self.error = e.message
            self.step = DraftStep.FAILED
            self.notifier.notify("Payment Error", e.message, variant="destructive")
            return None

        self.step = DraftStep.SUCCEEDED
        self.notifier.notify("Redirecting to payment", "Complete your payment to confirm the booking.")
        return self.checkout

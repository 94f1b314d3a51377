from datetime import date
from typing import List, Optional

import httpx

from app.schemas.bookings.booking_schema import OrderDetails
from app.schemas.bookings.checkout_schema import CheckoutResponse
from app.schemas.catalog.catalog_schema import ActivityOut, FacilityOut, TimeSlot


class BookingApiError(Exception):

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BookingApiClient:
    """Cliente HTTP de la API de reservas, usado por el borrador de reserva."""

    def __init__(self, client: httpx.AsyncClient, token: Optional[str] = None):
        self.client = client
        self.headers = {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(self, method: str, path: str, **kwargs):
        try:
            response = await self.client.request(method, path, headers=self.headers, **kwargs)
        except httpx.HTTPError as e:
            raise BookingApiError(f"Network error: {str(e)}")

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") or body.get("detail") or "Unexpected error"
            raise BookingApiError(str(message), response.status_code)
        return response.json()

    async def list_activities(self) -> List[ActivityOut]:
        data = await self._request("GET", "/api/activities/")
        return [ActivityOut.model_validate(item) for item in data]

    async def list_facilities(self, activity_id: str) -> List[FacilityOut]:
        data = await self._request("GET", f"/api/activities/{activity_id}/facilities/")
        return [FacilityOut.model_validate(item) for item in data]

    async def get_slots(self, facility_id: str, booking_date: date) -> List[TimeSlot]:
        data = await self._request(
            "GET", f"/api/facilities/{facility_id}/slots/",
            params={"date": booking_date.isoformat()}
        )
        return [TimeSlot.model_validate(item) for item in data["slots"]]

    async def create_checkout(self, payload: dict) -> CheckoutResponse:
        data = await self._request("POST", "/api/payments/create-payment/", json=payload)
        return CheckoutResponse.model_validate(data)

    async def confirm_payment(self, session_id: str) -> OrderDetails:
        data = await self._request("GET", "/api/bookings/success/", params={"session_id": session_id})
        return OrderDetails.model_validate(data["data"])

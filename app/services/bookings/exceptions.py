from fastapi import Request, status
from fastapi.responses import JSONResponse


class BookingError(Exception):
    """Error del flujo de reserva/pago; se devuelve al cliente como `{"error": message}`."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An internal error occurred. Please try again later."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required booking information"


class ResourceNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class SlotUnavailable(BookingError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "One or more selected slots are no longer available"


class PaymentProviderError(BookingError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Payment provider is unavailable, please try again"


class PaymentNotCompleted(BookingError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "Payment has not been completed yet"


class OrderPersistenceError(BookingError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Could not save your order, please try again"


class OrderNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = (
        "Booking not found. Please contact support if you completed a payment."
    )


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

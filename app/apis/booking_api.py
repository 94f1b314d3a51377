from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.apis.deps import auth_required, get_db, get_payment_gateway
from app.schemas.auths.auth_schema import UserIdentity
from app.schemas.bookings.booking_schema import (
    BookingOut, BookingResponse, DashboardData, DashboardResponse,
    OrderDetails, OrderDetailsResponse, ProfileOut
)
from app.schemas.bookings.checkout_schema import CheckoutRequest
from app.services.bookings.booking_service import book_directly, get_user_dashboard
from app.services.bookings.reconciliation_service import ReconciliationService

router = APIRouter()

@router.get("/success/", response_model=OrderDetailsResponse)
async def booking_success(
    session_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    gateway = Depends(get_payment_gateway)
):
    """
    Página de éxito del pago: recibe `session_id` de Stripe y confirma la reserva.
    Se puede llamar varias veces (recargas) sin crear reservas duplicadas.
    """
    if not session_id:
        return JSONResponse(status_code=400, content={"error": "No payment session found"})

    order = await ReconciliationService(db, gateway).reconcile(session_id)
    return {
        "success": True,
        "message": "Booking confirmed",
        "data": OrderDetails.model_validate(order)
    }

@router.post("/direct/", response_model=BookingResponse)
async def create_direct_booking(
    request: CheckoutRequest,
    db: AsyncSession = Depends(get_db),
    user: UserIdentity = Depends(auth_required)
):
    booking = await book_directly(db, request, user)
    return {
        "success": True,
        "message": "Your gaming session has been booked successfully.",
        "data": BookingOut.model_validate(booking)
    }

@router.get("/mine/", response_model=DashboardResponse)
async def my_bookings(
    db: AsyncSession = Depends(get_db),
    user: UserIdentity = Depends(auth_required)
):
    data = await get_user_dashboard(db, user)
    profile = data["profile"]
    return {
        "success": True,
        "message": "Bookings retrieved successfully",
        "data": DashboardData(
            profile=ProfileOut.model_validate(profile) if profile else None,
            bookings=[BookingOut.model_validate(booking) for booking in data["bookings"]]
        )
    }

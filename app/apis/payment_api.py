import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.apis.deps import current_user, get_db, get_payment_gateway
from app.schemas.auths.auth_schema import UserIdentity
from app.schemas.bookings.checkout_schema import CheckoutRequest, CheckoutResponse
from app.services.bookings.checkout_service import CheckoutService
from app.services.bookings.exceptions import OrderNotFound, PaymentNotCompleted, SlotUnavailable
from app.services.bookings.reconciliation_service import ReconciliationService

logger = logging.getLogger(__name__)

router = APIRouter()

COMPLETED_EVENTS = {"checkout.session.completed", "checkout.session.async_payment_succeeded"}

@router.post("/create-payment/", response_model=CheckoutResponse)
async def create_payment(
    request: CheckoutRequest,
    db: AsyncSession = Depends(get_db),
    gateway = Depends(get_payment_gateway),
    user: Optional[UserIdentity] = Depends(current_user)
):
    return await CheckoutService(db, gateway).create_checkout(request, user)

@router.post("/webhook/")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    gateway = Depends(get_payment_gateway)
):
    """
    Webhook de Stripe: concilia la orden cuando el checkout se completa.
    Los reintentos de Stripe llegan aquí también; la conciliación es idempotente.
    """
    payload = await request.body()
    event = gateway.parse_webhook(payload, stripe_signature or "")

    if event["type"] not in COMPLETED_EVENTS:
        return {"received": True}

    session = event["data"]["object"]
    try:
        await ReconciliationService(db, gateway).reconcile(
            session["id"], payment_status=session.get("payment_status")
        )
    except OrderNotFound:
        logger.warning(f"Webhook para una sesión sin orden: {session['id']}")
    except PaymentNotCompleted:
        # pago asíncrono en curso; llegará checkout.session.async_payment_succeeded
        logger.info(f"Webhook con pago pendiente para la sesión {session['id']}")
    except SlotUnavailable:
        logger.error(f"Webhook para una orden en conflicto: {session['id']}")
    return {"received": True}

import logging
from dataclasses import dataclass
from typing import Optional

from app.external.stripe_config import stripe, stripe_config
from app.services.bookings.exceptions import InvalidRequest, PaymentProviderError

logger = logging.getLogger(__name__)


@dataclass
class CheckoutSession:
    id: str
    url: str


class StripePaymentGateway:
    """Contrato mínimo con Stripe usado por el checkout y la conciliación."""

    async def find_customer_by_email(self, email: str) -> Optional[str]:
        try:
            customers = stripe.Customer.list(email=email, limit=1)
        except stripe.StripeError as e:
            logger.error(f"❌ Error buscando cliente de Stripe para {email}: {str(e)}")
            raise PaymentProviderError()
        if customers.data:
            logger.info(f"Cliente de Stripe existente: {customers.data[0].id}")
            return customers.data[0].id
        return None

    async def create_checkout_session(
        self,
        customer_id: Optional[str],
        customer_email: str,
        line_item: dict,
        success_url: str,
        cancel_url: str,
        metadata: dict,
    ) -> CheckoutSession:
        session_data = {
            "line_items": [line_item],
            "mode": "payment",
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
        }
        if customer_id:
            session_data["customer"] = customer_id
        else:
            session_data["customer_email"] = customer_email

        try:
            session = stripe.checkout.Session.create(**session_data)
        except stripe.StripeError as e:
            logger.error(f"❌ Error creando sesión de checkout: {str(e)}")
            raise PaymentProviderError()
        return CheckoutSession(id=session.id, url=session.url)

    async def get_payment_status(self, session_id: str) -> str:
        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.StripeError as e:
            logger.error(f"❌ Error consultando la sesión {session_id}: {str(e)}")
            raise PaymentProviderError()
        return session.payment_status

    def parse_webhook(self, payload: bytes, signature: str) -> dict:
        try:
            event = stripe.Webhook.construct_event(
                payload, signature, stripe_config.webhook_secret
            )
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Webhook de Stripe rechazado: {str(e)}")
            raise InvalidRequest("Invalid webhook signature")
        return event

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

"""
Se carga automáticamente desde el archivo `.env` o las variables de entorno del sistema.
    - Base de datos, clave para verificar los tokens del proveedor de identidad.
    - Credenciales de Stripe y URL del frontend para las redirecciones del checkout.
    - Rejilla de horarios (apertura, cierre y duración de cada slot).
    - Minutos que una orden pendiente retiene sus slots mientras el cliente paga.
"""
class Settings(BaseSettings):
    SQLALCHEMY_DATABASE_URI: str = "sqlite+aiosqlite:///./gamezone.db"
    SECRET_KEY: str = "change-me"

    STRIPE_SECRET_KEY: str = ""
    STRIPE_PUBLIC_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    CURRENCY: str = "inr"
    FRONTEND_URL: str = "http://localhost:8080"
    VERIFY_PAYMENT_STATUS: bool = True

    SLOT_OPENING_TIME: str = "04:30 PM"
    SLOT_CLOSING_TIME: str = "08:30 PM"
    SLOT_MINUTES: int = 30
    PENDING_HOLD_MINUTES: int = 30
    UNAVAILABLE_SLOTS: List[str] = []

    SEED_CATALOG: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()

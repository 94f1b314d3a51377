"""
Este bloque define la configuración de inicio (lifespan) y creación de la aplicación FastAPI.
Incluye tareas que deben ejecutarse al arrancar la aplicación, como la creación de tablas y datos iniciales.
"""

import logging

from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware

from app.configs.settings import settings
from app.cores.db import Base, engine

from app.models.catalog.activity import Activity
from app.models.catalog.facility import Facility
from app.models.booking.bookings import Booking
from app.models.booking.orders import Order
from app.models.users.profile import Profile

from app.scripts.databases.create_catalog import create_catalog

from app.services.bookings.exceptions import BookingError, booking_error_handler

from app.apis.catalog_api import router as catalog_router
from app.apis.payment_api import router as payment_router
from app.apis.booking_api import router as booking_router

logging.basicConfig(level=logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Función que se ejecuta al iniciar la aplicación.
    - Crea todas las tablas en la base de datos si no existen.
    - Inserta el catálogo de ejemplo (actividades e instalaciones) si está vacío.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    if settings.SEED_CATALOG:
        await create_catalog()

    yield

"""
    Función que construye y retorna la instancia principal de la aplicación FastAPI.
    - Aplica la función `lifespan` para la inicialización.
    - CORS abierto: el checkout se llama desde el frontend en cualquier origen.
    - Los errores del flujo de reserva se devuelven como `{"error": ...}`.
"""


def create_app() -> FastAPI:
    app = FastAPI(
        title="GameZone",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type", "stripe-signature"],
    )

    app.add_exception_handler(BookingError, booking_error_handler)

    app.include_router(catalog_router, prefix="/api", tags=["Catalog"])
    app.include_router(payment_router, prefix="/api/payments", tags=["Payments"])
    app.include_router(booking_router, prefix="/api/bookings", tags=["Bookings"])

    return app

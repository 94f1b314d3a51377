"""
Motor async de SQLAlchemy y fábrica de sesiones.
SQLite (aiosqlite) en desarrollo y pruebas; cualquier URL async soportada en producción.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from app.configs.settings import settings


def build_engine(url: str = None):
    url = url or settings.SQLALCHEMY_DATABASE_URI
    options = {}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if url.endswith(":memory:"):
            # una única conexión compartida, si no cada sesión vería una base vacía
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True
    return create_async_engine(url, echo=False, **options)


def build_session_factory(bind) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False
    )


engine = build_engine()
async_session = build_session_factory(engine)

Base = declarative_base()

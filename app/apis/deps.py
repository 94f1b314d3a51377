from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends, HTTPException, Header

from app.cores.db import async_session
from app.cores.token import verify_token
from app.external.payment_gateway import StripePaymentGateway
from app.schemas.auths.auth_schema import UserIdentity

"""
Este archivo define la función `get_db`, que proporciona una sesión de base de datos asincrónica.
Se usa como dependencia en rutas de FastAPI para interactuar con la base de datos sin preocuparse
por abrir o cerrar la conexión manualmente.
"""
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    session = async_session()
    try:
        yield session
    finally:
        await session.close()


def get_payment_gateway() -> StripePaymentGateway:
    return StripePaymentGateway()


async def public_access():
    pass


async def current_user(authorization: Optional[str] = Header(None)) -> Optional[UserIdentity]:
    """Identidad del usuario si envía un token; None para invitados."""
    if not authorization:
        return None

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid token format")
    if scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid token format")

    payload = verify_token(token)
    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(status_code=403, detail="Invalid data in token")
    return UserIdentity(user_id=str(user_id), email=payload.get("email"))


async def auth_required(user: Optional[UserIdentity] = Depends(current_user)) -> UserIdentity:
    if user is None:
        raise HTTPException(status_code=401, detail="Token not provided")
    return user

from datetime import datetime, timedelta, UTC
from fastapi import HTTPException
from jose import JWTError, jwt

from app.configs.settings import settings


SECRET_KEY = settings.SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24


"""
Genera un token JWT con los datos de identidad (`user_id`, `email`).
    - Lo emite el proveedor de identidad; aquí se usa en scripts y pruebas.
    - El token incluye "exp" para validar su vigencia.
"""
def create_access_token(data: dict):
    to_encode = data.copy()
    expire = datetime.now(UTC) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"type": "access", "exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str):
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

from pydantic import BaseModel
from typing import Optional


class UserIdentity(BaseModel):
    """Identidad entregada por el proveedor de autenticación (claims del JWT)."""
    user_id: str
    email: Optional[str] = None

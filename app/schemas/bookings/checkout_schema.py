from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class CheckoutRequest(BaseModel):
    """
    Cuerpo enviado por el frontend al confirmar la reserva.
    Todos los campos son opcionales a nivel de esquema: la validación de negocio
    responde con `{"error": ...}` en lugar del 422 de FastAPI.
    """
    model_config = ConfigDict(populate_by_name=True)

    facility_id: Optional[str] = Field(None, alias="facilityId")
    activity_name: Optional[str] = Field(None, alias="activityName")
    facility_name: Optional[str] = Field(None, alias="facilityName")
    booking_date: Optional[str] = Field(None, alias="bookingDate")  # YYYY-MM-DD
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    selected_slots: Optional[List[str]] = Field(None, alias="selectedSlots")
    total_amount: Optional[int] = Field(None, alias="totalAmount")  # paise
    customer_email: Optional[str] = Field(None, alias="customerEmail")
    customer_phone: Optional[str] = Field(None, alias="customerPhone")


class CheckoutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    session_id: str = Field(alias="sessionId")
    order_id: str = Field(alias="orderId")

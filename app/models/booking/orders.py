import uuid

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.cores.db import Base


class Order(Base):
    """
    Intención de pago: relaciona la sesión de checkout de Stripe con los datos
    de la reserva que se confirmará cuando el pago se complete.
    """
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=True, index=True)
    facility_id = Column(String(36), ForeignKey("facilities.id"), nullable=False)
    payment_session_id = Column(String(255), nullable=False, unique=True, index=True)
    booking_date = Column(Date, nullable=False)
    start_time = Column(String(8), nullable=False)
    end_time = Column(String(8), nullable=False)
    selected_slots = Column(JSON, nullable=False)
    amount = Column(Integer, nullable=False)  # en paise
    currency = Column(String(3), nullable=False, default="inr")
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(30), nullable=False)
    activity_name = Column(String(100), nullable=False)
    facility_name = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, paid, conflict
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    facility = relationship("Facility", backref="orders")

    def __repr__(self):
        return f"<Order(id={self.id}, payment_session_id={self.payment_session_id}, status={self.status})>"

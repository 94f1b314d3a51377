from datetime import date
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.booking.orders import Order


class OrderRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, order: Order) -> Order:
        self.db.add(order)
        await self.db.flush()
        return order

    async def get_by_session_id(self, payment_session_id: str) -> Optional[Order]:
        result = await self.db.execute(
            select(Order).where(Order.payment_session_id == payment_session_id)
        )
        return result.scalar_one_or_none()

    async def list_pending_for_facility(self, facility_id: str, booking_date: date) -> List[Order]:
        result = await self.db.execute(
            select(Order)
            .where(
                Order.facility_id == facility_id,
                Order.booking_date == booking_date,
                Order.status == "pending",
            )
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def _set_status_if_pending(self, payment_session_id: str, status: str) -> bool:
        result = await self.db.execute(
            update(Order)
            .where(
                Order.payment_session_id == payment_session_id,
                Order.status == "pending",
            )
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def mark_paid_if_pending(self, payment_session_id: str) -> bool:
        """
        Transición pending -> paid en una sola sentencia.
        Devuelve True solo para quien realmente hizo el cambio (una fila afectada).
        """
        return await self._set_status_if_pending(payment_session_id, "paid")

    async def mark_conflict_if_pending(self, payment_session_id: str) -> bool:
        return await self._set_status_if_pending(payment_session_id, "conflict")

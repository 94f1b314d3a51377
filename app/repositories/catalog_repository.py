from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from app.models.catalog.activity import Activity
from app.models.catalog.facility import Facility


class CatalogRepository:
    """Lectura de actividades e instalaciones; el núcleo nunca las modifica."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_activities(self) -> List[Activity]:
        result = await self.db.execute(select(Activity).order_by(Activity.name))
        return list(result.scalars().all())

    async def get_activity(self, activity_id: str) -> Optional[Activity]:
        result = await self.db.execute(select(Activity).where(Activity.id == activity_id))
        return result.scalar_one_or_none()

    async def list_facilities(self, activity_id: str) -> List[Facility]:
        result = await self.db.execute(
            select(Facility)
            .where(Facility.activity_id == activity_id)
            .order_by(Facility.name)
        )
        return list(result.scalars().all())

    async def get_facility(self, facility_id: str) -> Optional[Facility]:
        result = await self.db.execute(
            select(Facility)
            .options(joinedload(Facility.activity))
            .where(Facility.id == facility_id)
        )
        return result.scalar_one_or_none()

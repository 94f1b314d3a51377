from app.cores.db import async_session
from app.models.catalog.activity import Activity
from app.models.catalog.facility import Facility
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select


CATALOG = [
    {
        "name": "PS5 Gaming",
        "description": "Latest PlayStation 5 titles on 4K screens",
        "hourly_rate": 50000,
        "facilities": [("PS5 Station 1", True), ("PS5 Station 2", True), ("PS5 Station 3", False)],
    },
    {
        "name": "PC Gaming",
        "description": "High-end gaming rigs with 240Hz monitors",
        "hourly_rate": 40000,
        "facilities": [("PC Bay 1", True), ("PC Bay 2", True)],
    },
    {
        "name": "VR Experience",
        "description": "Full-body virtual reality arena",
        "hourly_rate": 80000,
        "facilities": [("VR Arena", True)],
    },
    {
        "name": "Pool Table",
        "description": "Tournament size pool tables",
        "hourly_rate": 30000,
        "facilities": [("Pool Table 1", True), ("Pool Table 2", True)],
    },
]


async def create_catalog():
    db: AsyncSession = async_session()
    try:
        result = await db.execute(select(Activity))
        activities = result.scalars().all()

        if not activities:
            for item in CATALOG:
                activity = Activity(
                    name=item["name"],
                    description=item["description"],
                    hourly_rate=item["hourly_rate"],
                )
                db.add(activity)
                await db.flush()
                db.add_all([
                    Facility(activity_id=activity.id, name=name, is_available=available)
                    for name, available in item["facilities"]
                ])
            await db.commit()
            print("Catálogo creado correctamente")
        else:
            print("El catálogo ya existe")
    except Exception as e:
        await db.rollback()
        print(f"Error al crear el catálogo: {e}")
    finally:
        await db.close()

import asyncio

from khata.db.session import engine
from khata.db.base import Base

# Import every model so its table is registered on Base.metadata
from khata.models import (  # noqa: F401
    Client, ClientItem, CylinderType, CylinderAssignment,
    Customer, Employee, Supplier, DailySaleSheet, DailySale, SalaryRecord,
    VegetableName, Vegetable, ChickenRecord,
)


async def ensure_tables_exist() -> None:
    """
    Create missing tables (called on application startup)
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())

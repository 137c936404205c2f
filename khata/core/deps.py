"""Dependency injection (no authentication, the identity provider sits in front)"""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession

from khata.db import session as db_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency
    """
    async with db_session.SessionLocal() as session:
        yield session

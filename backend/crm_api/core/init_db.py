# backend/crm_api/core/init_db.py
import asyncio
import logging
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from crm_api.core.config import settings
from crm_api.core.database import Base, create_engine, create_session_factory
from crm_api.repositories.section_repository import SectionRepository
from crm_api.services.authorization import BUILTIN_SECTIONS
# Import all models to register them with Base
import crm_api.models  # noqa: F401

logger = logging.getLogger(__name__)


async def init_db(engine: AsyncEngine, session_factory: async_sessionmaker[AsyncSession]):
    """Create tables and the built-in sections."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with session_factory() as session:
        sections = SectionRepository(session)
        for name in BUILTIN_SECTIONS:
            if await sections.get_by_name(name) is None:
                await sections.create(name)
                logger.info(f"Created built-in section: {name}")


async def main():
    engine = create_engine(settings)
    try:
        await init_db(engine, create_session_factory(engine))
    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(main())

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from pdf_share_service.config import Settings
from pdf_share_service.models import Base


def create_engine_and_sessionmaker(database_url: str):
    engine = create_async_engine(database_url)
    session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return engine, session_factory


async def create_tables(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def engine_from_settings(settings: Settings):
    return create_engine_and_sessionmaker(settings.DATABASE_URL)

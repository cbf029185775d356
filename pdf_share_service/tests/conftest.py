from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
import httpx
from httpx import AsyncClient

from pdf_share_service.backends import InMemoryBackend, DatabaseBackend
from pdf_share_service.config import settings
from pdf_share_service.database import create_engine_and_sessionmaker, create_tables
from pdf_share_service.main import app
from pdf_share_service.routers.rooms import get_store
from pdf_share_service.store import RoomRecordStore

class TickingClock:
    def __init__(self, start: datetime = datetime(2024, 9, 2, 8, 30, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + timedelta(seconds=1)
        return now

@pytest.fixture(scope="function")
def memory_backend() -> InMemoryBackend:
    return InMemoryBackend()

@pytest.fixture(scope="function")
def store(memory_backend) -> RoomRecordStore:
    return RoomRecordStore(memory_backend, clock=TickingClock())

@pytest_asyncio.fixture(scope="function")
async def session_factory(tmp_path):
    engine, factory = create_engine_and_sessionmaker(f"sqlite+aiosqlite:///{tmp_path / 'test_pdf_share.db'}")
    await create_tables(engine)
    yield factory
    await engine.dispose()

@pytest.fixture(scope="function")
def database_backend(session_factory) -> DatabaseBackend:
    return DatabaseBackend(session_factory)

@pytest.fixture(scope="function")
def mock_service_settings(monkeypatch):
    monkeypatch.setattr(settings, 'UPLOAD_DELAY_SECONDS', 0.0)
    monkeypatch.setattr(settings, 'REFRESH_DELAY_SECONDS', 0.0)
    monkeypatch.setattr(settings, 'ENFORCE_ROOM_REGISTRY', True)
    return settings

@pytest_asyncio.fixture(scope="function")
async def async_client(store: RoomRecordStore, mock_service_settings) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_store] = lambda: store

    transport = httpx.ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testpdfshare") as client:
        yield client

    app.dependency_overrides.clear()

from pathlib import Path
from typing import Dict, Optional, Protocol

import aiofiles
import aiofiles.os

from pdf_share_service import crud
from pdf_share_service.config import Settings
from pdf_share_service.logging_config import get_logger

logger = get_logger(__name__)

class KeyValueBackend(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...

class InMemoryBackend:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

class FileBackend:
    """Stores each key as ``<key>.json`` under ``base_path``."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)
        if not self.base_path.exists():
            logger.info(f"Creating storage directory at {self.base_path}")
            self.base_path.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.base_path / f"{key}.json"

    async def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not await aiofiles.os.path.exists(path):
            return None
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return await f.read()

    async def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_name(path.name + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(value)
        await aiofiles.os.replace(tmp_path, path)
        logger.debug(f"Wrote {len(value)} characters to {path}")

    async def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass

class DatabaseBackend:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def get(self, key: str) -> Optional[str]:
        async with self.session_factory() as db:
            return await crud.get_value(db, key)

    async def set(self, key: str, value: str) -> None:
        async with self.session_factory() as db:
            await crud.set_value(db, key, value)

    async def delete(self, key: str) -> None:
        async with self.session_factory() as db:
            await crud.delete_value(db, key)

def build_backend(settings: Settings, session_factory=None) -> KeyValueBackend:
    kind = settings.STORAGE_BACKEND.lower()
    if kind == "memory":
        return InMemoryBackend()
    if kind == "file":
        return FileBackend(settings.STORAGE_BASE_PATH)
    if kind == "database":
        if session_factory is None:
            raise ValueError("A session factory is required for the database backend")
        return DatabaseBackend(session_factory)
    raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND!r}")

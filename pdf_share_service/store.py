import asyncio
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import TypeAdapter, ValidationError

from pdf_share_service import schemas
from pdf_share_service.backends import KeyValueBackend
from pdf_share_service.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_STORAGE_KEY = "faculty_pdfs"

_records_adapter = TypeAdapter(List[schemas.SharedPDF])


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_record_id(records: List[schemas.SharedPDF], created_at: datetime) -> str:
    candidate = int(created_at.timestamp() * 1000)
    numeric_ids = [int(r.id) for r in records if r.id.isascii() and r.id.isdecimal()]
    if numeric_ids and candidate <= max(numeric_ids):
        candidate = max(numeric_ids) + 1
    return str(candidate)


class RoomRecordStore:
    """Shared-PDF records for every room, kept as one JSON blob under ``key``.

    Every write rewrites the whole blob. Writes through the same instance are
    serialized by a lock; separate processes sharing a backend can still
    overwrite each other's changes.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.backend = backend
        self.key = key
        self.clock = clock or utcnow
        self._lock = asyncio.Lock()

    async def load(self) -> schemas.LoadResult:
        stored = await self.backend.get(self.key)
        if not stored:
            return schemas.LoadResult(status=schemas.LoadStatus.EMPTY)
        try:
            records = _records_adapter.validate_json(stored)
        except ValidationError as e:
            logger.error(f"Error loading PDFs from '{self.key}': {e.error_count()} validation error(s)")
            return schemas.LoadResult(status=schemas.LoadStatus.CORRUPT, error=str(e))
        return schemas.LoadResult(status=schemas.LoadStatus.OK, records=records)

    async def list_all(self) -> List[schemas.SharedPDF]:
        result = await self.load()
        return result.records

    async def list_for_room(self, room_number: str) -> List[schemas.SharedPDF]:
        return [r for r in await self.list_all() if r.room_number == room_number]

    async def append(self, file: schemas.IncomingFile, room_number: str) -> schemas.SharedPDF:
        async with self._lock:
            existing = await self.list_all()
            created_at = self.clock()
            record = schemas.SharedPDF(
                id=next_record_id(existing, created_at),
                name=file.name,
                room_number=room_number,
                uploaded_at=created_at,
                file_info=schemas.FileInfo(
                    name=file.name,
                    size=file.size_bytes,
                    content_type=file.content_type,
                ),
            ).with_content(file.content)
            await self._write(existing + [record])
        logger.info(f'PDF "{file.name}" saved to Room {room_number}')
        return record

    async def clear_room(self, room_number: str) -> int:
        async with self._lock:
            existing = await self.list_all()
            remaining = [r for r in existing if r.room_number != room_number]
            await self._write(remaining)
        removed = len(existing) - len(remaining)
        logger.info(f"Cleared all PDFs for Room {room_number} ({removed} removed)")
        return removed

    async def _write(self, records: List[schemas.SharedPDF]) -> None:
        payload = _records_adapter.dump_json(records, by_alias=True)
        await self.backend.set(self.key, payload.decode("utf-8"))

import pytest
from sqlalchemy.future import select

from pdf_share_service import crud
from pdf_share_service.backends import (
    DatabaseBackend,
    FileBackend,
    InMemoryBackend,
    build_backend,
)
from pdf_share_service.config import Settings
from pdf_share_service.models import KeyValueEntry
from pdf_share_service.schemas import IncomingFile, LoadStatus
from pdf_share_service.store import RoomRecordStore

def pdf(name: str) -> IncomingFile:
    return IncomingFile(name=name, content_type="application/pdf", content=b"%PDF-1.4")

@pytest.mark.asyncio
async def test_file_backend_set_get_delete(tmp_path):
    backend = FileBackend(tmp_path / "kv")

    assert (tmp_path / "kv").is_dir()
    assert await backend.get("faculty_pdfs") is None

    await backend.set("faculty_pdfs", "[]")
    assert await backend.get("faculty_pdfs") == "[]"
    assert (tmp_path / "kv" / "faculty_pdfs.json").read_text(encoding="utf-8") == "[]"
    assert not (tmp_path / "kv" / "faculty_pdfs.json.tmp").exists()

    await backend.delete("faculty_pdfs")
    assert await backend.get("faculty_pdfs") is None
    await backend.delete("faculty_pdfs")

@pytest.mark.asyncio
async def test_file_backend_survives_store_reload(tmp_path):
    first = RoomRecordStore(FileBackend(tmp_path))
    await first.append(pdf("fileX.pdf"), "101")
    await first.append(pdf("fileY.pdf"), "102")

    second = RoomRecordStore(FileBackend(tmp_path))
    records = await second.list_for_room("101")

    assert [r.name for r in records] == ["fileX.pdf"]
    assert records[0].content == b""

@pytest.mark.asyncio
async def test_file_backend_corrupt_file_degrades_to_empty(tmp_path):
    (tmp_path / "faculty_pdfs.json").write_text("[{", encoding="utf-8")
    store = RoomRecordStore(FileBackend(tmp_path))

    assert await store.list_all() == []
    assert (await store.load()).status == LoadStatus.CORRUPT

@pytest.mark.asyncio
async def test_crud_set_value_inserts_then_updates(session_factory):
    async with session_factory() as db:
        assert await crud.get_value(db, "faculty_pdfs") is None

        created = await crud.set_value(db, "faculty_pdfs", "[]")
        assert created.key == "faculty_pdfs"
        assert created.updated_at is not None

        await crud.set_value(db, "faculty_pdfs", '[{"id": "1"}]')
        assert await crud.get_value(db, "faculty_pdfs") == '[{"id": "1"}]'

        result = await db.execute(select(KeyValueEntry))
        assert len(result.scalars().all()) == 1

        assert await crud.delete_value(db, "faculty_pdfs") is True
        assert await crud.delete_value(db, "faculty_pdfs") is False

@pytest.mark.asyncio
async def test_database_backend_round_trips_store(database_backend: DatabaseBackend):
    store = RoomRecordStore(database_backend)
    await store.append(pdf("fileX.pdf"), "101")
    await store.append(pdf("fileY.pdf"), "102")
    await store.append(pdf("fileZ.pdf"), "101")

    await store.clear_room("102")

    reloaded = RoomRecordStore(database_backend)
    assert [r.name for r in await reloaded.list_for_room("101")] == ["fileX.pdf", "fileZ.pdf"]
    assert await reloaded.list_for_room("102") == []

@pytest.mark.asyncio
async def test_database_backend_delete(database_backend: DatabaseBackend):
    await database_backend.set("faculty_pdfs", "[]")
    await database_backend.delete("faculty_pdfs")
    assert await database_backend.get("faculty_pdfs") is None

def test_build_backend_selects_by_setting(tmp_path):
    assert isinstance(build_backend(Settings(STORAGE_BACKEND="memory")), InMemoryBackend)

    file_backend = build_backend(Settings(STORAGE_BACKEND="file", STORAGE_BASE_PATH=tmp_path / "files"))
    assert isinstance(file_backend, FileBackend)
    assert file_backend.base_path == tmp_path / "files"

    db_backend = build_backend(Settings(STORAGE_BACKEND="database"), session_factory=object())
    assert isinstance(db_backend, DatabaseBackend)

def test_build_backend_rejects_unknown_or_incomplete_settings():
    with pytest.raises(ValueError):
        build_backend(Settings(STORAGE_BACKEND="s3"))
    with pytest.raises(ValueError):
        build_backend(Settings(STORAGE_BACKEND="database"))

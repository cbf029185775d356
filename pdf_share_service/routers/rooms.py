import asyncio
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, UploadFile, File, Depends, HTTPException, Request, Response

from pdf_share_service import schemas
from pdf_share_service.config import settings as global_app_settings, Settings
from pdf_share_service.logging_config import get_logger
from pdf_share_service.store import RoomRecordStore

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"

router = APIRouter(
    tags=["rooms"],
)

def get_settings():
    return global_app_settings

def get_store(request: Request) -> RoomRecordStore:
    return request.app.state.store

def content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'

@router.get("/rooms", response_model=schemas.RoomList)
async def list_rooms(current_settings: Settings = Depends(get_settings)):
    return schemas.RoomList(rooms=current_settings.CLASSROOMS)

@router.post("/rooms/{room_number}/pdfs", response_model=schemas.SharedPDFPublic)
async def share_pdf(
    room_number: str,
    file: UploadFile = File(...),
    store: RoomRecordStore = Depends(get_store),
    current_settings: Settings = Depends(get_settings)
):
    logger.info(f"Share request for filename: '{file.filename}', content_type: '{file.content_type}', room: {room_number}")
    if file.content_type != PDF_MIME_TYPE:
        logger.warning(f"Rejected '{file.filename}': content type '{file.content_type}' is not a PDF")
        raise HTTPException(status_code=415, detail="Invalid file type. Please select a PDF file.")

    if current_settings.ENFORCE_ROOM_REGISTRY and room_number not in current_settings.CLASSROOMS:
        logger.warning(f"Rejected '{file.filename}': Room {room_number} is not a known classroom")
        raise HTTPException(status_code=404, detail=f"Room {room_number} not found")

    try:
        content = await file.read()
    finally:
        await file.close()

    if current_settings.UPLOAD_DELAY_SECONDS > 0:
        await asyncio.sleep(current_settings.UPLOAD_DELAY_SECONDS)

    incoming = schemas.IncomingFile(
        name=file.filename,
        content_type=file.content_type,
        content=content,
        size=file.size if file.size else len(content)
    )
    record = await store.append(incoming, room_number)
    logger.info(f"Shared '{record.name}' (ID: {record.id}) with Room {room_number}.")
    return schemas.SharedPDFPublic.from_record(record)

@router.get("/rooms/{room_number}/pdfs", response_model=List[schemas.SharedPDFPublic])
async def list_room_pdfs(
    room_number: str,
    refresh: bool = False,
    store: RoomRecordStore = Depends(get_store),
    current_settings: Settings = Depends(get_settings)
):
    if refresh and current_settings.REFRESH_DELAY_SECONDS > 0:
        await asyncio.sleep(current_settings.REFRESH_DELAY_SECONDS)
    records = await store.list_for_room(room_number)
    logger.info(f"Loaded {len(records)} PDFs for Room {room_number}")
    return [schemas.SharedPDFPublic.from_record(r) for r in records]

@router.delete("/rooms/{room_number}/pdfs", response_model=schemas.RoomClearResult)
async def clear_room_pdfs(
    room_number: str,
    store: RoomRecordStore = Depends(get_store)
):
    cleared = await store.clear_room(room_number)
    return schemas.RoomClearResult(room_number=room_number, cleared=cleared)

@router.get("/rooms/{room_number}/pdfs/{pdf_id}/download")
async def download_pdf(
    room_number: str,
    pdf_id: str,
    store: RoomRecordStore = Depends(get_store)
):
    logger.info(f"Download request for PDF {pdf_id} in Room {room_number}")
    records = await store.list_for_room(room_number)
    record = next((r for r in records if r.id == pdf_id), None)
    if record is None:
        logger.warning(f"PDF not found for download: ID {pdf_id} in Room {room_number}")
        raise HTTPException(status_code=404, detail="PDF not found")

    # Only metadata is persisted; the body is the empty placeholder.
    return Response(
        content=record.content,
        media_type=record.file_info.content_type or PDF_MIME_TYPE,
        headers={"Content-Disposition": content_disposition(record.file_info.name)}
    )

@router.get("/pdfs", response_model=schemas.AllPDFs)
async def list_all_pdfs(store: RoomRecordStore = Depends(get_store)):
    result = await store.load()
    return schemas.AllPDFs(
        status=result.status,
        error=result.error,
        pdfs=[schemas.SharedPDFPublic.from_record(r) for r in result.records]
    )

from fastapi import FastAPI
from contextlib import asynccontextmanager

from pdf_share_service.backends import build_backend
from pdf_share_service.config import settings
from pdf_share_service.database import create_tables, engine_from_settings
from pdf_share_service.logging_config import get_logger
from pdf_share_service.routers import rooms as rooms_router
from pdf_share_service.store import RoomRecordStore

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("PDF Share Service starting up...")
    engine = None
    session_factory = None
    if settings.STORAGE_BACKEND.lower() == "database":
        engine, session_factory = engine_from_settings(settings)
        await create_tables(engine)
        logger.info("Database tables created or already exist.")
    backend = build_backend(settings, session_factory=session_factory)
    app.state.store = RoomRecordStore(backend, key=settings.STORAGE_KEY)
    logger.info(f"Storage backend '{settings.STORAGE_BACKEND}' configured with key '{settings.STORAGE_KEY}'")
    yield
    logger.info("PDF Share Service shutting down...")
    if engine is not None:
        await engine.dispose()

app = FastAPI(
    title="PDF Share Service",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(rooms_router.router)

@app.get("/ping")
async def ping():
    return {"ping": "pong! from PDF Share Service"}

@app.get("/")
async def read_root():
    return {"message": "Welcome to the PDF Share Service API"}

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting PDF Share Service on {settings.SERVICE_HOST}:{settings.SERVICE_PORT}")
    uvicorn.run("pdf_share_service.main:app", host=settings.SERVICE_HOST, port=settings.SERVICE_PORT, reload=True)

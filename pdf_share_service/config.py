from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import List

env_path = Path(__file__).parent / ".env"

class Settings(BaseSettings):
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = 8003
    STORAGE_BACKEND: str = "file"
    STORAGE_KEY: str = "faculty_pdfs"
    STORAGE_BASE_PATH: Path = Path("pdfstorage")
    DATABASE_URL: str = "sqlite+aiosqlite:///./pdf_share.db"
    CLASSROOMS: List[str] = ["101", "102", "103", "104", "105", "201", "202", "203", "204", "205"]
    ENFORCE_ROOM_REGISTRY: bool = True
    UPLOAD_DELAY_SECONDS: float = 1.0
    REFRESH_DELAY_SECONDS: float = 0.5
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=env_path, extra='ignore')

settings = Settings()

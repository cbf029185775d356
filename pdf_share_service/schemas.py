import enum
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_serializer

class FileInfo(BaseModel):
    name: str
    size: int
    content_type: str = Field(alias="type")

    model_config = ConfigDict(populate_by_name=True)

class SharedPDF(BaseModel):
    """One shared file's metadata and target room.

    ``content`` holds the uploaded bytes only on the instance returned by
    ``append``; it is never persisted, so reloaded records carry ``b""``.
    """

    id: str
    name: str
    room_number: str = Field(alias="roomNumber")
    uploaded_at: datetime = Field(alias="uploadedAt")
    file_info: FileInfo = Field(alias="fileInfo")
    _content: bytes = PrivateAttr(default=b"")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def content(self) -> bytes:
        return self._content

    def with_content(self, content: bytes) -> "SharedPDF":
        self._content = content
        return self

    @field_serializer("uploaded_at")
    def serialize_uploaded_at(self, value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")

class LoadStatus(str, enum.Enum):
    OK = "ok"
    EMPTY = "empty"
    CORRUPT = "corrupt"

class LoadResult(BaseModel):
    status: LoadStatus
    records: List[SharedPDF] = Field(default_factory=list)
    error: Optional[str] = None

class SharedPDFPublic(BaseModel):
    id: str
    name: str
    room_number: str
    uploaded_at: datetime
    size_bytes: int
    mime_type: str

    @classmethod
    def from_record(cls, record: SharedPDF) -> "SharedPDFPublic":
        return cls(
            id=record.id,
            name=record.name,
            room_number=record.room_number,
            uploaded_at=record.uploaded_at,
            size_bytes=record.file_info.size,
            mime_type=record.file_info.content_type,
        )

class RoomList(BaseModel):
    rooms: List[str]

class RoomClearResult(BaseModel):
    room_number: str
    cleared: int

class AllPDFs(BaseModel):
    status: LoadStatus
    error: Optional[str] = None
    pdfs: List[SharedPDFPublic]

class IncomingFile(BaseModel):
    name: str
    content_type: str = ""
    content: bytes = b""
    size: Optional[int] = None

    @property
    def size_bytes(self) -> int:
        return self.size if self.size is not None else len(self.content)

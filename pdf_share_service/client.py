from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from pdf_share_service.logging_config import get_logger

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"


def room_path(room_number: str, *segments: str) -> str:
    parts = ["rooms", room_number, "pdfs", *segments]
    return "/" + "/".join(quote(part, safe="") for part in parts)


class ClassroomShareClient:
    """Async client for faculty uploaders and classroom receivers."""

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        logger.info(f"Sending {method} request to {url}")
        try:
            response = await self.client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from {url}: {e.response.status_code} - {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request to {url} failed: {str(e)}")
            raise
        return response

    async def list_rooms(self) -> List[str]:
        response = await self._request("GET", "/rooms")
        return response.json()["rooms"]

    async def share_pdf(self, room_number: str, filename: str, content: bytes) -> Dict[str, Any]:
        files = {"file": (filename, content, PDF_MIME_TYPE)}
        response = await self._request("POST", room_path(room_number), files=files)
        return response.json()

    async def list_pdfs(self, room_number: str, refresh: bool = False) -> List[Dict[str, Any]]:
        params = {"refresh": "true"} if refresh else None
        response = await self._request("GET", room_path(room_number), params=params)
        pdfs = response.json()
        logger.info(f"Loaded {len(pdfs)} PDFs for Room {room_number}")
        return pdfs

    async def clear_room(self, room_number: str) -> int:
        response = await self._request("DELETE", room_path(room_number))
        return response.json()["cleared"]

    async def download_pdf(self, room_number: str, pdf_id: str) -> bytes:
        response = await self._request("GET", room_path(room_number, pdf_id, "download"))
        return response.content

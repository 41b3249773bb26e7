"""Blob storage for analyzed face images."""
import logging
import os
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx
from fastapi.concurrency import run_in_threadpool

from skinscan.ai.Errors import UpstreamServiceError

logger = logging.getLogger(__name__)

FIREBASE_STORAGE_URL = "https://firebasestorage.googleapis.com/v0/b"


class LocalImageStore:
    """Writes images to a directory the app serves under ``/static``."""

    def __init__(self, directory: Path, public_base_url: str):
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/")
        self.directory.mkdir(parents=True, exist_ok=True)

    async def upload(self, data: bytes, filename: str, media_type: str = "image/jpeg") -> str:
        name = os.path.basename(filename)
        await run_in_threadpool((self.directory / name).write_bytes, data)
        logger.info(f"[UPLOAD] Saved {name} to {self.directory}")
        return f"{self.public_base_url}/static/{quote(name)}"


class FirebaseImageStore:
    """Firebase Storage REST upload; the returned URL carries the download token."""

    def __init__(self, bucket: str, folder: str = "skin-analysis", timeout_s: float = 30.0,
                 access_token: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.bucket = bucket
        self.access_token = access_token
        self.folder = folder
        self.timeout_s = timeout_s
        self.transport = transport

    def object_name(self, filename: str) -> str:
        return f"{self.folder}/{os.path.basename(filename)}" if self.folder else os.path.basename(filename)

    def public_url(self, name: str, token: Optional[str]) -> str:
        url = f"{FIREBASE_STORAGE_URL}/{self.bucket}/o/{quote(name, safe='')}?alt=media"
        return f"{url}&token={token}" if token else url

    async def upload(self, data: bytes, filename: str, media_type: str = "image/jpeg") -> str:
        name = self.object_name(filename)
        url = f"{FIREBASE_STORAGE_URL}/{self.bucket}/o"
        headers = {"Content-Type": media_type}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
            res = await client.post(
                url,
                params={"name": name, "uploadType": "media"},
                content=data,
                headers=headers,
            )

        if res.status_code >= 400:
            raise UpstreamServiceError(detail=f"Firebase upload returned {res.status_code}: {res.text}")

        token = res.json().get("downloadTokens")
        if token and "," in token:
            token = token.split(",")[0]
        return self.public_url(name, token)

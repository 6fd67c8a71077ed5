"""File Reader - materialize uploaded bytes into FileRecords."""
import asyncio
import base64
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from report_engine.blob_store import BlobStore
from report_engine.classifier import DEFAULT_MIME_TYPE, classify
from report_engine.errors import FileIngestionError
from report_engine.schemas import FileRecord, IngestionFailure, PreviewCategory

logger = logging.getLogger(__name__)


class Upload(Protocol):
    """Shape shared by fastapi.UploadFile and RawUpload."""
    filename: Optional[str]
    content_type: Optional[str]

    async def read(self) -> bytes: ...


@dataclass
class RawUpload:
    """In-memory upload, for callers that already hold the bytes."""
    filename: str
    content_type: Optional[str]
    data: bytes

    async def read(self) -> bytes:
        return self.data


def to_data_url(data: bytes, media_type: str) -> str:
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def split_data_url(content: Optional[str]) -> Optional[tuple[str, str]]:
    """Return (media type, base64 payload) for a data URL, or None if content is not one."""
    if not content or not content.startswith("data:") or "," not in content:
        return None
    header, payload = content.split(",", 1)
    media_type = header[len("data:"):].split(";", 1)[0]
    return media_type, payload


def decode_data_url(content: Optional[str]) -> Optional[bytes]:
    parts = split_data_url(content)
    if parts is None:
        return None
    return base64.b64decode(parts[1])


class FileReader:
    """Reads uploads with the strategy implied by their preview category."""

    def __init__(self, blob_store: BlobStore, max_bytes: Optional[int] = None):
        self.blob_store = blob_store
        self.max_bytes = max_bytes

    async def read(self, upload: Upload) -> FileRecord:
        name = upload.filename or "untitled"
        media_type = (upload.content_type or "").strip() or DEFAULT_MIME_TYPE
        try:
            data = await upload.read()
        except Exception as e:
            raise FileIngestionError(name, f"read failed: {e}") from e
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise FileIngestionError(name, f"file exceeds {self.max_bytes} bytes")

        # Classify on the declared type; an empty declaration only matters for the suffix rule
        category = classify(upload.content_type or "", name)
        content: Optional[str] = None
        preview_url: Optional[str] = None
        blob_url: Optional[str] = None

        if category == PreviewCategory.TEXT:
            try:
                content = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FileIngestionError(name, f"not valid UTF-8 text ({e.reason})") from e
        else:
            content = to_data_url(data, media_type)
            if category == PreviewCategory.IMAGE:
                preview_url = content
            elif category == PreviewCategory.PDF:
                blob_url = self.blob_store.create(data, suffix=".pdf")

        return FileRecord(
            id=uuid.uuid4().hex[:12],
            name=name,
            size=len(data),
            type=media_type,
            upload_date=int(time.time() * 1000),
            content=content,
            preview_url=preview_url,
            blob_url=blob_url,
            preview_type=category,
        )

    async def read_batch(self, uploads: Iterable[Upload]) -> tuple[list[FileRecord], list[IngestionFailure]]:
        """
        Read every upload concurrently. A failing file is reported in the failure
        list and never aborts its siblings. Records keep upload order.
        """
        uploads = list(uploads)
        results = await asyncio.gather(*(self.read(u) for u in uploads), return_exceptions=True)
        records: list[FileRecord] = []
        failures: list[IngestionFailure] = []
        for upload, result in zip(uploads, results):
            if isinstance(result, FileRecord):
                records.append(result)
                continue
            name = upload.filename or "untitled"
            reason = result.reason if isinstance(result, FileIngestionError) else str(result)
            logger.warning("Ingestion of %s failed: %s", name, reason)
            failures.append(IngestionFailure(name=name, reason=reason))
        return records, failures

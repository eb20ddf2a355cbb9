"""
Upload workflow: validate a submission, write the blob, then write the
metadata row that references it.

Each call writes at most one blob and one row. Nothing is retried. A failed
insert after a successful blob write leaves the blob unreferenced unless
`compensate` is set, in which case the blob is deleted before the error
propagates.
"""
import logging
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Callable, Optional
from uuid import uuid4

from seenai.errors import MetadataWriteError, StorageWriteError, Unauthenticated, ValidationError
from seenai.repositories.video_repository import VideoRepository
from seenai.schemas.pydantic_schemas import PendingVideo, Principal, to_video_record
from seenai.utils.storage import ObjectStorage

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = "bin"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def file_extension(file_name: Optional[str]) -> str:
    suffix = PurePath(file_name or "").suffix.lstrip(".").lower()
    return suffix or DEFAULT_EXTENSION


def build_storage_path(principal_id: str, file_name: Optional[str]) -> str:
    """`{principal}/{random token}.{ext}`; unique per call."""
    return f"{principal_id}/{uuid4().hex}.{file_extension(file_name)}"


def validate_submission(principal: Optional[Principal], title: str, category: str, data: Optional[bytes]):
    if principal is None:
        raise Unauthenticated()

    missing = []
    if not (title or "").strip():
        missing.append("title")
    if not (category or "").strip():
        missing.append("category")
    if not data:
        missing.append("file")
    if missing:
        raise ValidationError(missing, validation_message(missing))


def validation_message(missing: list[str]) -> str:
    """User-facing message naming every missing field."""
    parts = []
    fields = [f for f in missing if f != "file"]
    if fields:
        parts.append(f"Title and category are required (missing: {', '.join(fields)}).")
    if "file" in missing:
        parts.append("Please select a video file.")
    return " ".join(parts)


async def upload_video(
    principal: Optional[Principal],
    file_name: Optional[str],
    data: Optional[bytes],
    title: str,
    category: str,
    description: str,
    tone_requested: bool,
    storage: ObjectStorage,
    repository: VideoRepository,
    content_type: Optional[str] = None,
    compensate: bool = False,
    clock: Callable[[], datetime] = _utcnow,
) -> PendingVideo:
    validate_submission(principal, title, category, data)

    path = build_storage_path(principal.id, file_name)
    logger.info(f"Uploading {file_name!r} for user {principal.id} to {path}")

    # StorageWriteError propagates; no row is written for a failed blob
    await storage.put(path, data, content_type=content_type)
    file_url = storage.public_url(path)

    try:
        row = repository.insert(
            user_id=principal.id,
            title=title,
            category=category,
            description=description or "",
            file_url=file_url,
            status="pending",
            tone_requested=tone_requested,
            tone_data={} if tone_requested else None,
            created_at=clock(),
        )
    except MetadataWriteError:
        logger.error(f"Blob {path} has no metadata row")
        if compensate:
            try:
                await storage.delete(path)
                logger.info(f"Removed orphaned blob {path}")
            except StorageWriteError as e:
                logger.error(f"Could not remove orphaned blob {path}: {e}")
        raise

    return to_video_record(row)

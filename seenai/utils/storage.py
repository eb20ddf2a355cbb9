from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional

from seenai.config.settings import get_settings


class ObjectStorage(ABC):
    """Durable blob store addressed by path."""

    @abstractmethod
    async def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        """Write `data` at `path`. Never overwrites; raises StorageWriteError."""

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Publicly resolvable URL for a stored path."""

    @abstractmethod
    async def delete(self, path: str) -> None:
        """Remove a stored blob; raises StorageWriteError."""


@lru_cache
def get_storage() -> ObjectStorage:
    settings = get_settings()
    if settings.storage_backend == "local":
        from seenai.utils.local_storage import LocalStorage
        return LocalStorage(settings.local_storage_dir, settings.local_public_base_url)
    if settings.storage_backend == "s3":
        from seenai.utils.s3_utils import S3Storage
        return S3Storage(settings.s3_bucket, settings.s3_public_base_url, region=settings.aws_region)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.storage_backend!r}")

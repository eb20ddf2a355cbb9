import aiofiles
import logging
from pathlib import Path
from typing import Optional

from seenai.errors import StorageWriteError
from seenai.utils.storage import ObjectStorage

logger = logging.getLogger(__name__)


class LocalStorage(ObjectStorage):
    """Filesystem-backed storage for development, served under /media."""

    def __init__(self, base_dir: str, public_base_url: str):
        self.base_path = Path(base_dir).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.base_path / path).resolve()
        if self.base_path not in target.parents:
            raise StorageWriteError(f"Invalid storage path: {path}")
        return target

    async def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # "x" refuses to overwrite an existing blob
            async with aiofiles.open(target, "xb") as out_f:
                await out_f.write(data)
        except OSError as e:
            logger.error(f"❌ Error writing {target}: {e}")
            raise StorageWriteError(f"Could not store video: {e}") from e
        logger.info(f"✅ Stored locally: {target}")

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"

    async def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink()
        except OSError as e:
            logger.error(f"❌ Error deleting {target}: {e}")
            raise StorageWriteError(f"Could not delete video: {e}") from e
        logger.info(f"🗑️ Deleted locally: {target}")

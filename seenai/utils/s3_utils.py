import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool
import logging
from typing import Optional

from seenai.errors import StorageWriteError
from seenai.utils.storage import ObjectStorage

logger = logging.getLogger(__name__)


class S3Storage(ObjectStorage):
    """Amazon S3 bucket; objects are readable at `public_base_url/<key>`."""

    def __init__(self, bucket: str, public_base_url: str, region: Optional[str] = None, client=None):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.client = client or boto3.client("s3", region_name=region)

    async def put(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        params = {"Bucket": self.bucket, "Key": path, "Body": data, "IfNoneMatch": "*"}
        if content_type:
            params["ContentType"] = content_type
        try:
            await run_in_threadpool(self.client.put_object, **params)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"❌ Error uploading to S3 ({self.bucket}/{path}): {e}")
            raise StorageWriteError(f"Could not store video: {e}") from e
        logger.info(f"✅ Uploaded to S3: {self.bucket}/{path}")

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"

    async def delete(self, path: str) -> None:
        try:
            await run_in_threadpool(self.client.delete_object, Bucket=self.bucket, Key=path)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"❌ Error deleting from S3 ({self.bucket}/{path}): {e}")
            raise StorageWriteError(f"Could not delete video: {e}") from e
        logger.info(f"🗑️ Deleted from S3: {self.bucket}/{path}")

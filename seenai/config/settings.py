from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
import os


@dataclass
class Settings:
    """Application configuration, read once from environment variables."""
    database_url: str = "sqlite:///./seenai.db"

    # Object storage
    storage_backend: str = "s3"  # s3 | local
    s3_bucket: str = "seenai-videos"
    aws_region: str = "us-east-1"
    s3_public_base_url: Optional[str] = None
    local_storage_dir: str = "./local_storage"
    local_public_base_url: str = "http://localhost:8000/media"

    # Identity provider tokens
    jwt_secret: str = "secret-key"
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None

    # Remote analysis service
    analysis_service_url: str = "https://seenai-unified-backend-production.up.railway.app"
    analysis_timeout: int = 120

    recent_uploads_limit: int = 3
    compensate_orphaned_blobs: bool = False
    preview_font_path: Optional[str] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.s3_public_base_url is None:
            self.s3_public_base_url = f"https://{self.s3_bucket}.s3.{self.aws_region}.amazonaws.com"

    @staticmethod
    def get_env_bool(key: str, default: bool = False) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")

    @staticmethod
    def get_env_int(key: str, default: int) -> int:
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        return int(value)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create configuration from environment variables"""
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./seenai.db"),
            storage_backend=os.getenv("STORAGE_BACKEND", "s3").lower(),
            s3_bucket=os.getenv("S3_BUCKET", "seenai-videos"),
            aws_region=os.getenv("AWS_DEFAULT_REGION", "us-east-1"),
            s3_public_base_url=os.getenv("S3_PUBLIC_BASE_URL") or None,
            local_storage_dir=os.getenv("LOCAL_STORAGE_DIR", "./local_storage"),
            local_public_base_url=os.getenv("LOCAL_PUBLIC_BASE_URL", "http://localhost:8000/media"),
            jwt_secret=os.getenv("JWT_SECRET", "secret-key"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_audience=os.getenv("JWT_AUDIENCE") or None,
            analysis_service_url=os.getenv(
                "ANALYSIS_SERVICE_URL",
                "https://seenai-unified-backend-production.up.railway.app",
            ),
            analysis_timeout=cls.get_env_int("ANALYSIS_TIMEOUT", 120),
            recent_uploads_limit=cls.get_env_int("RECENT_UPLOADS_LIMIT", 3),
            compensate_orphaned_blobs=cls.get_env_bool("COMPENSATE_ORPHANED_BLOBS", False),
            preview_font_path=os.getenv("PREVIEW_FONT_PATH") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()

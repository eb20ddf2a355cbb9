import logging
from typing import Optional

from seenai.repositories.video_repository import VideoRepository
from seenai.schemas.pydantic_schemas import Principal, VideoRecord, to_video_record

logger = logging.getLogger(__name__)

RECENT_LIMIT = 3


class RecentUploadsView:
    """Most recent uploads of one principal, freshest first.

    Holds the last list it produced and the principal it belongs to. Call
    `refresh` whenever the principal changes and `on_uploaded` after every
    successful upload.
    """

    def __init__(self, repository: VideoRepository, limit: int = RECENT_LIMIT):
        self.repository = repository
        self.limit = limit
        self.principal_id: Optional[str] = None
        self.items: list[VideoRecord] = []

    def refresh(self, principal: Optional[Principal]) -> list[VideoRecord]:
        if principal is None:
            self.principal_id = None
            self.items = []
            return self.items

        rows = self.repository.recent_for_user(principal.id, limit=self.limit)
        self.principal_id = principal.id
        self.items = [to_video_record(row) for row in rows]
        logger.debug(f"Recent uploads for {principal.id}: {[v.id for v in self.items]}")
        return self.items

    def on_uploaded(self, principal: Principal) -> list[VideoRecord]:
        return self.refresh(principal)

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seenai.errors import MetadataWriteError
from seenai.models.db_models import Video

logger = logging.getLogger(__name__)


class VideoRepository:
    """Metadata store over the `videos` table. Every read is scoped to one owner."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, **values) -> Video:
        video = Video(**values)
        try:
            self.db.add(video)
            self.db.commit()
            self.db.refresh(video)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error inserting video row for user {values.get('user_id')}: {e}")
            raise MetadataWriteError(f"Could not save video details: {e}") from e
        logger.info(f"Video row {video.id} created for user {video.user_id}")
        return video

    def recent_for_user(self, user_id: str, limit: Optional[int] = None) -> list[Video]:
        query = (
            self.db.query(Video)
            .filter(Video.user_id == user_id)
            .order_by(Video.created_at.desc(), Video.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_for_user(self, video_id: int, user_id: str) -> Optional[Video]:
        return (
            self.db.query(Video)
            .filter(Video.id == video_id, Video.user_id == user_id)
            .first()
        )

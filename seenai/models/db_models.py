from sqlalchemy import Column, Integer, String, DateTime, Boolean, Float, Text, JSON
from sqlalchemy.sql import func
from seenai.db.database import Base


class Video(Base):
    __tablename__ = "videos"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    file_url = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending | analyzed | failed
    tone_requested = Column(Boolean, nullable=False, default=True)
    tone_data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Written by the external analysis service
    thumbnail_url = Column(String, nullable=True)
    gpt_notes = Column(Text, nullable=True)
    transcript = Column(Text, nullable=True)
    tone_rating = Column(Float, nullable=True)
    frames = Column(JSON, nullable=True)

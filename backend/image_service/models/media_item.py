"""SQLAlchemy model for generic media library entries."""

from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.sql import func
from image_service.database import Base


class MediaItem(Base):
    __tablename__ = "media_item"

    media_id = Column(Integer, primary_key=True, autoincrement=True)
    folder = Column(String(200), nullable=False)
    file_name = Column(String(255), nullable=False)
    stored_path = Column(String(500), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_media_item_folder", "folder"),
    )

"""SQLAlchemy model for certificates that carry an uploaded image."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from image_service.database import Base


class Certificate(Base):
    __tablename__ = "certificate"

    certificate_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    image_path = Column(String(500))  # relative path on the public disk
    lang = Column(String(10))
    created_at = Column(DateTime, server_default=func.now())

"""Environment-driven application settings, managed in one place."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./image_service.db"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # Public disk and staging area
    UPLOAD_DIR: str = "storage/public"
    TEMP_DIR: str = "storage/temp"
    ASSET_BASE_URL: str = "/storage"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10 MB

    # Locale used to read the "name_<locale>" field of dynamic uploads
    APP_LOCALE: str = "en"

    # Seed values for UploadDefaults
    DEFAULT_UPLOAD_KEY: str = "image"
    DEFAULT_FOLDER: str = "media"
    DEFAULT_LANG: str = ""

    class Config:
        # Load backend/.env regardless of the working directory.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()

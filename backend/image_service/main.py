"""FastAPI application entry point. Registers middleware, the images router and the public disk mount."""

import logging
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from image_service.config import settings
from image_service.database import Base, engine
import image_service.models  # noqa: F401 - registers model metadata
from image_service.routers import images
from image_service.services.errors import ImageServiceError, image_service_error_handler

logging.getLogger("image_service").setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(
    debug=settings.DEBUG,
    title="Image Service",
    description="Upload, naming, storage and cleanup of user-supplied images",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ImageServiceError, image_service_error_handler)

app.include_router(images.router)


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Image Service"}


# Public disk, served under the asset base URL
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
if settings.ASSET_BASE_URL.startswith("/"):
    app.mount(settings.ASSET_BASE_URL.rstrip("/"), StaticFiles(directory=settings.UPLOAD_DIR), name="storage")

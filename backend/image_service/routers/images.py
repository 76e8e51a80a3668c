"""Images API router. Parses requests and delegates to ImageService."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from image_service.config import settings
from image_service.database import get_db
from image_service.schemas.image import (
    Base64ImageIn,
    DeleteImageIn,
    DeleteImageOut,
    DynamicUploadOut,
    ImageExtractIn,
    ImageExtractOut,
    ImageUploadOut,
)
from image_service.services.image_service import ImageService, UploadOptions
from image_service.services.record_store import RecordStore
from image_service.services.storage import PublicDisk
from image_service.utils.upload_request import FormUploadRequest

router = APIRouter(prefix="/api/images", tags=["images"])


def get_public_disk() -> PublicDisk:
    return PublicDisk(settings.UPLOAD_DIR, settings.TEMP_DIR, settings.ASSET_BASE_URL)


def get_image_service(db: Session = Depends(get_db)) -> ImageService:
    return ImageService(get_public_disk(), record_store=RecordStore(db))


async def _form_request(request: Request) -> FormUploadRequest:
    form = await request.form()
    return FormUploadRequest(form, max_size=settings.MAX_UPLOAD_SIZE)


@router.post("/upload", response_model=ImageUploadOut)
async def upload_image(request: Request, service: ImageService = Depends(get_image_service)):
    upload_request = await _form_request(request)
    result = service.upload(
        upload_request,
        UploadOptions(
            upload_key=upload_request.input("upload_key"),
            folder=upload_request.input("folder"),
            lang=upload_request.input("lang"),
        ),
    )
    return ImageUploadOut(file_name=result.file_name, url=result.public_url, stored_path=result.stored_path)


@router.post("/dynamic", response_model=DynamicUploadOut)
async def upload_image_with_dynamic_path(request: Request, service: ImageService = Depends(get_image_service)):
    upload_request = await _form_request(request)
    file_path = service.upload_with_dynamic_path(
        upload_request,
        UploadOptions(
            upload_key=upload_request.input("upload_key"),
            directory=upload_request.input("directory", upload_request.input("folder")),
            slug=upload_request.input("slug"),
            random=upload_request.boolean("random", False),
        ),
    )
    return DynamicUploadOut(file_path=file_path, url=service.disk.url(file_path))


@router.post("/base64", response_model=ImageUploadOut)
def upload_base64_image(payload: Base64ImageIn, service: ImageService = Depends(get_image_service)):
    result = service.upload_base64(
        payload.image,
        UploadOptions(folder=payload.folder, lang=payload.lang, slug=payload.slug, random=payload.random),
    )
    return ImageUploadOut(file_name=result.file_name, url=result.public_url, stored_path=result.stored_path)


@router.delete("", response_model=DeleteImageOut)
def delete_image(payload: DeleteImageIn, service: ImageService = Depends(get_image_service)):
    service.delete_image(payload.path, payload.record_kind, payload.record_id)
    return DeleteImageOut()


@router.post("/extract", response_model=ImageExtractOut)
def extract_images(payload: ImageExtractIn, service: ImageService = Depends(get_image_service)):
    return {"images": service.get_all_images(payload.content)}

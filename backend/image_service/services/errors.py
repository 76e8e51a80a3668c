"""Typed failures raised by the image service and their JSON rendering."""

from fastapi import Request, status
from fastapi.responses import JSONResponse


class ImageServiceError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "image_error"
    default_message = "Image request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content={"uploaded": 0, "error": {"code": self.code, "message": self.message}},
        )


class NoValidFile(ImageServiceError):
    code = "no_valid_file"
    default_message = "No valid file uploaded"


class UnknownDefaultKey(ImageServiceError):
    code = "unknown_default_key"
    default_message = "Unknown default key"


class InvalidImageData(ImageServiceError):
    code = "invalid_image_data"
    default_message = "Image data is not valid base64"


class UnsafePath(ImageServiceError):
    code = "unsafe_path"
    default_message = "Path escapes the storage root"


class StorageWriteFailure(ImageServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "storage_write_failure"
    default_message = "File could not be written to storage"


class StorageDeleteFailure(ImageServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "storage_delete_failure"
    default_message = "File could not be deleted from storage"


async def image_service_error_handler(_: Request, exc: ImageServiceError) -> JSONResponse:
    return exc.to_response()

"""Adapters from Starlette form data to the upload request the image service reads."""

import os

from starlette.datastructures import FormData, UploadFile

from image_service.utils.helpers import get_extension_from_mime_type, split_client_name

TRUE_VALUES = {"1", "true", "on", "yes"}


class UploadedFileRef:
    """Read-only view over one uploaded file."""

    def __init__(self, upload: UploadFile, max_size: int):
        self._upload = upload
        self.max_size = max_size
        self.content_type = upload.content_type
        self.original_name = (upload.filename or "").replace("\\", "/").rsplit("/", 1)[-1]
        self.stem, extension = split_client_name(upload.filename)
        self.extension = extension or get_extension_from_mime_type(upload.content_type)

    @property
    def size_bytes(self) -> int:
        stream = self._upload.file
        position = stream.tell()
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(position)
        return size

    @property
    def stream(self):
        self._upload.file.seek(0)
        return self._upload.file

    def is_valid(self) -> bool:
        return bool(self.original_name) and 0 < self.size_bytes <= self.max_size


class FormUploadRequest:
    def __init__(self, form: FormData, max_size: int):
        self.form = form
        self.max_size = max_size

    def has_file(self, key: str) -> bool:
        value = self.form.get(key)
        return isinstance(value, UploadFile) and bool(value.filename)

    def file(self, key: str) -> UploadedFileRef | None:
        if not self.has_file(key):
            return None
        return UploadedFileRef(self.form.get(key), self.max_size)

    def input(self, key: str, default: str | None = None) -> str | None:
        value = self.form.get(key)
        if isinstance(value, str) and value != "":
            return value
        return default

    def boolean(self, key: str, default: bool = False) -> bool:
        value = self.input(key)
        if value is None:
            return default
        return value.strip().lower() in TRUE_VALUES

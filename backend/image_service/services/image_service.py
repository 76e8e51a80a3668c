"""Image upload orchestration: resolves the uploaded file, names it, stores it and cleans up.

Each ``ImageService`` owns its ``UploadDefaults``. Routers build one service per
request; when an instance is shared between threads, ``set_default`` and the
default lookups of the upload methods are serialised by an internal lock.
"""

import io
import logging
import threading
from dataclasses import dataclass, replace
from typing import Protocol

from image_service.config import settings
from image_service.services.errors import (
    InvalidImageData,
    NoValidFile,
    StorageDeleteFailure,
    UnknownDefaultKey,
)
from image_service.services.record_store import RecordStore
from image_service.services.storage import PublicDisk
from image_service.utils.helpers import (
    decode_base64_image,
    extract_image_urls,
    generate_dynamic_file_name,
    get_extension_from_mime_type,
    guess_image_mime_type,
    sanitize_folder,
    slugify,
    split_data_uri,
)
from image_service.utils.upload_request import UploadedFileRef

logger = logging.getLogger(__name__)


class UploadRequest(Protocol):
    def has_file(self, key: str) -> bool: ...

    def file(self, key: str) -> UploadedFileRef | None: ...

    def input(self, key: str, default: str | None = None) -> str | None: ...

    def boolean(self, key: str, default: bool = False) -> bool: ...


@dataclass
class UploadDefaults:
    upload_key: str = "image"
    folder: str = "media"
    lang: str = ""

    @classmethod
    def from_settings(cls) -> "UploadDefaults":
        return cls(
            upload_key=settings.DEFAULT_UPLOAD_KEY,
            folder=settings.DEFAULT_FOLDER,
            lang=settings.DEFAULT_LANG,
        )


# Keys accepted by ImageService.set_default, mapped to UploadDefaults fields.
SETTABLE_DEFAULTS = {
    "uploadKey": "upload_key",
    "upload_key": "upload_key",
    "folder": "folder",
    "lang": "lang",
}


@dataclass(frozen=True)
class UploadOptions:
    upload_key: str | None = None
    folder: str | None = None
    lang: str | None = None
    directory: str | None = None
    slug: str | None = None
    random: bool = False


@dataclass(frozen=True)
class UploadResult:
    stored_path: str
    file_name: str
    public_url: str


def _pick(value, fallback):
    return fallback if value is None else value


class ImageService:
    def __init__(
        self,
        disk: PublicDisk,
        record_store: RecordStore | None = None,
        defaults: UploadDefaults | None = None,
        locale: str | None = None,
        max_upload_size: int | None = None,
    ):
        self.disk = disk
        self.record_store = record_store
        self.locale = locale or settings.APP_LOCALE
        self.max_upload_size = max_upload_size or settings.MAX_UPLOAD_SIZE
        self._defaults = defaults or UploadDefaults.from_settings()
        self._lock = threading.Lock()

    @property
    def defaults(self) -> UploadDefaults:
        with self._lock:
            return replace(self._defaults)

    def set_default(self, key: str, value: str) -> None:
        field_name = SETTABLE_DEFAULTS.get(key)
        if field_name is None:
            raise UnknownDefaultKey(
                f"Unknown default key '{key}'. Allowed: uploadKey, folder, lang"
            )
        with self._lock:
            setattr(self._defaults, field_name, value)

    def _folder_path(self, options: UploadOptions, defaults: UploadDefaults) -> str:
        folder = sanitize_folder(_pick(options.folder, defaults.folder))
        lang = sanitize_folder(_pick(options.lang, defaults.lang))
        return f"{folder}/{lang}" if lang else folder

    def _valid_file(self, request: UploadRequest, upload_key: str) -> UploadedFileRef:
        if not request.has_file(upload_key):
            logger.warning("[image] no file under upload key %r", upload_key)
            raise NoValidFile(f"No file uploaded under '{upload_key}'")
        file = request.file(upload_key)
        if file is None or not file.is_valid():
            logger.warning("[image] rejected invalid upload under %r", upload_key)
            raise NoValidFile()
        return file

    def upload(self, request: UploadRequest, options: UploadOptions | None = None) -> UploadResult:
        options = options or UploadOptions()
        defaults = self.defaults
        upload_key = _pick(options.upload_key, defaults.upload_key)
        folder_path = self._folder_path(options, defaults)

        file = self._valid_file(request, upload_key)
        file_name = generate_dynamic_file_name(file.stem, file.extension, False)
        stored_path = self.disk.store(file.stream, folder_path, file_name)
        logger.info("[image] stored %s", stored_path)
        return UploadResult(
            stored_path=stored_path,
            file_name=file_name,
            public_url=self.disk.url(stored_path),
        )

    def upload_with_dynamic_path(self, request: UploadRequest, options: UploadOptions | None = None) -> str:
        """Store the upload directly under ``options.directory`` with a slug-based name.

        The file is staged first and then copied into place; the staged copy
        is always removed.
        """
        options = options or UploadOptions()
        upload_key = _pick(options.upload_key, self.defaults.upload_key)
        directory = _pick(options.directory, "default")

        file = self._valid_file(request, upload_key)
        slug_name = self._resolve_slug(request, options.slug or "", file)
        file_name = generate_dynamic_file_name(slug_name, file.extension, bool(options.random))

        with self.disk.staged(file.stream) as staged_path:
            stored_path = self.disk.put_file_as(staged_path, directory, file_name)
        logger.info("[image] stored %s", stored_path)
        return stored_path

    def _resolve_slug(self, request: UploadRequest, slug: str, file: UploadedFileRef) -> str:
        source = slug or request.input(f"name_{self.locale}") or file.stem
        return slugify(source) or "file"

    def upload_base64(self, image_data: str, options: UploadOptions | None = None) -> UploadResult:
        options = options or UploadOptions()
        folder_path = self._folder_path(options, self.defaults)

        mime_type, _ = split_data_uri(image_data)
        data = decode_base64_image(image_data)
        if len(data) > self.max_upload_size:
            raise InvalidImageData("Image exceeds the upload size limit")
        extension = get_extension_from_mime_type(mime_type or guess_image_mime_type(data))
        file_name = generate_dynamic_file_name(slugify(options.slug) or "image", extension, bool(options.random))

        stored_path = self.disk.store(io.BytesIO(data), folder_path, file_name)
        logger.info("[image] stored decoded image %s", stored_path)
        return UploadResult(
            stored_path=stored_path,
            file_name=file_name,
            public_url=self.disk.url(stored_path),
        )

    def delete_image(
        self,
        image_path: str | None = None,
        record_kind: str | None = None,
        record_id: int | None = None,
    ) -> None:
        """Delete a stored image and, optionally, the record that owns it.

        Missing files and records are ignored. A file that exists but cannot
        be removed is reported after the record step has run.
        """
        delete_error = None
        if image_path and self.disk.exists(image_path):
            try:
                self.disk.delete(image_path)
            except StorageDeleteFailure as exc:
                delete_error = exc

        if record_kind and record_id and self.record_store is not None:
            record = self.record_store.find_by_id(record_kind, record_id)
            if record is not None:
                self.record_store.delete(record)

        if delete_error is not None:
            raise delete_error

    def get_all_images(self, content: str | None) -> list[str]:
        return extract_image_urls(content)

import base64
import binascii
import logging
import re
import unicodedata
import uuid
from html.parser import HTMLParser

from image_service.services.errors import InvalidImageData

logger = logging.getLogger(__name__)

FOLDER_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9_\-]")
DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,", re.IGNORECASE)

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    "application/octet-stream": "jpg",
}
DEFAULT_EXTENSION = "jpg"

# (offset, signature, mime)
IMAGE_SIGNATURES = [
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (8, b"WEBP", "image/webp"),
    (0, b"BM", "image/bmp"),
    (0, b"II*\x00", "image/tiff"),
    (0, b"MM\x00*", "image/tiff"),
]


def sanitize_folder(folder: str | None) -> str:
    """Remove every character outside ``[A-Za-z0-9_-]``.

    Characters are dropped rather than replaced, so ``"my folder!"`` and
    ``"myfolder"`` land in the same place.
    """
    return FOLDER_UNSAFE_RE.sub("", folder or "")


def generate_dynamic_file_name(slug_name: str, extension: str, random: bool) -> str:
    if random:
        return f"{slug_name}-{uuid.uuid4().hex[-3:]}.{extension}"
    return f"{slug_name}.{extension}"


def get_extension_from_mime_type(mime_type: str | None) -> str:
    return MIME_EXTENSIONS.get((mime_type or "").split(";", 1)[0].strip().lower(), DEFAULT_EXTENSION)


def guess_image_mime_type(data: bytes) -> str:
    head = data[:512]
    for offset, signature, mime in IMAGE_SIGNATURES:
        if head[offset:offset + len(signature)] == signature:
            return mime
    if b"<svg" in head.lower():
        return "image/svg+xml"
    return "application/octet-stream"


def split_data_uri(image_data: str) -> tuple[str | None, str]:
    """Return ``(mime_type, payload)``; mime is None when there is no data-URI prefix."""
    raw = (image_data or "").strip()
    match = DATA_URI_RE.match(raw)
    if not match:
        return None, raw
    return match.group("mime").lower(), raw[match.end():]


def decode_base64_image(image_data: str) -> bytes:
    _, payload = split_data_uri(image_data)
    payload = re.sub(r"\s+", "", payload)
    if not payload:
        raise InvalidImageData("Image data is empty")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageData(f"Image data is not valid base64: {exc}") from exc


def slugify(text: str | None, separator: str = "-") -> str:
    value = unicodedata.normalize("NFKD", str(text or "")).encode("ascii", "ignore").decode("ascii")
    value = value.replace("_", separator).replace("@", f"{separator}at{separator}")
    value = re.sub(r"[^\w\s-]", "", value.lower())
    return re.sub(r"[-\s_]+", separator, value).strip(separator)


def split_client_name(filename: str | None) -> tuple[str, str]:
    """Split a client-supplied file name into ``(stem, extension)``.

    Directory parts sent by the browser are discarded and the extension is
    lowercased. Dotfiles such as ``.env`` have no extension.
    """
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return name, ""
    return stem, ext.lower()


class _ImageSrcCollector(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.sources: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag != "img":
            return
        for name, value in attrs:
            if name == "src":
                if value:
                    self.sources.append(value)
                break

    def parse_marked_section(self, i, report=1):
        # Unknown "<![keyword" sections are skipped like bogus comments.
        try:
            return super().parse_marked_section(i, report)
        except (AssertionError, AttributeError):
            return self.parse_bogus_comment(i)


def extract_image_urls(content: str | None) -> list[str]:
    """Return the ``src`` of every ``img`` tag in document order, duplicates kept."""
    if not content:
        return []
    collector = _ImageSrcCollector()
    try:
        collector.feed(content)
        collector.close()
    except (AssertionError, AttributeError, ValueError) as exc:
        # Broken declarations can still trip the parser; keep what was found.
        logger.debug("[image] markup parse stopped early: %s", exc)
    return collector.sources

"""SQLAlchemy model package and the record kinds that own stored images."""

from image_service.models.certificate import Certificate
from image_service.models.media_item import MediaItem

# Record kinds accepted by ImageService.delete_image
RECORD_MODELS = {
    "certificate": Certificate,
    "media_item": MediaItem,
}

__all__ = [
    "Certificate",
    "MediaItem",
    "RECORD_MODELS",
]

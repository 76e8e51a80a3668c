"""Delete a stored image and, optionally, the record that owns it.

Usage:
  python scripts/delete_image.py media/en/photo.png
  python scripts/delete_image.py media/en/photo.png --record-kind certificate --record-id 3
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from image_service.database import SessionLocal
from image_service.routers.images import get_public_disk
from image_service.services.image_service import ImageService
from image_service.services.record_store import RecordStore


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("path", nargs="?", default=None, help="Path relative to the public disk")
    parser.add_argument("--record-kind", default=None, help="Record kind owning the image (certificate, media_item)")
    parser.add_argument("--record-id", type=int, default=None, help="Id of the owning record")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        service = ImageService(get_public_disk(), record_store=RecordStore(db))
        service.delete_image(args.path, args.record_kind, args.record_id)
    finally:
        db.close()

    print("Image delete finished")
    print(f"  path: {args.path or '-'}")
    if args.record_kind:
        print(f"  record: {args.record_kind}#{args.record_id}")


if __name__ == "__main__":
    main()

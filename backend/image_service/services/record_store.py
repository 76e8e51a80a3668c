"""Lookup and deletion of the database records that own stored images."""

import logging

from sqlalchemy.orm import Session

from image_service.models import RECORD_MODELS

logger = logging.getLogger(__name__)


class RecordStore:
    def __init__(self, db: Session, models: dict | None = None):
        self.db = db
        self.models = RECORD_MODELS if models is None else models

    def find_by_id(self, record_kind: str, record_id: int):
        model = self.models.get(record_kind)
        if model is None:
            logger.warning("[image] unknown record kind %r ignored", record_kind)
            return None
        return self.db.get(model, record_id)

    def delete(self, record) -> None:
        self.db.delete(record)
        self.db.commit()
        logger.info("[image] deleted %s record", type(record).__name__)

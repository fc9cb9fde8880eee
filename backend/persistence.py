"""
Best-effort key/value persistence.

Every piece of calculator state lives under its own namespaced key
("vinylCalc.presets", "vinylCalc.savedRolls", ...) as JSON text in the
stored_values table. Keys load independently, so one corrupted value only
costs that value its default.

Failure policy:
- load(): missing row, bad JSON, wrong shape, or a database error -> fallback
- save(): any database error is rolled back, logged, and dropped. The caller's
  in-memory state stays authoritative. No retry.
"""

import json
import logging
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import models
from .config import settings

logger = logging.getLogger(__name__)

_ANY = TypeAdapter(Any)


class PersistenceAdapter:
    """Typed load-with-default / fire-and-forget save over one DB session."""

    def __init__(self, db: Session, namespace: Optional[str] = None):
        self.db = db
        self.namespace = namespace if namespace is not None else settings.STORAGE_NAMESPACE

    def key(self, name: str) -> str:
        return f"{self.namespace}.{name}" if self.namespace else name

    def load(self, name: str, fallback, type_=None):
        """
        Return the stored value for `name`, validated as `type_` when given.

        Never raises. Anything short of a clean decode returns `fallback`
        unchanged.
        """
        key = self.key(name)
        try:
            row = self.db.get(models.StoredValue, key)
        except SQLAlchemyError as e:
            logger.warning("Storage read failed for %s, using default: %s", key, e)
            self._rollback()
            return fallback

        if row is None or not row.value_json:
            return fallback

        try:
            raw = json.loads(row.value_json)
            if type_ is None:
                return raw
            return TypeAdapter(type_).validate_python(raw)
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning("Stored value for %s is unreadable, using default: %s", key, e)
            return fallback

    def save(self, name: str, value) -> bool:
        """Write `value` as JSON. Returns False if the write was dropped."""
        key = self.key(name)
        try:
            payload = _ANY.dump_json(value).decode("utf-8")
        except (ValueError, TypeError) as e:
            logger.warning("Could not encode %s, write dropped: %s", key, e)
            return False

        try:
            row = self.db.get(models.StoredValue, key)
            if row is None:
                self.db.add(models.StoredValue(key=key, value_json=payload))
            else:
                row.value_json = payload
            self.db.commit()
        except SQLAlchemyError as e:
            logger.warning("Storage write failed for %s, keeping in-memory state: %s", key, e)
            self._rollback()
            return False
        return True

    def _rollback(self):
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            logger.warning("Rollback after storage failure also failed: %s", e)

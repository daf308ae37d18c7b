"""
Persistence Gateway

KeyValueStore reads and writes whole JSON documents keyed by collection name.
Repository wraps it with typed, per-collection read/write methods.

Every write replaces the full collection (read-modify-write). There is no
locking; with two concurrent writers the last one wins.
"""

import json
import logging
from typing import Any, List, Optional

from fastapi import Depends
from pydantic import ValidationError as SchemaError
from sqlalchemy.orm import Session

from app.constants import STORAGE_KEYS
from app.database import get_db
from app.models import StoreEntry
from app.schemas import Report, Settings, Staff

logger = logging.getLogger(__name__)


class KeyValueStore:
    """JSON blob storage over the store_entries table."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded JSON stored under key, or None if absent or malformed."""
        entry = self.db.get(StoreEntry, key)
        if entry is None or not entry.value:
            return None
        try:
            return json.loads(entry.value)
        except ValueError:
            logger.warning(f"Ignoring malformed JSON stored under '{key}'")
            return None

    def set(self, key: str, data: Any) -> None:
        """Replace the value stored under key and commit."""
        payload = json.dumps(data, ensure_ascii=False)
        entry = self.db.get(StoreEntry, key)
        if entry is None:
            entry = StoreEntry(key=key, value=payload)
            self.db.add(entry)
        else:
            entry.value = payload
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class Repository:
    """Typed access to the reports, staff and settings collections."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    # --- reports ---

    def get_reports(self) -> List[Report]:
        return self._load_list(STORAGE_KEYS["reports"], Report)

    def save_reports(self, reports: List[Report]) -> None:
        self._save_list(STORAGE_KEYS["reports"], Report, reports)

    def get_report(self, report_id: str) -> Optional[Report]:
        for report in self.get_reports():
            if report.id == report_id:
                return report
        return None

    # --- staff ---

    def get_staffs(self) -> List[Staff]:
        return self._load_list(STORAGE_KEYS["staffs"], Staff)

    def save_staffs(self, staffs: List[Staff]) -> None:
        self._save_list(STORAGE_KEYS["staffs"], Staff, staffs)

    # --- settings ---

    def get_settings(self) -> Settings:
        """Return stored settings, falling back to defaults for anything missing."""
        data = self.store.get(STORAGE_KEYS["settings"])
        if not isinstance(data, dict):
            return Settings()
        try:
            return Settings.model_validate(data)
        except SchemaError:
            logger.warning("Stored settings are invalid; using defaults")
            return Settings()

    def save_settings(self, settings: Settings) -> None:
        self.store.set(STORAGE_KEYS["settings"], settings.model_dump(mode="json"))

    def _load_list(self, key: str, model) -> list:
        data = self.store.get(key)
        if not isinstance(data, list):
            return []
        items = []
        for raw in data:
            try:
                items.append(model.model_validate(raw))
            except SchemaError:
                logger.warning(f"Skipping invalid record in '{key}': {raw!r}")
        return items

    def _unreadable_rows(self, key: str, model) -> list:
        data = self.store.get(key)
        if not isinstance(data, list):
            return []
        rows = []
        for raw in data:
            try:
                model.model_validate(raw)
            except SchemaError:
                rows.append(raw)
        return rows

    def _save_list(self, key: str, model, items: list) -> None:
        """
        Replace the collection, carrying over stored rows that failed to load.

        Rows skipped by _load_list are not in items; writing items alone
        would delete them.
        """
        rows = [item.model_dump(mode="json") for item in items]
        kept = self._unreadable_rows(key, model)
        if kept:
            logger.warning(f"Keeping {len(kept)} unreadable record(s) in '{key}'")
        self.store.set(key, rows + kept)


def get_repository(db: Session = Depends(get_db)) -> Repository:
    """Dependency for FastAPI routes to get a repository bound to the request session."""
    return Repository(KeyValueStore(db))

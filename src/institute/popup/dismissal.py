"""Day-scoped record of popup notices the visitor asked not to see again.

The record is a JSON object ``{"date": "YYYY-MM-DD", "ids": [...]}`` under a
single key. A record tagged with any other day than today, or one that
cannot be parsed, is deleted the moment it is read; writes never check the
date of what they replace.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .store import KeyValueStore

LOGGER = logging.getLogger(__name__)

DISMISSED_KEY = "hans_dismissed_notices"


class DismissalLog:
    """Reads and writes the dismissal record in a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        today: Callable[[], date] = date.today,
        key: str = DISMISSED_KEY,
    ) -> None:
        """Create a dismissal log.

        :param store: Where the record is persisted
        :param today: Clock returning the current calendar day
        :param key: Store key holding the record
        """
        self.store = store
        self.today = today
        self.key = key

    def read(self) -> list[str]:
        """Ids dismissed today, purging a stale or corrupt record."""
        raw = self.store.get(self.key)
        if raw is None:
            return []

        try:
            record = json.loads(raw)
            record_date = record["date"]
            ids = record.get("ids") or []
            if not isinstance(ids, list):
                raise TypeError(ids)
        except (json.JSONDecodeError, TypeError, KeyError, AttributeError):
            LOGGER.warning("Discarding unreadable dismissal record")
            self.store.delete(self.key)
            return []

        if record_date != self.today().isoformat():
            self.store.delete(self.key)
            return []

        return [str(notice_id) for notice_id in ids]

    def _write(self, ids: list[str]) -> None:
        self.store.set(
            self.key,
            json.dumps({"date": self.today().isoformat(), "ids": ids}),
        )

    def add(self, notice_id: str) -> None:
        """Mark one notice as dismissed for today."""
        self.add_many([notice_id])

    def add_many(self, notice_ids: Iterable[str]) -> None:
        """Mark several notices as dismissed for today.

        This is a plain read-modify-write against the store.
        """
        ids = self.read()
        for notice_id in notice_ids:
            if notice_id not in ids:
                ids.append(notice_id)
        self._write(ids)

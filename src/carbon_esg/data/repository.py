# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Activity entry persistence.

The calculation core never talks to storage directly; it receives an
:class:`ActivityRepository`.  Two implementations ship here: an in-memory
one for tests and embedding, and a JSON-file one stored under
``~/.carbon-esg/`` by default.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from carbon_esg.data.models import ActivityEntry

logger = logging.getLogger(__name__)

DEFAULT_BASE_DIR = Path.home() / ".carbon-esg"
ACTIVITY_FILE_NAME = "activity_entries.json"


@runtime_checkable
class ActivityRepository(Protocol):
    """CRUD contract for activity entries."""

    def list_entries(self) -> list[ActivityEntry]: ...

    def get(self, entry_id: str) -> ActivityEntry | None: ...

    def add(self, entry: ActivityEntry) -> ActivityEntry: ...

    def update(self, entry: ActivityEntry) -> ActivityEntry: ...

    def delete(self, entry_id: str) -> bool: ...

    def purge(self) -> int: ...


class InMemoryActivityRepository:
    """Thread-safe, process-local repository."""

    def __init__(self, entries: list[ActivityEntry] | None = None) -> None:
        self._entries: dict[str, ActivityEntry] = {}
        self._lock = threading.Lock()
        for entry in entries or []:
            self._entries[entry.id] = entry

    def list_entries(self) -> list[ActivityEntry]:
        with self._lock:
            return [e.model_copy() for e in self._entries.values()]

    def get(self, entry_id: str) -> ActivityEntry | None:
        with self._lock:
            entry = self._entries.get(entry_id)
            return entry.model_copy() if entry else None

    def add(self, entry: ActivityEntry) -> ActivityEntry:
        with self._lock:
            if entry.id in self._entries:
                raise ValueError(f"Entry '{entry.id}' already exists")
            self._entries[entry.id] = entry.model_copy()
        return entry

    def update(self, entry: ActivityEntry) -> ActivityEntry:
        with self._lock:
            if entry.id not in self._entries:
                raise KeyError(f"Entry '{entry.id}' not found")
            self._entries[entry.id] = entry.model_copy()
        return entry

    def delete(self, entry_id: str) -> bool:
        with self._lock:
            return self._entries.pop(entry_id, None) is not None

    def purge(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count


class _ActivityFile(BaseModel):
    entries: list[ActivityEntry] = Field(default_factory=list)


class JsonActivityRepository(InMemoryActivityRepository):
    """Repository persisted to a single JSON file after every write."""

    def __init__(self, base_dir: Path = DEFAULT_BASE_DIR) -> None:
        self.path = Path(base_dir) / ACTIVITY_FILE_NAME
        super().__init__(self._load())

    def _load(self) -> list[ActivityEntry]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text())
        return _ActivityFile.model_validate(data).entries

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            payload = _ActivityFile(entries=list(self._entries.values()))
            self.path.write_text(payload.model_dump_json(indent=2))
        logger.debug("Saved %d entries to %s", len(payload.entries), self.path)

    def add(self, entry: ActivityEntry) -> ActivityEntry:
        super().add(entry)
        self._save()
        return entry

    def update(self, entry: ActivityEntry) -> ActivityEntry:
        super().update(entry)
        self._save()
        return entry

    def delete(self, entry_id: str) -> bool:
        removed = super().delete(entry_id)
        if removed:
            self._save()
        return removed

    def purge(self) -> int:
        count = super().purge()
        self._save()
        return count

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Storage for calculation metadata records."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from carbon_esg.audit.models import CalculationMetadata, EntityType
from carbon_esg.data.repository import DEFAULT_BASE_DIR

logger = logging.getLogger(__name__)

METADATA_FILE_NAME = "calculation_metadata.json"


@runtime_checkable
class MetadataRepository(Protocol):
    """Storage contract used by :class:`~carbon_esg.audit.metadata.MetadataService`."""

    def get(self, metadata_id: str) -> Optional[CalculationMetadata]: ...

    def list_for_entity(
        self, entity_type: EntityType, entity_id: str
    ) -> list[CalculationMetadata]: ...

    def list_all(self) -> list[CalculationMetadata]: ...

    def save(self, record: CalculationMetadata) -> CalculationMetadata: ...


class InMemoryMetadataRepository:
    """Process-local metadata store, keyed by record id."""

    def __init__(self, records: list[CalculationMetadata] | None = None) -> None:
        self._records: dict[str, CalculationMetadata] = {}
        self._lock = threading.Lock()
        for record in records or []:
            self._records[record.id] = record

    def get(self, metadata_id: str) -> Optional[CalculationMetadata]:
        with self._lock:
            return self._records.get(metadata_id)

    def list_for_entity(
        self, entity_type: EntityType, entity_id: str
    ) -> list[CalculationMetadata]:
        with self._lock:
            return [
                r for r in self._records.values()
                if r.entity_type == entity_type and r.entity_id == entity_id
            ]

    def list_all(self) -> list[CalculationMetadata]:
        with self._lock:
            return list(self._records.values())

    def save(self, record: CalculationMetadata) -> CalculationMetadata:
        # Records are frozen, so storing the instance itself is safe
        with self._lock:
            self._records[record.id] = record
        return record


class _MetadataFile(BaseModel):
    records: list[CalculationMetadata] = Field(default_factory=list)


class JsonMetadataRepository(InMemoryMetadataRepository):
    """Metadata store persisted to one JSON file after every save."""

    def __init__(self, base_dir: Path = DEFAULT_BASE_DIR) -> None:
        self.path = Path(base_dir) / METADATA_FILE_NAME
        super().__init__(self._load())

    def _load(self) -> list[CalculationMetadata]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text())
        return _MetadataFile.model_validate(data).records

    def save(self, record: CalculationMetadata) -> CalculationMetadata:
        super().save(record)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # File always holds the newest snapshot
        with self._lock:
            payload = _MetadataFile(records=list(self._records.values()))
            self.path.write_text(payload.model_dump_json(indent=2))
        logger.debug("Saved %d metadata records to %s", len(payload.records), self.path)
        return record

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Versioned calculation metadata service.

Every recalculation that changes a factor or methodology goes through
:meth:`MetadataService.new_version`, which writes a new record instead of
touching the previous one.  The chain of ``previous_version_id`` links is
the audit trail.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from carbon_esg.audit.models import (
    REGULATION_REFERENCES,
    Assumption,
    CalculationMetadata,
    DataSource,
    EntityType,
    FactorSource,
    ImpactLevel,
    UncertaintyMethod,
    VerificationStatus,
)
from carbon_esg.audit.store import InMemoryMetadataRepository, MetadataRepository
from carbon_esg.errors import MetadataNotFoundError

logger = logging.getLogger(__name__)

# Relative uncertainty applied when no better estimate is available
ACTUAL_DATA_UNCERTAINTY = 5.0
DEFAULT_DATA_UNCERTAINTY = 15.0

# Fields a new version may not change
_IMMUTABLE_FIELDS = frozenset({
    "id",
    "organisation_id",
    "entity_type",
    "entity_id",
    "calculation_version",
    "previous_version_id",
    "change_reason",
    "verification_status",
    "verified_by",
    "verified_at",
    "created_at",
})


def default_metadata(
    entity_type: EntityType,
    entity_id: str,
    sector: str,
    factor: float,
    is_actual_data: bool,
    organisation_id: str = "",
) -> CalculationMetadata:
    """Build the metadata a calculation gets when nothing else is known.

    Actual supplier data is referenced to the direct-emissions methodology
    with 5 % statistical uncertainty.  Otherwise the EU default values are
    assumed, with 15 % conservative uncertainty and an explicit assumption.
    """
    methodology = REGULATION_REFERENCES["methodology"]
    sector_ref = REGULATION_REFERENCES["sectors"].get(sector)
    regulation = REGULATION_REFERENCES["main"]
    if sector_ref:
        regulation = f"{regulation}; {sector_ref}"

    if is_actual_data:
        return CalculationMetadata(
            organisation_id=organisation_id,
            entity_type=entity_type,
            entity_id=entity_id,
            emission_factor_source=FactorSource.ACTUAL,
            emission_factor_value=factor,
            regulation_reference=regulation,
            methodology_reference=methodology["direct"],
            uncertainty_percent=ACTUAL_DATA_UNCERTAINTY,
            uncertainty_method=UncertaintyMethod.STATISTICAL,
            data_source=DataSource.SUPPLIER_DECLARATION,
        )

    return CalculationMetadata(
        organisation_id=organisation_id,
        entity_type=entity_type,
        entity_id=entity_id,
        emission_factor_source=FactorSource.EU_DEFAULT,
        emission_factor_value=factor,
        regulation_reference=regulation,
        methodology_reference=methodology["default_values"],
        default_factor_source=REGULATION_REFERENCES["implementation"],
        assumptions=(
            Assumption(
                id="default_1",
                description="EU default values used in the absence of actual supplier data",
                impact=ImpactLevel.HIGH,
                justification="Article 4 of Implementing Regulation 2023/1773",
            ),
        ),
        uncertainty_percent=DEFAULT_DATA_UNCERTAINTY,
        uncertainty_method=UncertaintyMethod.CONSERVATIVE,
        data_source=DataSource.DEFAULT,
    )


class MetadataService:
    """Create, version, verify and export calculation metadata.

    Usage::

        service = MetadataService(JsonMetadataRepository())
        first = service.create(default_metadata(EntityType.PRODUCT, "p1", "cement", 0.9, False))
        second = service.new_version(first.id, {"emission_factor_value": 0.85}, "Supplier data")
    """

    def __init__(self, repository: Optional[MetadataRepository] = None) -> None:
        self.repository = repository or InMemoryMetadataRepository()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, metadata_id: str) -> CalculationMetadata:
        record = self.repository.get(metadata_id)
        if record is None:
            raise MetadataNotFoundError(f"No calculation metadata with id '{metadata_id}'")
        return record

    def history(self, entity_type: EntityType, entity_id: str) -> list[CalculationMetadata]:
        """All versions for an entity, newest first."""
        records = self.repository.list_for_entity(entity_type, entity_id)
        return sorted(records, key=lambda r: r.calculation_version, reverse=True)

    def latest(self, entity_type: EntityType, entity_id: str) -> Optional[CalculationMetadata]:
        chain = self.history(entity_type, entity_id)
        return chain[0] if chain else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _next_version(self, entity_type: EntityType, entity_id: str) -> int:
        current = self.latest(entity_type, entity_id)
        return current.calculation_version + 1 if current else 1

    def create(self, draft: CalculationMetadata) -> CalculationMetadata:
        """Store *draft* as the next version for its entity, unverified."""
        record = draft.model_copy(update={
            "calculation_version": self._next_version(draft.entity_type, draft.entity_id),
            "verification_status": VerificationStatus.UNVERIFIED,
            "verified_by": None,
            "verified_at": None,
            "created_at": datetime.now(timezone.utc),
        })
        self.repository.save(record)
        logger.info(
            "Created metadata v%d for %s/%s",
            record.calculation_version, record.entity_type.value, record.entity_id,
        )
        return record

    def new_version(
        self,
        previous_id: str,
        updates: Mapping[str, Any],
        reason: str,
    ) -> CalculationMetadata:
        """Write a new record derived from *previous_id*.

        The previous record is left untouched.  The new record starts
        unverified and links back through ``previous_version_id``.

        Raises:
            MetadataNotFoundError: *previous_id* does not exist.
            ValueError: *updates* tries to change an identity field.
        """
        previous = self.get(previous_id)
        forbidden = _IMMUTABLE_FIELDS.intersection(updates)
        if forbidden:
            raise ValueError(f"Cannot change {sorted(forbidden)} in a new version")

        base = previous.model_dump(exclude=_IMMUTABLE_FIELDS | {"id"})
        record = CalculationMetadata.model_validate({
            **base,
            **updates,
            "organisation_id": previous.organisation_id,
            "entity_type": previous.entity_type,
            "entity_id": previous.entity_id,
            "calculation_version": self._next_version(previous.entity_type, previous.entity_id),
            "previous_version_id": previous.id,
            "change_reason": reason,
        })
        self.repository.save(record)
        logger.info(
            "Created metadata v%d for %s/%s (from v%d): %s",
            record.calculation_version, record.entity_type.value, record.entity_id,
            previous.calculation_version, reason,
        )
        return record

    def verify(
        self,
        metadata_id: str,
        status: VerificationStatus,
        verifier: str,
    ) -> CalculationMetadata:
        """Record a verification decision on an existing version.

        Only the verification fields change; the calculation content and
        version number stay as they were.
        """
        if status not in (VerificationStatus.VERIFIED, VerificationStatus.REJECTED):
            raise ValueError(f"Verification status must be verified or rejected, got {status.value}")

        record = self.get(metadata_id).model_copy(update={
            "verification_status": status,
            "verified_by": verifier,
            "verified_at": datetime.now(timezone.utc),
        })
        self.repository.save(record)
        logger.info("Metadata %s marked %s by %s", metadata_id, status.value, verifier)
        return record

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_for_audit(
        self,
        organisation_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[CalculationMetadata]:
        """Records in a date window, oldest first."""
        records = [
            r for r in self.repository.list_all()
            if (organisation_id is None or r.organisation_id == organisation_id)
            and (date_from is None or r.created_at >= date_from)
            and (date_to is None or r.created_at <= date_to)
        ]
        records.sort(key=lambda r: r.created_at)
        logger.info("Exported %d metadata records for audit", len(records))
        return records

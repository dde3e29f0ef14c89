# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Versioned calculation metadata for audit traceability."""

from carbon_esg.audit.models import (
    Assumption,
    CalculationMetadata,
    DataSource,
    EntityType,
    FactorSource,
    ImpactLevel,
    UncertaintyMethod,
    VerificationStatus,
)
from carbon_esg.audit.metadata import MetadataService, default_metadata
from carbon_esg.audit.store import (
    InMemoryMetadataRepository,
    JsonMetadataRepository,
    MetadataRepository,
)

__all__ = [
    "Assumption",
    "CalculationMetadata",
    "DataSource",
    "EntityType",
    "FactorSource",
    "ImpactLevel",
    "InMemoryMetadataRepository",
    "JsonMetadataRepository",
    "MetadataRepository",
    "MetadataService",
    "UncertaintyMethod",
    "VerificationStatus",
    "default_metadata",
]

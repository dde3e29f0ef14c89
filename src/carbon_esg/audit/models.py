# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Calculation metadata models for audit traceability.

A :class:`CalculationMetadata` record is immutable.  Recalculations create
a new record linked to its predecessor through ``previous_version_id``.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EntityType(str, Enum):
    """Kind of object a calculation refers to."""

    SHIPMENT_ITEM = "shipment_item"
    PRODUCT = "product"
    EMISSIONS_DATA = "emissions_data"


class FactorSource(str, Enum):
    """Provenance of the emission factor used."""

    EU_DEFAULT = "EU_DEFAULT"
    ACTUAL = "ACTUAL"
    HYBRID = "HYBRID"
    CUSTOM = "CUSTOM"


class UncertaintyMethod(str, Enum):
    STATISTICAL = "statistical"
    CONSERVATIVE = "conservative"
    EXPERT_JUDGMENT = "expert_judgment"


class DataSource(str, Enum):
    SUPPLIER_DECLARATION = "supplier_declaration"
    MEASUREMENT = "measurement"
    DEFAULT = "default"
    ESTIMATION = "estimation"


class VerificationStatus(str, Enum):
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ImpactLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ---------------------------------------------------------------------------
# Regulatory references
# ---------------------------------------------------------------------------

REGULATION_REFERENCES = {
    "main": "Regulation (EU) 2023/956 of 10 May 2023",
    "implementation": "Implementing Regulation (EU) 2023/1773 of 17 August 2023",
    "transition": "Delegated Regulation (EU) 2023/1774 of 17 August 2023",
    "methodology": {
        "direct": "Annex IV, Section 2 - Direct emissions",
        "indirect": "Annex IV, Section 3 - Indirect emissions",
        "precursors": "Annex IV, Section 4 - Precursors",
        "default_values": "Annex III - Default values",
    },
    "sectors": {
        "cement": "Annex I, Category 2520",
        "iron_steel": "Annex I, Category 7201-7229",
        "aluminium": "Annex I, Category 7601-7609",
        "fertilizers": "Annex I, Category 2808-3105",
        "electricity": "Annex I, Category 2716",
        "hydrogen": "Annex I, Category 2804",
    },
}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class Assumption(BaseModel):
    """A documented assumption behind a calculation."""

    model_config = {"frozen": True}

    id: str
    description: str
    impact: ImpactLevel = ImpactLevel.MEDIUM
    justification: str = ""


class SupportingDocument(BaseModel):
    model_config = {"frozen": True}

    id: str
    name: str
    type: str = ""
    path: str = ""
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CalculationMetadata(BaseModel):
    """Versioned, immutable traceability record for one calculation."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    organisation_id: str = Field(default="")
    entity_type: EntityType
    entity_id: str
    calculation_version: int = Field(default=1, ge=1)

    emission_factor_source: FactorSource
    emission_factor_value: Optional[float] = Field(default=None, ge=0)
    emission_factor_unit: str = Field(default="tCO2e/t")
    regulation_reference: str = ""
    methodology_reference: str = ""
    default_factor_source: str = ""
    assumptions: tuple[Assumption, ...] = Field(default=())

    uncertainty_percent: Optional[float] = Field(default=None, ge=0)
    uncertainty_method: Optional[UncertaintyMethod] = None
    data_source: DataSource = DataSource.ESTIMATION
    supporting_documents: tuple[SupportingDocument, ...] = Field(default=())

    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None

    previous_version_id: Optional[str] = None
    change_reason: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def entity_key(self) -> tuple[EntityType, str]:
        return (self.entity_type, self.entity_id)

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""carbon-esg - carbon accounting and ESG scoring core."""

__version__ = "0.1.0"

from carbon_esg.data.models import (
    ActivityEntry,
    CarbonReport,
    ComplianceResult,
    ESGScore,
    EntryStatus,
    Gas,
    Scope,
    ScopeTotals,
    SectorScore,
    UncertaintyBand,
)
from carbon_esg.config import EngineConfig, load_config
from carbon_esg.errors import CalcError, CalcResult, ErrorCode
from carbon_esg.scoring.engine import ScoringEngine

__all__ = [
    "ActivityEntry",
    "CalcError",
    "CalcResult",
    "CarbonReport",
    "ComplianceResult",
    "ESGScore",
    "EngineConfig",
    "EntryStatus",
    "ErrorCode",
    "Gas",
    "Scope",
    "ScopeTotals",
    "ScoringEngine",
    "SectorScore",
    "UncertaintyBand",
    "load_config",
]

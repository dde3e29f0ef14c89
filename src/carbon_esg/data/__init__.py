# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Data models, default emission factors, and entry repositories."""

from carbon_esg.data.models import (
    ActivityEntry,
    EntryStatus,
    Gas,
    Scope,
    SourceType,
)
from carbon_esg.data.factors import DEFAULT_EMISSION_FACTORS, EmissionFactor, get_factor
from carbon_esg.data.repository import (
    ActivityRepository,
    InMemoryActivityRepository,
    JsonActivityRepository,
)

__all__ = [
    "ActivityEntry",
    "ActivityRepository",
    "DEFAULT_EMISSION_FACTORS",
    "EmissionFactor",
    "EntryStatus",
    "Gas",
    "InMemoryActivityRepository",
    "JsonActivityRepository",
    "Scope",
    "SourceType",
    "get_factor",
]

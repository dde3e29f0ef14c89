# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Emission calculation and scope aggregation.

Every function here works on a snapshot of its input so that a caller
mutating the entry list mid-computation cannot produce a torn read.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional

from carbon_esg.data.models import ActivityEntry, Gas, Scope, ScopeTotals
from carbon_esg.emissions.gwp import gwp_for
from carbon_esg.errors import CalcResult, ErrorCode

logger = logging.getLogger(__name__)


def compute_emissions(
    quantity: float,
    factor: float,
    gas: Gas = Gas.CO2,
    gwp: Optional[Mapping[Gas, float]] = None,
) -> CalcResult[float]:
    """Return ``quantity * factor * GWP(gas)`` in kg CO2e.

    Negative inputs are rejected with an error value rather than clamped.
    """
    if math.isnan(quantity) or quantity < 0:
        return CalcResult[float].failure(
            ErrorCode.NEGATIVE_QUANTITY, f"Quantity must be >= 0, got {quantity}"
        )
    if math.isnan(factor) or factor < 0:
        return CalcResult[float].failure(
            ErrorCode.NEGATIVE_FACTOR, f"Emission factor must be >= 0, got {factor}"
        )
    return CalcResult[float].success(quantity * factor * gwp_for(gas, gwp))


def entry_emissions(
    entry: ActivityEntry, gwp: Optional[Mapping[Gas, float]] = None
) -> float:
    """CO2e of *entry*, honouring a GWP override table when given."""
    if gwp is None:
        return entry.emissions
    return entry.quantity * entry.emission_factor_value * gwp_for(entry.gas, gwp)


def snapshot(entries: Iterable[ActivityEntry]) -> tuple[ActivityEntry, ...]:
    """Immutable copy of the entry sequence taken before computing."""
    return tuple(entries)


def aggregate_by_scope(
    entries: Iterable[ActivityEntry],
    gwp: Optional[Mapping[Gas, float]] = None,
) -> ScopeTotals:
    """Sum CO2e per scope over all countable entries.

    The grand total is derived from the three scope sums, so it always
    equals their sum exactly.  An empty input yields all-zero totals.
    """
    sums = {scope: 0.0 for scope in Scope}
    counted = 0
    for entry in snapshot(entries):
        if not entry.counts_toward_reporting:
            continue
        sums[entry.scope] += entry_emissions(entry, gwp)
        counted += 1

    logger.debug(
        "Aggregated %d entries: %s",
        counted,
        {s.value: round(v, 3) for s, v in sums.items()},
    )
    return ScopeTotals(
        scope1=sums[Scope.scope1],
        scope2=sums[Scope.scope2],
        scope3=sums[Scope.scope3],
        entry_count=counted,
    )


def aggregate_by_category(
    entries: Iterable[ActivityEntry],
    gwp: Optional[Mapping[Gas, float]] = None,
) -> dict[str, float]:
    """CO2e per category key, largest first, for drill-down views."""
    sums: dict[str, float] = {}
    for entry in snapshot(entries):
        if not entry.counts_toward_reporting:
            continue
        key = entry.category or "uncategorised"
        sums[key] = sums.get(key, 0.0) + entry_emissions(entry, gwp)
    return dict(sorted(sums.items(), key=lambda kv: kv[1], reverse=True))

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Uncertainty propagation following the GUM (ISO/IEC Guide 98-3).

Independent contributions are combined by root-sum-square; no covariance
terms are modelled.  The expanded uncertainty is ``U = k * u_c`` with a
configurable coverage factor ``k``.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Iterable, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field

from carbon_esg.data.models import ActivityEntry, Gas, Scope, UncertaintyBand
from carbon_esg.emissions.aggregation import entry_emissions, snapshot
from carbon_esg.errors import CalcResult, ErrorCode

logger = logging.getLogger(__name__)

# k = 2 gives ~95 % coverage under a normal approximation
DEFAULT_COVERAGE_FACTOR = 2.0

# Student-t coverage factors for 95 % confidence, by minimum dof
_T_TABLE_95: tuple[tuple[float, float], ...] = (
    (120, 1.96),
    (60, 2.00),
    (30, 2.04),
    (20, 2.09),
    (10, 2.23),
)
_T_FLOOR_95 = 2.50


class MissingUncertaintyPolicy(str, Enum):
    """What to do with a source whose uncertainty is unknown."""

    ZERO = "zero"
    INVALIDATE = "invalidate"


class UncertaintyComponent(BaseModel):
    """One input quantity's contribution to the combined uncertainty."""

    source: str
    value: float = 0.0
    standard_uncertainty: float = Field(..., ge=0, description="u(x_i)")
    sensitivity_coefficient: float = Field(default=1.0, description="c_i = df/dx_i")
    degrees_of_freedom: Optional[float] = Field(
        default=None, gt=0, description="nu_i; None means effectively infinite"
    )

    @property
    def contribution(self) -> float:
        """|c_i * u(x_i)|."""
        return abs(self.sensitivity_coefficient * self.standard_uncertainty)


# ---------------------------------------------------------------------------
# Core formulas
# ---------------------------------------------------------------------------

def combined_uncertainty(values: Iterable[float]) -> float:
    """Root-sum-square of independent standard uncertainties."""
    return math.sqrt(math.fsum(u * u for u in values))


def expanded_uncertainty(
    standard: float, k: float = DEFAULT_COVERAGE_FACTOR
) -> CalcResult[float]:
    """U = k * u_c."""
    if k <= 0:
        return CalcResult[float].failure(
            ErrorCode.INVALID_COVERAGE_FACTOR, f"Coverage factor must be > 0, got {k}"
        )
    return CalcResult[float].success(k * standard)


def combine_components(components: Sequence[UncertaintyComponent]) -> float:
    """u_c from sensitivity-weighted components."""
    return combined_uncertainty(c.contribution for c in components)


def effective_degrees_of_freedom(
    components: Sequence[UncertaintyComponent],
) -> Optional[float]:
    """Welch-Satterthwaite nu_eff; None when unbounded."""
    if not components:
        return None
    variance = math.fsum(c.contribution ** 2 for c in components)
    denominator = math.fsum(
        c.contribution ** 4 / c.degrees_of_freedom
        for c in components
        if c.degrees_of_freedom is not None
    )
    if denominator == 0:
        return None
    return variance ** 2 / denominator


def coverage_factor_for(degrees_of_freedom: Optional[float]) -> float:
    """Approximate Student-t factor for 95 % confidence."""
    if degrees_of_freedom is None:
        return _T_TABLE_95[0][1]
    for min_dof, k in _T_TABLE_95:
        if degrees_of_freedom >= min_dof:
            return k
    return _T_FLOOR_95


# ---------------------------------------------------------------------------
# Entry-level propagation
# ---------------------------------------------------------------------------

def _resolve_k(
    coverage_factor: Union[float, Literal["auto"]],
    components: Sequence[UncertaintyComponent],
) -> float:
    if coverage_factor == "auto":
        return coverage_factor_for(effective_degrees_of_freedom(components))
    return float(coverage_factor)


def band_for(
    entries: Sequence[ActivityEntry],
    policy: MissingUncertaintyPolicy = MissingUncertaintyPolicy.INVALIDATE,
    coverage_factor: Union[float, Literal["auto"]] = DEFAULT_COVERAGE_FACTOR,
    gwp: Optional[Mapping[Gas, float]] = None,
) -> CalcResult[UncertaintyBand]:
    """Combine the uncertainties of *entries* into one band."""
    components: list[UncertaintyComponent] = []
    missing: list[str] = []
    emissions = 0.0

    for entry in entries:
        value = entry_emissions(entry, gwp)
        emissions += value
        if entry.uncertainty_percent is None:
            missing.append(entry.id)
            continue
        components.append(UncertaintyComponent(
            source=entry.id,
            value=value,
            standard_uncertainty=value * entry.uncertainty_percent / 100.0,
        ))

    if missing and policy is MissingUncertaintyPolicy.INVALIDATE:
        return CalcResult[UncertaintyBand].failure(
            ErrorCode.MISSING_UNCERTAINTY,
            f"{len(missing)} source(s) have no uncertainty: {', '.join(missing)}",
        )

    k = _resolve_k(coverage_factor, components)
    if k <= 0:
        return CalcResult[UncertaintyBand].failure(
            ErrorCode.INVALID_COVERAGE_FACTOR, f"Coverage factor must be > 0, got {k}"
        )

    return CalcResult[UncertaintyBand].success(UncertaintyBand(
        emissions=emissions,
        standard=combine_components(components),
        coverage_factor=k,
        effective_degrees_of_freedom=effective_degrees_of_freedom(components),
        source_count=len(components),
        missing_sources=missing,
    ))


def propagate(
    entries: Iterable[ActivityEntry],
    policy: MissingUncertaintyPolicy = MissingUncertaintyPolicy.INVALIDATE,
    coverage_factor: Union[float, Literal["auto"]] = DEFAULT_COVERAGE_FACTOR,
    gwp: Optional[Mapping[Gas, float]] = None,
) -> tuple[dict[Scope, CalcResult[UncertaintyBand]], CalcResult[UncertaintyBand]]:
    """Per-scope bands plus the band for the grand total.

    Sources are assumed independent, so the total band combines all
    entries directly rather than the three scope bands.
    """
    countable = [e for e in snapshot(entries) if e.counts_toward_reporting]

    by_scope: dict[Scope, CalcResult[UncertaintyBand]] = {}
    for scope in Scope:
        scoped = [e for e in countable if e.scope == scope]
        by_scope[scope] = band_for(scoped, policy, coverage_factor, gwp)

    total = band_for(countable, policy, coverage_factor, gwp)
    if not total.ok:
        logger.debug("Total uncertainty band invalid: %s", total.error.message)
    return by_scope, total

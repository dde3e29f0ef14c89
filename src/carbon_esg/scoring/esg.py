# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""ESG indicator, pillar, and composite scoring.

Each indicator is normalised to 0-100, pillars are the weighted mean of
their indicators (with sector multipliers), and the composite is the
weighted sum of the pillar scores.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from carbon_esg.config import GradeBand
from carbon_esg.data.models import (
    ESGCategory,
    ESGIndicator,
    ESGScore,
    IndicatorType,
    PillarScore,
)
from carbon_esg.errors import CalcResult, ErrorCode
from carbon_esg.scoring.thresholds import INDICATOR_BENCHMARKS, IndicatorBenchmark, esg_grade
from carbon_esg.scoring.weights import SECTOR_WEIGHT_MULTIPLIERS, WEIGHT_SUM_TOLERANCE

logger = logging.getLogger(__name__)

# Score given to a numeric indicator with no benchmark range
NO_BENCHMARK_SCORE = 50.0


# ---------------------------------------------------------------------------
# Calculated indicators
# ---------------------------------------------------------------------------

def _numeric(category: ESGCategory, indicator_id: str) -> float:
    indicator = category.get(indicator_id)
    if indicator is None or indicator.value is None or isinstance(indicator.value, bool):
        return 0.0
    return float(indicator.value)


def refresh_calculated_indicators(
    categories: Sequence[ESGCategory], revenue_thousands: Optional[float]
) -> list[ESGCategory]:
    """Recompute E2 (energy intensity) and E8 (carbon intensity).

    Revenue is in thousands of currency units, the same unit as the sector
    intensity.  E2 = E1 / revenue and E8 = (E6 + E7) / (revenue / 1e6) with
    revenue in currency units.  When revenue is missing or not positive both
    are left undefined.  The input is not modified; updated copies are
    returned.
    """
    refreshed = [c.model_copy(deep=True) for c in categories]
    valid_revenue = revenue_thousands is not None and revenue_thousands > 0
    revenue = revenue_thousands * 1000.0 if valid_revenue else 0.0

    for category in refreshed:
        e2 = category.get("E2")
        e8 = category.get("E8")
        if e2 is None and e8 is None:
            continue
        if not valid_revenue:
            for indicator in (e2, e8):
                if indicator is not None:
                    indicator.value = None
            continue
        if e2 is not None:
            e2.value = _numeric(category, "E1") / revenue
        if e8 is not None:
            e8.value = (_numeric(category, "E6") + _numeric(category, "E7")) / (revenue / 1e6)

    return refreshed


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def _normalise(value: float, bench: IndicatorBenchmark) -> float:
    if bench.inverse:
        if value <= bench.optimal:
            score = 100.0
        elif value >= bench.max:
            score = 0.0
        else:
            score = 100.0 - (value - bench.optimal) / (bench.max - bench.optimal) * 100.0
    else:
        if value >= bench.optimal:
            score = 100.0
        elif value <= bench.min:
            score = 0.0
        else:
            score = (value - bench.min) / (bench.optimal - bench.min) * 100.0
    return max(0.0, min(100.0, score))


def score_indicator(
    indicator: ESGIndicator,
    benchmarks: Mapping[str, IndicatorBenchmark] = INDICATOR_BENCHMARKS,
) -> float:
    """Score one indicator on a 0-100 scale.

    Binary indicators score 100 only when the value is ``True``.  A numeric
    or calculated indicator without a value scores 0; one without a
    benchmark range scores a neutral 50.
    """
    if indicator.type is IndicatorType.binary:
        return 100.0 if indicator.value is True else 0.0

    if indicator.value is None:
        return 0.0
    bench = benchmarks.get(indicator.id)
    if bench is None:
        return NO_BENCHMARK_SCORE
    return _normalise(float(indicator.value), bench)


def score_pillar(
    category: ESGCategory,
    sector: str = "",
    benchmarks: Mapping[str, IndicatorBenchmark] = INDICATOR_BENCHMARKS,
) -> float:
    """Weighted mean of indicator scores, with sector multipliers applied."""
    multipliers = SECTOR_WEIGHT_MULTIPLIERS.get(sector.strip().lower(), {}) if sector else {}

    total_weight = 0.0
    weighted = 0.0
    for indicator in category.indicators:
        w = indicator.weight * multipliers.get(indicator.id, 1.0)
        weighted += score_indicator(indicator, benchmarks) * w
        total_weight += w

    if total_weight == 0:
        return 0.0
    return round(min(100.0, weighted / total_weight), 2)


def score_esg(
    categories: Sequence[ESGCategory],
    sector: str = "",
    weights: Optional[Mapping[str, float]] = None,
    bands: Optional[Sequence[GradeBand]] = None,
) -> CalcResult[ESGScore]:
    """Composite ESG score.

    Args:
        categories: One category per pillar.
        sector: Sector key, used for indicator multipliers.
        weights: Pillar weights keyed ``"E"``, ``"S"``, ``"G"``.  Defaults
            to each category's own weight.  Must sum to 1.0.
        bands: Optional override of the grade table.
    """
    resolved = {
        c.pillar.value: (weights[c.pillar.value] if weights and c.pillar.value in weights else c.weight)
        for c in categories
    }
    weight_sum = sum(resolved.values())
    if any(w < 0 for w in resolved.values()) or abs(weight_sum - 1.0) > WEIGHT_SUM_TOLERANCE:
        return CalcResult[ESGScore].failure(
            ErrorCode.INVALID_WEIGHTS,
            f"Pillar weights must be >= 0 and sum to 1.0, got {resolved} (sum {weight_sum:.6f})",
        )

    pillars = [
        PillarScore(
            pillar=c.pillar,
            score=score_pillar(c, sector),
            weight=resolved[c.pillar.value],
        )
        for c in categories
    ]
    total = round(min(100.0, sum(p.score * p.weight for p in pillars)), 2)
    grade = esg_grade(total, bands)

    logger.debug(
        "ESG composite %.2f (%s): %s",
        total, grade.value, {p.pillar.value: p.score for p in pillars},
    )
    return CalcResult[ESGScore].success(
        ESGScore(total=total, grade=grade, pillars=pillars, sector=sector)
    )

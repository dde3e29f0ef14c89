# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Sector-relative scoring of emissions intensity.

Intensity is expressed in tonnes CO2e per thousand units of revenue and
graded against the benchmark of the organisation's sector.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from carbon_esg.config import LadderConfig
from carbon_esg.data.models import SectorBenchmark, SectorScore
from carbon_esg.errors import CalcResult, ErrorCode
from carbon_esg.scoring.thresholds import (
    SECTOR_BENCHMARKS,
    performance_level,
    sector_grade,
)

logger = logging.getLogger(__name__)


def emissions_intensity(
    total_emissions_kg: float, revenue_thousands: Optional[float]
) -> CalcResult[float]:
    """Tonnes CO2e per thousand of revenue."""
    if revenue_thousands is None or math.isnan(revenue_thousands) or revenue_thousands <= 0:
        return CalcResult[float].failure(
            ErrorCode.NON_POSITIVE_REVENUE,
            f"Revenue must be > 0 to compute intensity, got {revenue_thousands}",
        )
    if total_emissions_kg < 0:
        return CalcResult[float].failure(
            ErrorCode.NEGATIVE_QUANTITY,
            f"Total emissions must be >= 0, got {total_emissions_kg}",
        )
    return CalcResult[float].success((total_emissions_kg / 1000.0) / revenue_thousands)


def resolve_benchmark(
    sector: Optional[str],
    extra_sectors: Iterable[SectorBenchmark] = (),
) -> Optional[SectorBenchmark]:
    """Look up *sector* among the built-in and configured benchmarks."""
    if not sector:
        return None
    key = sector.strip().lower()
    for extra in extra_sectors:
        if extra.key.lower() == key:
            return extra
    return SECTOR_BENCHMARKS.get(key)


def score_sector(
    intensity: float,
    sector: Optional[str],
    ladder: Optional[LadderConfig] = None,
    extra_sectors: Iterable[SectorBenchmark] = (),
) -> CalcResult[SectorScore]:
    """Grade *intensity* against the benchmark of *sector*."""
    benchmark = resolve_benchmark(sector, extra_sectors)
    if benchmark is None:
        return CalcResult[SectorScore].failure(
            ErrorCode.UNKNOWN_SECTOR, f"Unknown sector: {sector!r}"
        )
    if math.isnan(intensity) or intensity < 0:
        return CalcResult[SectorScore].failure(
            ErrorCode.NEGATIVE_QUANTITY, f"Intensity must be >= 0, got {intensity}"
        )

    score, grade = sector_grade(intensity, benchmark, ladder)
    logger.debug(
        "Sector %s: intensity %.3f -> %s (%d)", benchmark.key, intensity, grade.value, score
    )
    return CalcResult[SectorScore].success(SectorScore(
        sector=benchmark.key,
        intensity=intensity,
        score=score,
        grade=grade,
        level=performance_level(intensity, benchmark),
        benchmark=benchmark,
    ))


def score_sector_emissions(
    total_emissions_kg: float,
    revenue_thousands: Optional[float],
    sector: Optional[str],
    ladder: Optional[LadderConfig] = None,
    extra_sectors: Iterable[SectorBenchmark] = (),
) -> CalcResult[SectorScore]:
    """Intensity then grade; the first error short-circuits."""
    intensity = emissions_intensity(total_emissions_kg, revenue_thousands)
    if not intensity.ok:
        return CalcResult[SectorScore](error=intensity.error)
    return score_sector(intensity.value, sector, ladder, extra_sectors)

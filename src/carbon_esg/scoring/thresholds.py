# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Grade thresholds, sector benchmarks, and indicator benchmark ranges.

All benchmark values are documented with their scoring implications
so that auditors can trace every score back to a concrete reference.
"""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from carbon_esg.config import GradeBand, LadderConfig
from carbon_esg.data.models import (
    ESGGrade,
    ESGPeerBenchmark,
    PerformanceLevel,
    Pillar,
    SectorBenchmark,
    SectorGrade,
)

# ---------------------------------------------------------------------------
# Sector intensity benchmarks (tCO2e per thousand of revenue)
# ---------------------------------------------------------------------------
_UNIT = "tCO2e/k-revenue"

SECTOR_BENCHMARKS: dict[str, SectorBenchmark] = {
    b.key: b
    for b in (
        SectorBenchmark(
            key="manufacturing", name="Manufacturing",
            average=2.5, top_performers=1.2, threshold=3.0, unit=_UNIT,
            regulations=("CSRD", "CBAM"),
        ),
        SectorBenchmark(
            key="services", name="Services",
            average=0.8, top_performers=0.4, threshold=1.2, unit=_UNIT,
            regulations=("CSRD",),
        ),
        SectorBenchmark(
            key="retail", name="Retail",
            average=1.8, top_performers=0.9, threshold=2.2, unit=_UNIT,
            regulations=("CSRD", "Loi AGEC"),
        ),
        SectorBenchmark(
            key="transport", name="Transport & logistics",
            average=4.2, top_performers=2.8, threshold=5.0, unit=_UNIT,
            regulations=("CSRD", "CBAM", "ZFE"),
        ),
        SectorBenchmark(
            key="construction", name="Construction",
            average=3.8, top_performers=2.1, threshold=4.5, unit=_UNIT,
            regulations=("CSRD", "RE2020"),
        ),
        SectorBenchmark(
            key="agriculture", name="Agriculture",
            average=5.5, top_performers=3.2, threshold=7.0, unit=_UNIT,
            regulations=("PAC verte", "CSRD"),
        ),
        SectorBenchmark(
            key="technology", name="Technology",
            average=0.6, top_performers=0.2, threshold=0.9, unit=_UNIT,
            regulations=("CSRD", "RGPD energetique"),
        ),
        SectorBenchmark(
            key="energy", name="Energy",
            average=6.8, top_performers=3.5, threshold=8.5, unit=_UNIT,
            regulations=("CSRD", "CBAM", "EU ETS"),
        ),
    )
}

# ---------------------------------------------------------------------------
# Sector ladder scores (grade -> fixed score)
# ---------------------------------------------------------------------------
SCORE_A_PLUS = 95   # <= top performers
SCORE_A = 85        # <= average * a_ratio
SCORE_B_PLUS = 70   # <= average * b_plus_ratio
SCORE_B = 60        # <= average * b_ratio
SCORE_C = 45        # <= average * c_ratio
SCORE_D = 25        # above every bound

# ---------------------------------------------------------------------------
# ESG composite bands
# ---------------------------------------------------------------------------
ESG_GRADE_BANDS: tuple[GradeBand, ...] = (
    GradeBand(min=90, grade=ESGGrade.AAA),
    GradeBand(min=80, grade=ESGGrade.AA),
    GradeBand(min=70, grade=ESGGrade.A),
    GradeBand(min=60, grade=ESGGrade.BBB),
    GradeBand(min=50, grade=ESGGrade.BB),
    GradeBand(min=40, grade=ESGGrade.B),
    GradeBand(min=0, grade=ESGGrade.CCC),
)


# ---------------------------------------------------------------------------
# ESG peer scores by sector (composite and pillar averages, 0-100)
# ---------------------------------------------------------------------------

def _peers(key: str, name: str, average: float, top: float, e: float, s: float, g: float) -> ESGPeerBenchmark:
    return ESGPeerBenchmark(
        key=key, name=name, average=average, top=top,
        pillar_averages={Pillar.E: e, Pillar.S: s, Pillar.G: g},
    )


ESG_PEER_BENCHMARKS: dict[str, ESGPeerBenchmark] = {
    b.key: b
    for b in (
        _peers("textile", "Textile & clothing", 52, 78, 48, 55, 54),
        _peers("food_processing", "Food processing", 55, 82, 52, 58, 56),
        _peers("chemicals", "Chemicals", 48, 75, 42, 52, 50),
        _peers("mechanical", "Mechanical engineering", 50, 76, 46, 53, 52),
        _peers("electronics", "Electronics", 58, 85, 55, 60, 60),
        _peers("materials", "Building materials", 45, 72, 38, 50, 48),
        _peers("services", "Services", 62, 88, 65, 62, 60),
        _peers("banking", "Banking & finance", 65, 90, 70, 65, 62),
        _peers("energy", "Energy", 42, 70, 35, 48, 45),
        _peers("tourism", "Tourism", 53, 79, 50, 56, 54),
    )
}


# ---------------------------------------------------------------------------
# ESG indicator benchmark ranges
# ---------------------------------------------------------------------------

class IndicatorBenchmark(NamedTuple):
    """Linear normalisation range for a numeric indicator.

    ``inverse`` marks lower-is-better metrics: at or below ``optimal``
    scores 100, at or above ``max`` scores 0.  Otherwise at or above
    ``optimal`` scores 100 and at or below ``min`` scores 0.
    """

    min: float
    max: float
    optimal: float
    inverse: bool = False


INDICATOR_BENCHMARKS: dict[str, IndicatorBenchmark] = {
    # Environment (consumption metrics are lower-is-better)
    "E1": IndicatorBenchmark(10_000, 10_000_000, 50_000, inverse=True),
    "E2": IndicatorBenchmark(0.001, 0.5, 0.01, inverse=True),
    "E3": IndicatorBenchmark(0, 100, 50),
    "E4": IndicatorBenchmark(100, 500_000, 5_000, inverse=True),
    "E5": IndicatorBenchmark(0, 100, 30),
    "E6": IndicatorBenchmark(10, 50_000, 500, inverse=True),
    "E7": IndicatorBenchmark(10, 30_000, 300, inverse=True),
    "E8": IndicatorBenchmark(0.1, 100, 5, inverse=True),
    "E9": IndicatorBenchmark(1, 10_000, 100, inverse=True),
    "E10": IndicatorBenchmark(0, 100, 50),
    "E11": IndicatorBenchmark(0, 10_000_000, 500_000),
    # Social
    "S1": IndicatorBenchmark(10, 10_000, 500),
    "S2": IndicatorBenchmark(0, 100, 50),
    "S3": IndicatorBenchmark(0, 50, 0, inverse=True),
    "S4": IndicatorBenchmark(0, 50, 5, inverse=True),
    "S5": IndicatorBenchmark(0, 20, 2, inverse=True),
    "S6": IndicatorBenchmark(0, 50, 0, inverse=True),
    "S7": IndicatorBenchmark(0, 100, 40),
    "S8": IndicatorBenchmark(0, 10, 3),
    "S9": IndicatorBenchmark(0, 24, 12),
    "S10": IndicatorBenchmark(0, 100, 0, inverse=True),
    "S11": IndicatorBenchmark(0, 100, 80),
    "S12": IndicatorBenchmark(0, 1_000_000, 100_000),
    # Governance
    "G1": IndicatorBenchmark(0, 100, 40),
    "G2": IndicatorBenchmark(0, 100, 50),
    "G6": IndicatorBenchmark(0, 50_000_000, 5_000_000),
    "G9": IndicatorBenchmark(0, 100, 70),
}


# ---------------------------------------------------------------------------
# Utility functions
# ---------------------------------------------------------------------------

def sector_grade(
    intensity: float,
    benchmark: SectorBenchmark,
    ladder: Optional[LadderConfig] = None,
) -> tuple[int, SectorGrade]:
    """Place *intensity* on the sector ladder.

    Bounds are tested in order with ``<=``, so a value exactly on a
    boundary receives the better grade.

    Returns:
        ``(score, grade)``.
    """
    ladder = ladder or LadderConfig()
    avg = benchmark.average

    if intensity <= benchmark.top_performers:
        return SCORE_A_PLUS, SectorGrade.A_PLUS
    if intensity <= avg * ladder.a_ratio:
        return SCORE_A, SectorGrade.A
    if intensity <= avg * ladder.b_plus_ratio:
        return SCORE_B_PLUS, SectorGrade.B_PLUS
    if intensity <= avg * ladder.b_ratio:
        return SCORE_B, SectorGrade.B
    if intensity <= avg * ladder.c_ratio:
        return SCORE_C, SectorGrade.C
    return SCORE_D, SectorGrade.D


def performance_level(intensity: float, benchmark: SectorBenchmark) -> PerformanceLevel:
    """Four-level reading of *intensity* against the sector reference points."""
    if intensity <= benchmark.top_performers:
        return PerformanceLevel.excellent
    if intensity <= benchmark.average:
        return PerformanceLevel.good
    if intensity <= benchmark.threshold:
        return PerformanceLevel.average
    return PerformanceLevel.critical


def esg_grade(
    score: float, bands: Optional[Sequence[GradeBand]] = None
) -> ESGGrade:
    """Convert a 0-100 composite score to an ESG grade.

    Bands are checked from the highest minimum down; a score below
    every band falls to the last grade of the table.
    """
    table = sorted(bands or ESG_GRADE_BANDS, key=lambda b: b.min, reverse=True)
    for band in table:
        if score >= band.min:
            return band.grade
    return table[-1].grade

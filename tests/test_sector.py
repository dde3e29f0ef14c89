# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for sector-relative intensity scoring."""

from __future__ import annotations

import math

import pytest

from carbon_esg.config import LadderConfig
from carbon_esg.data.models import PerformanceLevel, SectorBenchmark, SectorGrade
from carbon_esg.errors import ErrorCode
from carbon_esg.scoring.sector import (
    emissions_intensity,
    resolve_benchmark,
    score_sector,
    score_sector_emissions,
)
from carbon_esg.scoring.thresholds import (
    SCORE_A,
    SCORE_A_PLUS,
    SCORE_B,
    SCORE_B_PLUS,
    SCORE_C,
    SCORE_D,
    SECTOR_BENCHMARKS,
    performance_level,
    sector_grade,
)


class TestEmissionsIntensity:
    """Tests for emissions_intensity()."""

    def test_tonnes_per_thousand(self):
        result = emissions_intensity(2_000_000, 1000)
        assert result.ok
        assert result.value == pytest.approx(2.0)

    @pytest.mark.parametrize("revenue", [0, -10, None, math.nan])
    def test_non_positive_revenue(self, revenue):
        result = emissions_intensity(1000, revenue)
        assert not result.ok
        assert result.error.code is ErrorCode.NON_POSITIVE_REVENUE

    def test_zero_emissions(self):
        assert emissions_intensity(0, 500).value == 0.0


class TestSectorLadder:
    """Tests for the grade ladder on exact boundaries."""

    @pytest.fixture()
    def bench(self) -> SectorBenchmark:
        return SECTOR_BENCHMARKS["services"]

    def test_top_performers_is_a_plus(self, bench):
        assert sector_grade(bench.top_performers, bench) == (SCORE_A_PLUS, SectorGrade.A_PLUS)

    def test_just_above_top_performers_is_a(self, bench):
        assert sector_grade(bench.top_performers + 1e-9, bench)[1] is SectorGrade.A

    def test_a_boundary(self, bench):
        assert sector_grade(bench.average * 0.8, bench) == (SCORE_A, SectorGrade.A)

    def test_b_plus_boundary(self, bench):
        assert sector_grade(bench.average * 1.0, bench) == (SCORE_B_PLUS, SectorGrade.B_PLUS)

    def test_b_boundary(self, bench):
        assert sector_grade(bench.average * 1.2, bench) == (SCORE_B, SectorGrade.B)

    def test_c_boundary(self, bench):
        assert sector_grade(bench.average * 1.5, bench) == (SCORE_C, SectorGrade.C)

    def test_above_every_bound_is_d(self, bench):
        assert sector_grade(bench.average * 1.5 + 0.01, bench) == (SCORE_D, SectorGrade.D)

    def test_scores_decrease_with_grade(self):
        assert SCORE_A_PLUS > SCORE_A > SCORE_B_PLUS > SCORE_B > SCORE_C > SCORE_D

    def test_custom_ladder(self, bench):
        ladder = LadderConfig(a_ratio=0.9, b_plus_ratio=1.0, b_ratio=1.1, c_ratio=1.3)
        assert sector_grade(bench.average * 0.9, bench, ladder)[1] is SectorGrade.A
        assert sector_grade(bench.average * 1.25, bench, ladder)[1] is SectorGrade.C

    def test_monotonic(self, bench):
        order = [SectorGrade.A_PLUS, SectorGrade.A, SectorGrade.B_PLUS,
                 SectorGrade.B, SectorGrade.C, SectorGrade.D]
        ranks = [order.index(sector_grade(x / 100, bench)[1]) for x in range(0, 200)]
        assert ranks == sorted(ranks)


class TestPerformanceLevel:
    def test_levels(self):
        bench = SECTOR_BENCHMARKS["manufacturing"]
        assert performance_level(1.0, bench) is PerformanceLevel.excellent
        assert performance_level(2.5, bench) is PerformanceLevel.good
        assert performance_level(3.0, bench) is PerformanceLevel.average
        assert performance_level(3.01, bench) is PerformanceLevel.critical


class TestScoreSector:
    """Tests for score_sector() and score_sector_emissions()."""

    def test_scores_known_sector(self):
        result = score_sector(0.3, "services")
        assert result.ok
        assert result.value.grade is SectorGrade.A_PLUS
        assert result.value.score == SCORE_A_PLUS
        assert result.value.sector == "services"
        assert result.value.benchmark.name == "Services"

    def test_sector_key_case_insensitive(self):
        assert score_sector(0.3, " Services ").ok

    @pytest.mark.parametrize("sector", ["aerospace", "", None])
    def test_unknown_sector(self, sector):
        result = score_sector(1.0, sector)
        assert not result.ok
        assert result.error.code is ErrorCode.UNKNOWN_SECTOR

    def test_negative_intensity(self):
        result = score_sector(-0.1, "services")
        assert result.error.code is ErrorCode.NEGATIVE_QUANTITY

    def test_extra_sector_takes_priority(self):
        custom = SectorBenchmark(
            key="services", name="Custom services",
            average=10, top_performers=5, threshold=12,
        )
        result = score_sector(4.0, "services", extra_sectors=[custom])
        assert result.value.benchmark.name == "Custom services"
        assert result.value.grade is SectorGrade.A_PLUS

    def test_resolve_configured_sector(self):
        hotel = SectorBenchmark(
            key="hospitality", name="Hospitality",
            average=1.5, top_performers=0.7, threshold=2.0,
        )
        assert resolve_benchmark("HOSPITALITY", [hotel]) is hotel
        assert resolve_benchmark("hospitality") is None

    def test_from_emissions(self):
        # 400 t over 1000 k-revenue = 0.4 on the services ladder
        result = score_sector_emissions(400_000, 1000, "services")
        assert result.value.intensity == pytest.approx(0.4)
        assert result.value.grade is SectorGrade.A_PLUS

    def test_from_emissions_zero_revenue(self):
        result = score_sector_emissions(400_000, 0, "services")
        assert result.error.code is ErrorCode.NON_POSITIVE_REVENUE

    def test_revenue_error_reported_before_sector_error(self):
        result = score_sector_emissions(1000, None, "aerospace")
        assert result.error.code is ErrorCode.NON_POSITIVE_REVENUE

    def test_every_benchmark_is_ordered(self):
        for bench in SECTOR_BENCHMARKS.values():
            assert bench.top_performers < bench.average < bench.threshold
            assert bench.regulations

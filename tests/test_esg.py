# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for ESG indicator, pillar, and composite scoring."""

from __future__ import annotations

import pytest

from carbon_esg.config import GradeBand
from carbon_esg.data.models import (
    ESGCategory,
    ESGGrade,
    ESGIndicator,
    IndicatorType,
    Pillar,
)
from carbon_esg.errors import ErrorCode
from carbon_esg.scoring.esg import (
    NO_BENCHMARK_SCORE,
    refresh_calculated_indicators,
    score_esg,
    score_indicator,
    score_pillar,
)
from carbon_esg.scoring.indicators import (
    apply_indicator_values,
    default_esg_schema,
    find_indicator,
    set_indicator_value,
)
from carbon_esg.scoring.thresholds import ESG_GRADE_BANDS, IndicatorBenchmark, esg_grade
from carbon_esg.scoring.weights import PILLAR_WEIGHTS

# Revenue (thousands) large enough that E2 and E8 both land at their optimum
LARGE_REVENUE = 200_000


def _indicator(ind_id: str, value, ind_type=IndicatorType.numeric, pillar=Pillar.E):
    return ESGIndicator(id=ind_id, label=ind_id, pillar=pillar, type=ind_type, value=value)


class TestSchema:
    """Tests for the default indicator schema."""

    def test_counts(self):
        schema = default_esg_schema()
        counts = {c.pillar: len(c.indicators) for c in schema}
        assert counts == {Pillar.E: 11, Pillar.S: 12, Pillar.G: 9}

    def test_weights_sum_to_one(self):
        assert sum(c.weight for c in default_esg_schema()) == pytest.approx(1.0)
        assert sum(PILLAR_WEIGHTS.values()) == pytest.approx(1.0)

    def test_fresh_copy_each_call(self):
        first = default_esg_schema()
        set_indicator_value(first, "E1", 10)
        assert find_indicator(default_esg_schema(), "E1").value is None

    def test_calculated_indicators(self):
        schema = default_esg_schema()
        calculated = [
            i.id for c in schema for i in c.indicators if i.type is IndicatorType.calculated
        ]
        assert calculated == ["E2", "E8"]


class TestSetIndicatorValue:
    def test_sets_numeric(self):
        schema = default_esg_schema()
        result = set_indicator_value(schema, "E1", 1234.0)
        assert result.ok
        assert find_indicator(schema, "E1").value == 1234.0

    def test_calculated_is_read_only(self):
        schema = default_esg_schema()
        result = set_indicator_value(schema, "E2", 0.5)
        assert result.error.code is ErrorCode.READ_ONLY_INDICATOR
        assert find_indicator(schema, "E2").value is None

    def test_unknown_indicator(self):
        result = set_indicator_value(default_esg_schema(), "X99", 1)
        assert result.error.code is ErrorCode.UNKNOWN_INDICATOR

    def test_binary_coerced_to_bool(self):
        schema = default_esg_schema()
        set_indicator_value(schema, "G3", 1)
        assert find_indicator(schema, "G3").value is True

    def test_apply_many_reports_rejections(self):
        schema = default_esg_schema()
        rejected = apply_indicator_values(schema, {"e1": "500", "E8": 3, "Z1": 1, "S1": "lots"})
        assert find_indicator(schema, "E1").value == 500.0
        assert len(rejected) == 3
        assert any("read-only" in m for m in rejected)
        assert any("not a number" in m for m in rejected)


class TestScoreIndicator:
    """Tests for indicator normalisation."""

    def test_binary(self):
        assert score_indicator(_indicator("G3", True, IndicatorType.binary)) == 100.0
        assert score_indicator(_indicator("G3", False, IndicatorType.binary)) == 0.0
        assert score_indicator(_indicator("G3", None, IndicatorType.binary)) == 0.0

    def test_missing_value_scores_zero(self):
        assert score_indicator(_indicator("E3", None)) == 0.0

    def test_no_benchmark_is_neutral(self):
        assert score_indicator(_indicator("E99", 12.0)) == NO_BENCHMARK_SCORE

    def test_higher_is_better(self):
        bench = {"X": IndicatorBenchmark(0, 100, 50)}
        assert score_indicator(_indicator("X", 25), bench) == pytest.approx(50.0)
        assert score_indicator(_indicator("X", 80), bench) == 100.0
        assert score_indicator(_indicator("X", -5), bench) == 0.0

    def test_lower_is_better(self):
        bench = {"X": IndicatorBenchmark(0, 100, 20, inverse=True)}
        assert score_indicator(_indicator("X", 10), bench) == 100.0
        assert score_indicator(_indicator("X", 60), bench) == pytest.approx(50.0)
        assert score_indicator(_indicator("X", 150), bench) == 0.0

    def test_always_in_range(self):
        for value in (-1e9, -1, 0, 1, 1e3, 1e9):
            score = score_indicator(_indicator("E4", value))
            assert 0.0 <= score <= 100.0


class TestRefreshCalculated:
    """Tests for the E2 / E8 derived indicators."""

    def test_values(self):
        schema = default_esg_schema()
        apply_indicator_values(schema, {"E1": 50_000, "E6": 400, "E7": 300})
        refreshed = refresh_calculated_indicators(schema, 2_000)
        assert find_indicator(refreshed, "E2").value == pytest.approx(0.025)
        assert find_indicator(refreshed, "E8").value == pytest.approx(350.0)

    def test_input_not_modified(self):
        schema = default_esg_schema()
        apply_indicator_values(schema, {"E1": 50_000})
        refresh_calculated_indicators(schema, 1000)
        assert find_indicator(schema, "E2").value is None

    @pytest.mark.parametrize("revenue", [0, -5, None])
    def test_undefined_without_revenue(self, revenue):
        schema = default_esg_schema()
        apply_indicator_values(schema, {"E1": 50_000, "E6": 1})
        refreshed = refresh_calculated_indicators(schema, revenue)
        assert find_indicator(refreshed, "E2").value is None
        assert find_indicator(refreshed, "E8").value is None


class TestScoreESG:
    """Tests for score_esg()."""

    def test_best_practice_is_aaa(self, best_practice_esg):
        categories = refresh_calculated_indicators(best_practice_esg, LARGE_REVENUE)
        result = score_esg(categories)
        assert result.ok
        assert result.value.total == 100.0
        assert result.value.grade is ESGGrade.AAA
        assert all(p.score == 100.0 for p in result.value.pillars)

    def test_empty_schema_is_ccc(self):
        result = score_esg(default_esg_schema())
        assert result.value.total == 0.0
        assert result.value.grade is ESGGrade.CCC

    def test_composite_is_weighted_sum(self, best_practice_esg):
        # Governance binaries cleared: G pillar drops, E and S stay at 100
        for ind_id in ("G3", "G4", "G5", "G7", "G8"):
            set_indicator_value(best_practice_esg, ind_id, False)
        categories = refresh_calculated_indicators(best_practice_esg, LARGE_REVENUE)
        result = score_esg(categories).value
        g = result.pillar(Pillar.G).score
        assert g == pytest.approx(round(4 / 9 * 100, 2))
        assert result.total == pytest.approx(round(40 + 30 + g * 0.3, 2))

    def test_weights_override(self, best_practice_esg):
        categories = refresh_calculated_indicators(best_practice_esg, LARGE_REVENUE)
        result = score_esg(categories, weights={"E": 0.5, "S": 0.25, "G": 0.25})
        assert result.value.pillar(Pillar.E).weight == 0.5

    @pytest.mark.parametrize("weights", [
        {"E": 0.5, "S": 0.3, "G": 0.3},
        {"E": 0.5, "S": 0.6, "G": -0.1},
        {"E": 0.2, "S": 0.2, "G": 0.2},
    ])
    def test_invalid_weights(self, weights):
        result = score_esg(default_esg_schema(), weights=weights)
        assert not result.ok
        assert result.error.code is ErrorCode.INVALID_WEIGHTS

    def test_tolerance_accepts_float_noise(self):
        result = score_esg(default_esg_schema(), weights={"E": 0.1 + 0.2, "S": 0.4, "G": 0.3})
        assert result.ok

    def test_sector_multiplier_changes_pillar(self):
        schema = default_esg_schema()
        # Only water consumption is good; textile doubles down on water
        apply_indicator_values(schema, {"E4": 100})
        plain = score_pillar(schema[0])
        textile = score_pillar(schema[0], "textile")
        assert textile > plain

    def test_pillar_scores_capped(self):
        category = ESGCategory(
            pillar=Pillar.E, label="E", weight=1.0,
            indicators=[_indicator("E3", 1e9)],
        )
        assert score_pillar(category) == 100.0


class TestESGGrade:
    @pytest.mark.parametrize("score,grade", [
        (100, ESGGrade.AAA), (90, ESGGrade.AAA), (89.99, ESGGrade.AA),
        (80, ESGGrade.AA), (70, ESGGrade.A), (60, ESGGrade.BBB),
        (50, ESGGrade.BB), (40, ESGGrade.B), (39.99, ESGGrade.CCC), (0, ESGGrade.CCC),
    ])
    def test_bands(self, score, grade):
        assert esg_grade(score) is grade

    def test_custom_bands(self):
        bands = [GradeBand(min=50, grade=ESGGrade.A), GradeBand(min=0, grade=ESGGrade.B)]
        assert esg_grade(55, bands) is ESGGrade.A
        assert esg_grade(10, bands) is ESGGrade.B

    def test_default_table_descends(self):
        mins = [b.min for b in ESG_GRADE_BANDS]
        assert mins == sorted(mins, reverse=True)

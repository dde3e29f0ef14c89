# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for the scoring engine orchestrator."""

from __future__ import annotations

import pytest

from carbon_esg.config import EngineConfig, PillarWeights
from carbon_esg.data.models import CarbonReport, ESGGrade, Gas, Pillar, Scope, SectorGrade
from carbon_esg.errors import ErrorCode
from carbon_esg.scoring.engine import ScoringEngine
from carbon_esg.scoring.esg import score_indicator
from carbon_esg.scoring.indicators import apply_indicator_values, default_esg_schema, find_indicator
from carbon_esg.uncertainty.gum import MissingUncertaintyPolicy


class TestScoringEngine:
    """Tests for ScoringEngine.score()."""

    def test_full_report(self, full_coverage_entries):
        report = ScoringEngine().score(
            full_coverage_entries, revenue=1_000, sector="services",
            organisation="ACME", period="2024",
        )
        assert isinstance(report, CarbonReport)
        assert report.organisation == "ACME"
        assert report.period == "2024"
        assert report.compliance.score == 100
        assert report.intensity.ok
        assert report.sector.ok
        assert report.esg is None
        assert report.total_uncertainty.ok
        assert set(report.uncertainty) == set(Scope)

    def test_intensity_matches_totals(self, full_coverage_entries):
        report = ScoringEngine().score(full_coverage_entries, revenue=2_000, sector="manufacturing")
        assert report.intensity.value == pytest.approx(report.totals.total / 1000 / 2_000)
        assert report.sector.value.intensity == report.intensity.value

    def test_missing_revenue_reported_not_raised(self, full_coverage_entries):
        report = ScoringEngine().score(full_coverage_entries, sector="services")
        assert report.intensity.error.code is ErrorCode.NON_POSITIVE_REVENUE
        assert report.sector.error.code is ErrorCode.NON_POSITIVE_REVENUE
        assert report.compliance.score == 100

    def test_unknown_sector(self, full_coverage_entries):
        report = ScoringEngine().score(full_coverage_entries, revenue=100, sector="aerospace")
        assert report.intensity.ok
        assert report.sector.error.code is ErrorCode.UNKNOWN_SECTOR

    def test_config_fallbacks(self, electricity_entry):
        cfg = EngineConfig(organisation="Config Org", sector="services", revenue_thousands=1000)
        report = ScoringEngine(cfg).score([electricity_entry])
        assert report.organisation == "Config Org"
        assert report.sector.value.sector == "services"
        assert report.sector.value.grade is SectorGrade.A_PLUS

    def test_config_gwp_used(self, make_entry):
        entry = make_entry(quantity=1, emission_factor_value=1, gas=Gas.CH4)
        report = ScoringEngine(EngineConfig(gwp={Gas.CH4: 28.0})).score([entry])
        assert report.totals.scope1 == pytest.approx(28.0)

    def test_missing_uncertainty_policy(self, make_entry):
        entries = [make_entry(uncertainty_percent=None)]
        strict = ScoringEngine().score(entries)
        assert strict.total_uncertainty.error.code is ErrorCode.MISSING_UNCERTAINTY

        lenient = ScoringEngine(
            EngineConfig(missing_uncertainty_policy=MissingUncertaintyPolicy.ZERO)
        ).score(entries)
        assert lenient.total_uncertainty.ok

    def test_esg_scored_with_config_weights(self, best_practice_esg, electricity_entry):
        cfg = EngineConfig(pillar_weights=PillarWeights(E=0.5, S=0.25, G=0.25))
        report = ScoringEngine(cfg).score(
            [electricity_entry], revenue=200_000, esg=best_practice_esg
        )
        assert report.esg.ok
        assert report.esg.value.grade is ESGGrade.AAA
        assert report.esg.value.pillars[0].weight == 0.5

    def test_esg_invalid_weights_in_report(self, best_practice_esg):
        cfg = EngineConfig(pillar_weights=PillarWeights(E=0.5, S=0.5, G=0.5))
        report = ScoringEngine(cfg).score([], revenue=1000, esg=best_practice_esg)
        assert report.esg.error.code is ErrorCode.INVALID_WEIGHTS

    def test_empty_entries(self):
        report = ScoringEngine().score([], revenue=1000, sector="services")
        assert report.totals.total == 0.0
        assert report.compliance.score == 0
        assert report.sector.value.grade is SectorGrade.A_PLUS

    def test_report_serialises(self, full_coverage_entries):
        report = ScoringEngine().score(full_coverage_entries, revenue=1000, sector="services")
        restored = CarbonReport.model_validate_json(report.model_dump_json())
        assert restored.sector.value.grade == report.sector.value.grade
        assert restored.totals.total == pytest.approx(report.totals.total)


class TestEngineESG:
    """ESG scoring through the engine's revenue and sector contract."""

    @pytest.fixture()
    def schema(self):
        categories = default_esg_schema()
        apply_indicator_values(categories, {"E1": 50_000, "E6": 100, "E7": 50})
        return categories

    def test_calculated_indicators_use_revenue_in_thousands(self, schema):
        # 1,000 thousand = 1M of revenue
        report = ScoringEngine().score([], revenue=1_000, sector="services", esg=schema)
        assert find_indicator(report.esg_indicators, "E2").value == pytest.approx(0.05)
        assert find_indicator(report.esg_indicators, "E8").value == pytest.approx(150.0)

    def test_calculated_indicators_from_config_revenue(self, schema):
        cfg = EngineConfig(revenue_thousands=2_000)
        report = ScoringEngine(cfg).score([], esg=schema)
        assert find_indicator(report.esg_indicators, "E8").value == pytest.approx(75.0)

    def test_realistic_revenue_scores_intensities(self, schema):
        report = ScoringEngine().score([], revenue=100_000, esg=schema)
        # 150 tCO2e over 100M -> 1.5 t/M, inside the optimal band
        assert find_indicator(report.esg_indicators, "E8").value == pytest.approx(1.5)
        e8 = find_indicator(report.esg_indicators, "E8")
        assert score_indicator(e8) == 100.0

    def test_input_schema_not_modified(self, schema):
        ScoringEngine().score([], revenue=1_000, esg=schema)
        assert find_indicator(schema, "E8").value is None

    def test_esg_sector_applies_multipliers(self):
        schema = default_esg_schema()
        apply_indicator_values(schema, {"E4": 100})
        plain = ScoringEngine().score([], sector="manufacturing", esg=schema)
        textile = ScoringEngine().score(
            [], sector="manufacturing", esg=schema, esg_sector="textile"
        )
        e_plain = plain.esg.value.pillar(Pillar.E).score
        e_textile = textile.esg.value.pillar(Pillar.E).score
        assert e_textile > e_plain
        assert textile.esg.value.sector == "textile"

    def test_esg_sector_does_not_touch_sector_grade(self, electricity_entry):
        report = ScoringEngine().score(
            [electricity_entry], revenue=1_000, sector="services",
            esg=default_esg_schema(), esg_sector="textile",
        )
        assert report.sector.value.sector == "services"
        assert report.esg_peers.value.benchmark.key == "textile"

    def test_esg_sector_from_config(self):
        cfg = EngineConfig(sector="manufacturing", esg_sector="food_processing")
        report = ScoringEngine(cfg).score([], esg=default_esg_schema())
        assert report.esg.value.sector == "food_processing"

    def test_emissions_sector_reused_when_it_is_a_peer_sector(self):
        report = ScoringEngine().score([], sector="services", esg=default_esg_schema())
        assert report.esg_peers.value.benchmark.key == "services"

    def test_no_peers_without_esg_sector(self):
        report = ScoringEngine().score([], sector="manufacturing", esg=default_esg_schema())
        assert report.esg_peers is None
        assert report.esg.value.sector == ""

    def test_unknown_esg_sector_reported(self):
        report = ScoringEngine().score([], esg=default_esg_schema(), esg_sector="aerospace")
        assert report.esg.ok
        assert report.esg_peers.error.code is ErrorCode.UNKNOWN_SECTOR

    def test_alerts_and_materiality(self, best_practice_esg):
        report = ScoringEngine().score([], revenue=200_000, esg=best_practice_esg)
        assert [a.id for a in report.esg_alerts] == ["env-performance"]
        assert {p.id for p in report.materiality} >= {"E4", "E6", "G5"}

    def test_no_esg_no_insights(self):
        report = ScoringEngine().score([], revenue=1_000)
        assert report.esg_indicators is None
        assert report.esg_peers is None
        assert report.esg_alerts == []
        assert report.materiality == []

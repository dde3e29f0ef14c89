# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Tests for emission calculation, GWP weighting, and scope aggregation."""

from __future__ import annotations

import math

import pytest

from carbon_esg.data.factors import DEFAULT_EMISSION_FACTORS, entry_from_factor, get_factor
from carbon_esg.data.models import EntryStatus, Gas, Scope
from carbon_esg.emissions.aggregation import (
    aggregate_by_category,
    aggregate_by_scope,
    compute_emissions,
    entry_emissions,
)
from carbon_esg.emissions.gwp import DEFAULT_GWP, gwp_for, to_co2e
from carbon_esg.emissions.units import canonical_unit, convert_unit
from carbon_esg.errors import ErrorCode


class TestComputeEmissions:
    """Tests for compute_emissions()."""

    def test_quantity_times_factor(self):
        result = compute_emissions(1000, 0.456)
        assert result.ok
        assert result.value == pytest.approx(456.0)

    def test_zero_quantity(self):
        assert compute_emissions(0, 2.5).value == 0.0

    def test_negative_quantity(self):
        result = compute_emissions(-1, 0.5)
        assert not result.ok
        assert result.error.code is ErrorCode.NEGATIVE_QUANTITY

    def test_negative_factor(self):
        result = compute_emissions(10, -0.5)
        assert result.error.code is ErrorCode.NEGATIVE_FACTOR

    def test_nan_rejected(self):
        assert not compute_emissions(math.nan, 1.0).ok

    def test_gwp_applied(self):
        result = compute_emissions(1, 1, gas=Gas.CH4)
        assert result.value == pytest.approx(25.0)

    def test_gwp_override(self):
        result = compute_emissions(1, 1, gas=Gas.CH4, gwp={Gas.CH4: 28.0})
        assert result.value == pytest.approx(28.0)


class TestGWP:
    def test_co2_is_one(self):
        assert DEFAULT_GWP[Gas.CO2] == 1.0

    def test_every_gas_has_default(self):
        for gas in Gas:
            assert gwp_for(gas) > 0

    def test_override_only_affects_listed_gas(self):
        table = {Gas.N2O: 265.0}
        assert gwp_for(Gas.N2O, table) == 265.0
        assert gwp_for(Gas.CH4, table) == DEFAULT_GWP[Gas.CH4]

    def test_to_co2e_refrigerant(self):
        assert to_co2e(2.0, Gas.R410A) == pytest.approx(4176.0)


class TestAggregateByScope:
    """Tests for aggregate_by_scope()."""

    def test_empty_is_zero(self):
        totals = aggregate_by_scope([])
        assert totals.scope1 == totals.scope2 == totals.scope3 == 0.0
        assert totals.total == 0.0
        assert totals.entry_count == 0

    def test_sums_per_scope(self, make_entry):
        entries = [
            make_entry(scope=Scope.scope1, quantity=10, emission_factor_value=2.0),
            make_entry(scope=Scope.scope1, quantity=5, emission_factor_value=1.0),
            make_entry(scope=Scope.scope2, quantity=1000, emission_factor_value=0.456),
            make_entry(scope=Scope.scope3, quantity=3, emission_factor_value=1.0),
        ]
        totals = aggregate_by_scope(entries)
        assert totals.scope1 == pytest.approx(25.0)
        assert totals.scope2 == pytest.approx(456.0)
        assert totals.scope3 == pytest.approx(3.0)
        assert totals.entry_count == 4

    def test_total_equals_scope_sum(self, full_coverage_entries):
        totals = aggregate_by_scope(full_coverage_entries)
        assert totals.total == totals.scope1 + totals.scope2 + totals.scope3

    def test_drafts_and_archived_excluded(self, make_entry):
        entries = [
            make_entry(quantity=10, status=EntryStatus.draft),
            make_entry(quantity=20, status=EntryStatus.archived),
            make_entry(quantity=30, status=EntryStatus.integrated),
        ]
        totals = aggregate_by_scope(entries)
        assert totals.scope1 == pytest.approx(30.0)
        assert totals.entry_count == 1

    def test_gwp_override_table(self, make_entry):
        entries = [make_entry(quantity=1, emission_factor_value=1, gas=Gas.CH4)]
        assert aggregate_by_scope(entries).scope1 == pytest.approx(25.0)
        assert aggregate_by_scope(entries, {Gas.CH4: 28.0}).scope1 == pytest.approx(28.0)

    def test_accepts_generator(self, make_entry):
        totals = aggregate_by_scope(make_entry(quantity=q) for q in (1, 2, 3))
        assert totals.scope1 == pytest.approx(6.0)

    def test_order_independent(self, full_coverage_entries):
        forward = aggregate_by_scope(full_coverage_entries)
        backward = aggregate_by_scope(list(reversed(full_coverage_entries)))
        assert forward.scope1 == pytest.approx(backward.scope1)
        assert forward.scope3 == pytest.approx(backward.scope3)


class TestAggregateByCategory:
    def test_largest_first(self, make_entry):
        entries = [
            make_entry(category="dechets", quantity=1),
            make_entry(category="gaz_naturel", quantity=10),
            make_entry(category="gaz_naturel", quantity=5),
            make_entry(category="", quantity=2),
        ]
        by_category = aggregate_by_category(entries)
        assert list(by_category) == ["gaz_naturel", "uncategorised", "dechets"]
        assert by_category["gaz_naturel"] == pytest.approx(15.0)


class TestEntryEmissions:
    def test_without_override_uses_computed_field(self, make_entry):
        entry = make_entry(quantity=4, emission_factor_value=0.5)
        assert entry_emissions(entry) == entry.emissions


class TestDefaultFactors:
    """Tests for the default emission factor table."""

    def test_lookup_is_case_insensitive(self):
        assert get_factor(" Diesel ").value == pytest.approx(2.67)

    def test_unknown_factor(self):
        with pytest.raises(KeyError, match="Unknown emission factor"):
            get_factor("unobtainium")

    def test_every_factor_has_uncertainty(self):
        for factor in DEFAULT_EMISSION_FACTORS.values():
            assert factor.uncertainty_percent > 0

    def test_entry_from_factor(self):
        entry = entry_from_factor("electricite", 1000, id="e1")
        assert entry.scope is Scope.scope2
        assert entry.category == "electricite"
        assert entry.unit == "kWh"
        assert entry.uncertainty_percent == 10
        assert entry.emissions == pytest.approx(420.0)

    def test_entry_from_factor_overrides(self):
        entry = entry_from_factor("diesel", 100, uncertainty_percent=2.0)
        assert entry.uncertainty_percent == 2.0


class TestConvertUnit:
    def test_mwh_to_kwh(self):
        assert convert_unit(2, "MWh") == (2000.0, "kWh")

    def test_tonnes_to_kg(self):
        quantity, unit = convert_unit(1.5, "t")
        assert quantity == pytest.approx(1500.0)
        assert unit == "kg"

    def test_unknown_unit_unchanged(self):
        assert convert_unit(3, "widgets") == (3, "widgets")

    def test_volume_targets_factor_unit(self):
        quantity, unit = convert_unit(2, "m3")
        assert quantity == pytest.approx(2000.0)
        assert unit == get_factor("diesel").unit

    def test_spellings_canonicalised(self):
        assert convert_unit(5, "litres") == (5, "litre")
        assert canonical_unit("KWH") == "kWh"
        assert canonical_unit("widgets") == "widgets"

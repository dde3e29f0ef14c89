# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Shared test fixtures for the carbon-esg test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from carbon_esg.data.models import ActivityEntry, Gas, Scope
from carbon_esg.scoring.indicators import apply_indicator_values, default_esg_schema

FIXTURES = Path(__file__).parent / "fixtures"


def build_entry(**fields) -> ActivityEntry:
    """An ActivityEntry with sensible defaults for anything not given."""
    data = {
        "scope": Scope.scope1,
        "category": "",
        "quantity": 1.0,
        "emission_factor_value": 1.0,
        "uncertainty_percent": 10.0,
    }
    data.update(fields)
    return ActivityEntry(**data)


@pytest.fixture()
def electricity_entry() -> ActivityEntry:
    """1000 kWh at 0.456 kg CO2e/kWh: 456 kg in scope 2."""
    return build_entry(
        id="elec-1",
        scope=Scope.scope2,
        category="electricite",
        description="Consommation bureaux",
        quantity=1000,
        unit="kWh",
        emission_factor_value=0.456,
    )


@pytest.fixture()
def full_coverage_entries() -> list[ActivityEntry]:
    """One validated entry for each of the nine mandatory categories."""
    return [
        build_entry(id="heating", scope=Scope.scope1, category="gaz_naturel",
                    description="Chaudière gaz", quantity=5000, unit="m3",
                    emission_factor_value=2.04, uncertainty_percent=5),
        build_entry(id="fleet", scope=Scope.scope1, category="flotte",
                    description="Véhicules de service", quantity=2000, unit="litre",
                    emission_factor_value=2.67, uncertainty_percent=5),
        build_entry(id="refrigerants", scope=Scope.scope1, category="climatisation",
                    description="Recharge R-410A", quantity=2, unit="kg",
                    emission_factor_value=1.0, gas=Gas.R410A, uncertainty_percent=10),
        build_entry(id="electricity", scope=Scope.scope2, category="electricite",
                    description="Siège", quantity=120000, unit="kWh",
                    emission_factor_value=0.42, uncertainty_percent=10),
        build_entry(id="heat_networks", scope=Scope.scope2, category="vapeur",
                    description="Réseau de chaleur urbain", quantity=10000, unit="kWh",
                    emission_factor_value=0.19, uncertainty_percent=15),
        build_entry(id="purchases", scope=Scope.scope3, category="achats",
                    description="Achats de papier", quantity=500, unit="kg",
                    emission_factor_value=0.919, uncertainty_percent=30),
        build_entry(id="waste", scope=Scope.scope3, category="dechets",
                    description="Déchets ménagers", quantity=3000, unit="kg",
                    emission_factor_value=0.55, uncertainty_percent=25),
        build_entry(id="travel", scope=Scope.scope3, category="deplacements",
                    description="Avion court-courrier", quantity=8000, unit="km",
                    emission_factor_value=0.258, uncertainty_percent=10),
        build_entry(id="freight", scope=Scope.scope3, category="fret",
                    description="Transport routier livraison", quantity=20000, unit="t.km",
                    emission_factor_value=0.1, uncertainty_percent=20),
    ]


@pytest.fixture()
def best_practice_esg():
    """Default schema filled with values at or beyond every optimum."""
    import yaml

    categories = default_esg_schema()
    values = yaml.safe_load((FIXTURES / "esg_values.yaml").read_text())
    rejected = apply_indicator_values(categories, values)
    assert rejected == []
    return categories


@pytest.fixture()
def make_entry():
    """Factory fixture wrapping :func:`build_entry`."""
    return build_entry

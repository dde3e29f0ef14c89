# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Default emission factors used when no supplier-specific factor exists.

Values are kg CO2e per unit from Base Carbone (ADEME) and national grid
mixes.  Each factor carries its relative standard uncertainty so that an
entry built from it can be propagated without further input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from carbon_esg.data.models import ActivityEntry, Scope


class EmissionFactor(BaseModel):
    """A reference emission factor."""

    model_config = {"frozen": True}

    key: str = Field(description="Lookup key, e.g. 'diesel'")
    value: float = Field(ge=0, description="kg CO2e per unit")
    unit: str = Field(description="Unit the factor applies to, e.g. 'litre'")
    source: str = Field(description="Reference database")
    uncertainty_percent: float = Field(ge=0, description="Relative standard uncertainty")
    scope: Scope


def _f(key: str, value: float, unit: str, source: str, uncertainty: float, scope: Scope) -> EmissionFactor:
    return EmissionFactor(
        key=key,
        value=value,
        unit=unit,
        source=source,
        uncertainty_percent=uncertainty,
        scope=scope,
    )


_ADEME = "ADEME Base Carbone"

DEFAULT_EMISSION_FACTORS: dict[str, EmissionFactor] = {
    f.key: f
    for f in [
        # Scope 1 - combustion
        _f("diesel", 2.67, "litre", _ADEME, 5, Scope.scope1),
        _f("essence", 2.31, "litre", _ADEME, 5, Scope.scope1),
        _f("gpl", 1.67, "litre", _ADEME, 5, Scope.scope1),
        _f("fioul", 2.72, "litre", _ADEME, 5, Scope.scope1),
        _f("gaz_naturel", 2.04, "m3", _ADEME, 5, Scope.scope1),
        _f("propane", 1.53, "kg", _ADEME, 5, Scope.scope1),
        _f("butane", 1.45, "kg", _ADEME, 5, Scope.scope1),
        _f("charbon", 2.94, "kg", _ADEME, 8, Scope.scope1),
        # Scope 2 - energy
        _f("electricite", 0.42, "kWh", "ADEME - Mix Tunisia", 10, Scope.scope2),
        _f("electricite_fr", 0.052, "kWh", "ADEME - Mix France", 5, Scope.scope2),
        _f("electricite_ue", 0.233, "kWh", "ADEME - Mix EU", 10, Scope.scope2),
        _f("vapeur", 0.2, "kWh", _ADEME, 15, Scope.scope2),
        _f("chaleur", 0.19, "kWh", _ADEME, 15, Scope.scope2),
        # Scope 3 - freight
        _f("transport_routier", 0.1, "t.km", _ADEME, 20, Scope.scope3),
        _f("transport_maritime", 0.016, "t.km", _ADEME, 25, Scope.scope3),
        _f("transport_aerien", 1.06, "t.km", _ADEME, 15, Scope.scope3),
        _f("transport_ferroviaire", 0.022, "t.km", _ADEME, 15, Scope.scope3),
        # Scope 3 - travel
        _f("voiture", 0.193, "km", _ADEME, 20, Scope.scope3),
        _f("train", 0.0037, "km", _ADEME, 10, Scope.scope3),
        _f("avion_court", 0.258, "km", _ADEME, 10, Scope.scope3),
        _f("avion_long", 0.178, "km", _ADEME, 10, Scope.scope3),
        # Scope 3 - waste
        _f("dechets_menagers", 0.55, "kg", _ADEME, 25, Scope.scope3),
        _f("dechets_dangereux", 1.2, "kg", _ADEME, 30, Scope.scope3),
        _f("recyclage", 0.02, "kg", _ADEME, 30, Scope.scope3),
    ]
}


def get_factor(key: str) -> EmissionFactor:
    """Return the default factor for *key*.

    Raises ``KeyError`` with the list of known keys when not found.
    """
    normalised = key.strip().lower()
    if normalised not in DEFAULT_EMISSION_FACTORS:
        available = ", ".join(sorted(DEFAULT_EMISSION_FACTORS))
        raise KeyError(f"Unknown emission factor '{key}'. Available: {available}")
    return DEFAULT_EMISSION_FACTORS[normalised]


def entry_from_factor(key: str, quantity: float, **fields: Any) -> ActivityEntry:
    """Build an :class:`ActivityEntry` priced with a default factor."""
    factor = get_factor(key)
    data: dict[str, Any] = {
        "scope": factor.scope,
        "category": factor.key,
        "quantity": quantity,
        "unit": factor.unit,
        "emission_factor_value": factor.value,
        "emission_factor_source": factor.source,
        "uncertainty_percent": factor.uncertainty_percent,
    }
    data.update(fields)
    return ActivityEntry(**data)

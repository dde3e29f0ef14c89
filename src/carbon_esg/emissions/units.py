# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Unit normalisation for activity quantities.

Reference units are the ones used by the default emission-factor table:
``kWh``, ``litre``, ``m3``, ``kg``, ``km`` and ``t.km``.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Spellings of the reference units
# ---------------------------------------------------------------------------
UNIT_ALIASES: dict[str, str] = {
    "kwh": "kWh",
    "l": "litre",
    "litre": "litre",
    "litres": "litre",
    "liter": "litre",
    "liters": "litre",
    "m³": "m3",
    "kg": "kg",
    "kgs": "kg",
    "km": "km",
    "t.km": "t.km",
    "tkm": "t.km",
}

# ---------------------------------------------------------------------------
# Conversion table: from-unit -> (to-unit, multiplier)
# ---------------------------------------------------------------------------
UNIT_CONVERSIONS: dict[str, tuple[str, float]] = {
    # Energy
    "kwh_pcs": ("kWh", 0.9),
    "mwh": ("kWh", 1000.0),
    "gj": ("kWh", 277.78),
    "tj": ("kWh", 277780.0),
    "thermie": ("kWh", 1.163),
    "tep": ("kWh", 11630.0),
    "btu": ("kWh", 0.000293),
    # Volume
    "m3": ("litre", 1000.0),
    "gallon_us": ("litre", 3.785),
    "gallon_uk": ("litre", 4.546),
    # Mass
    "tonne": ("kg", 1000.0),
    "t": ("kg", 1000.0),
    "lb": ("kg", 0.4536),
    # Distance
    "mile": ("km", 1.609),
    "nm": ("km", 1.852),
}


def canonical_unit(unit: str) -> str:
    """Reference spelling of *unit*, or *unit* unchanged if unknown."""
    return UNIT_ALIASES.get(unit.strip().lower(), unit)


def convert_unit(quantity: float, unit: str) -> tuple[float, str]:
    """Normalise *quantity* into the reference unit for its dimension.

    Units without a conversion are returned unchanged.
    """
    conversion = UNIT_CONVERSIONS.get(unit.strip().lower())
    if conversion is None:
        return quantity, canonical_unit(unit)
    target, factor = conversion
    return quantity * factor, target

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Default 32-indicator ESG schema (11 environmental, 12 social, 9 governance)."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

from carbon_esg.data.models import (
    ESGCategory,
    ESGIndicator,
    IndicatorType,
    Pillar,
)
from carbon_esg.errors import CalcResult, ErrorCode
from carbon_esg.scoring.weights import E_WEIGHT, G_WEIGHT, PILLAR_NAMES, S_WEIGHT

_N = IndicatorType.numeric
_B = IndicatorType.binary
_C = IndicatorType.calculated

# (id, label, unit, type, description)
_ENVIRONMENT = (
    ("E1", "Total energy consumption", "kWh", _N, "Annual energy consumption"),
    ("E2", "Energy intensity", "kWh/revenue", _C, "Energy consumed per unit of revenue"),
    ("E3", "Renewable energy share", "%", _N, "Share of energy from renewable sources"),
    ("E4", "Total water consumption", "m3", _N, "Annual water withdrawal"),
    ("E5", "Water recycling rate", "%", _N, "Share of water recycled and reused"),
    ("E6", "Scope 1 emissions (direct)", "tCO2e", _N, "Direct GHG emissions"),
    ("E7", "Scope 2 emissions (indirect)", "tCO2e", _N, "Indirect energy emissions"),
    ("E8", "Carbon intensity", "tCO2e/M revenue", _C, "Emissions per million of revenue"),
    ("E9", "Total waste produced", "t", _N, "Waste generated annually"),
    ("E10", "Waste valorisation rate", "%", _N, "Share of waste recycled or recovered"),
    ("E11", "Green investment", "currency", _N, "Amount invested in environmental projects"),
)

_SOCIAL = (
    ("S1", "Total headcount", "employees", _N, "Number of employees"),
    ("S2", "Share of women", "%", _N, "Share of women in the workforce"),
    ("S3", "Gender pay gap", "%", _N, "Pay difference between men and women"),
    ("S4", "Turnover rate", "%", _N, "Employee departure rate"),
    ("S5", "Absenteeism rate", "%", _N, "Employee absence rate"),
    ("S6", "Accident frequency rate", "ratio", _N, "Work accidents per million hours"),
    ("S7", "Training hours per employee", "h", _N, "Average training per employee"),
    ("S8", "Employment of disabled people", "%", _N, "Share of disabled workers"),
    ("S9", "Social partner meetings", "count", _N, "Annual social dialogue meetings"),
    ("S10", "Data protection complaints", "count", _N, "Personal data incidents"),
    ("S11", "Suppliers signing the ethics charter", "%", _N, "Supply chain ethical commitment"),
    ("S12", "Local CSR spending", "currency", _N, "Contribution to the local community"),
)

_GOVERNANCE = (
    ("G1", "Women on the board", "%", _N, "Female board representation"),
    ("G2", "Independent directors", "%", _N, "Board independence"),
    ("G3", "Chair / CEO separation", "yes/no", _B, "Separation of functions"),
    ("G4", "CSR committee", "yes/no", _B, "Dedicated CSR committee"),
    ("G5", "Anti-corruption code", "yes/no", _B, "Anti-corruption policy"),
    ("G6", "Taxes paid locally", "currency", _N, "Local tax contribution"),
    ("G7", "Published remuneration policy", "yes/no", _B, "Remuneration transparency"),
    ("G8", "Whistleblowing system", "yes/no", _B, "Internal alert mechanism"),
    ("G9", "Local supplier share", "%", _N, "Purchases from local suppliers"),
)


def _build(pillar: Pillar, weight: float, rows: tuple) -> ESGCategory:
    return ESGCategory(
        pillar=pillar,
        label=PILLAR_NAMES[pillar.value],
        weight=weight,
        indicators=[
            ESGIndicator(
                id=ind_id, label=label, pillar=pillar, type=ind_type,
                unit=unit, description=desc,
            )
            for ind_id, label, unit, ind_type, desc in rows
        ],
    )


def default_esg_schema() -> list[ESGCategory]:
    """Return a fresh, empty copy of the default indicator schema."""
    return [
        _build(Pillar.E, E_WEIGHT, _ENVIRONMENT),
        _build(Pillar.S, S_WEIGHT, _SOCIAL),
        _build(Pillar.G, G_WEIGHT, _GOVERNANCE),
    ]


def find_indicator(
    categories: Sequence[ESGCategory], indicator_id: str
) -> Optional[ESGIndicator]:
    for category in categories:
        found = category.get(indicator_id)
        if found is not None:
            return found
    return None


def set_indicator_value(
    categories: Sequence[ESGCategory],
    indicator_id: str,
    value: Optional[Union[bool, float]],
) -> CalcResult[ESGIndicator]:
    """Set a user-entered value.

    Calculated indicators are derived from other inputs and cannot be
    written directly.
    """
    indicator = find_indicator(categories, indicator_id)
    if indicator is None:
        return CalcResult[ESGIndicator].failure(
            ErrorCode.UNKNOWN_INDICATOR, f"No indicator '{indicator_id}'"
        )
    if indicator.type is IndicatorType.calculated:
        return CalcResult[ESGIndicator].failure(
            ErrorCode.READ_ONLY_INDICATOR,
            f"Indicator '{indicator_id}' is calculated and read-only",
        )
    if indicator.type is IndicatorType.binary and value is not None:
        value = bool(value)
    indicator.value = value
    return CalcResult[ESGIndicator].success(indicator)


def apply_indicator_values(
    categories: Sequence[ESGCategory],
    values: Mapping[str, Any],
) -> list[str]:
    """Set many values at once; returns one message per rejected id."""
    rejected: list[str] = []
    for indicator_id, value in values.items():
        if value is not None and not isinstance(value, bool):
            try:
                value = float(value)
            except (TypeError, ValueError):
                rejected.append(f"{indicator_id}: not a number: {value!r}")
                continue
        result = set_indicator_value(categories, str(indicator_id).upper(), value)
        if not result.ok:
            rejected.append(result.error.message)
    return rejected

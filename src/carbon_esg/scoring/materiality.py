# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Double-materiality matrix for the ESG indicators.

Each mapped indicator gets a fixed position: its impact on the
environment and society (x) and the financial risk it carries for the
company (y), both on 0-100.
"""

from __future__ import annotations

from typing import Mapping, NamedTuple, Sequence

from carbon_esg.data.models import ESGCategory, MaterialityPoint


class MaterialityWeight(NamedTuple):
    environmental_impact: float
    financial_risk: float


MATERIALITY_MAP: dict[str, MaterialityWeight] = {
    # Environment
    "E1": MaterialityWeight(75, 60),
    "E3": MaterialityWeight(65, 55),
    "E4": MaterialityWeight(85, 80),
    "E6": MaterialityWeight(90, 85),
    "E7": MaterialityWeight(80, 75),
    "E9": MaterialityWeight(70, 50),
    "E10": MaterialityWeight(60, 45),
    "E11": MaterialityWeight(50, 30),
    # Social
    "S2": MaterialityWeight(20, 55),
    "S3": MaterialityWeight(15, 65),
    "S4": MaterialityWeight(10, 70),
    "S6": MaterialityWeight(25, 80),
    "S7": MaterialityWeight(15, 45),
    # Governance
    "G1": MaterialityWeight(30, 50),
    "G2": MaterialityWeight(25, 60),
    "G5": MaterialityWeight(20, 85),
    "G9": MaterialityWeight(40, 55),
}


def materiality_matrix(
    categories: Sequence[ESGCategory],
    weights: Mapping[str, MaterialityWeight] = MATERIALITY_MAP,
) -> list[MaterialityPoint]:
    """Matrix points for every mapped indicator that has a value."""
    points: list[MaterialityPoint] = []
    for category in categories:
        for indicator in category.indicators:
            weight = weights.get(indicator.id)
            if weight is None or indicator.value is None:
                continue
            points.append(MaterialityPoint(
                id=indicator.id,
                label=indicator.label,
                pillar=indicator.pillar,
                environmental_impact=weight.environmental_impact,
                financial_risk=weight.financial_risk,
            ))
    return points

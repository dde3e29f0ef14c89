# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Threshold-driven regulatory alerts on ESG indicator values.

Every rule is a row of :data:`ALERT_RULES`: a trigger over the indicator
values and pillar scores, and the text shown when it fires.  Missing
numeric values count as 0 and missing binaries as ``False``.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, NamedTuple, Optional, Sequence, Union

from carbon_esg.data.models import AlertLevel, ESGCategory, ESGScore, Pillar, RegulatoryAlert

logger = logging.getLogger(__name__)

IndicatorValues = Mapping[str, Union[bool, float, None]]
PillarScores = Mapping[Pillar, float]

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------
CBAM_EXPOSURE_TCO2E = 1_000        # E6 + E7 above this
WATER_STRESS_M3 = 10_000           # E4 above this ...
WATER_RECYCLING_MIN_PERCENT = 20   # ... with E5 below this
GENDER_PAY_GAP_MAX_PERCENT = 15    # S3 above this
GREEN_CREDIT_MIN_E_SCORE = 70      # E pillar at or above this


def _num(values: IndicatorValues, indicator_id: str) -> float:
    value = values.get(indicator_id)
    if value is None or isinstance(value, bool):
        return 0.0
    return float(value)


class AlertRule(NamedTuple):
    id: str
    level: AlertLevel
    title: str
    regulation: str
    action: str
    triggered: Callable[[IndicatorValues, PillarScores], bool]
    describe: Callable[[IndicatorValues, PillarScores], str]


ALERT_RULES: tuple[AlertRule, ...] = (
    AlertRule(
        id="cbam-exposure",
        level=AlertLevel.warning,
        title="Significant CBAM exposure",
        regulation="Regulation (EU) 2023/956 - CBAM",
        action="Prepare a decarbonisation plan to reduce exposure.",
        triggered=lambda v, s: _num(v, "E6") + _num(v, "E7") > CBAM_EXPOSURE_TCO2E,
        describe=lambda v, s: (
            f"Scope 1 and 2 emissions of {_num(v, 'E6') + _num(v, 'E7'):.0f} tCO2e "
            "fall under the EU carbon border adjustment mechanism."
        ),
    ),
    AlertRule(
        id="csr-governance",
        level=AlertLevel.error,
        title="CSR law non-compliance",
        regulation="Law 2018-35 (CSR)",
        action="Set up the required governance structures.",
        triggered=lambda v, s: v.get("G4") is not True or v.get("G5") is not True,
        describe=lambda v, s: (
            "Large companies must have a CSR committee and an anti-corruption code."
        ),
    ),
    AlertRule(
        id="water-stress",
        level=AlertLevel.warning,
        title="Critical water stress",
        regulation="National Water Plan 2050",
        action="Invest in water recycling technology.",
        triggered=lambda v, s: (
            _num(v, "E4") > WATER_STRESS_M3 and _num(v, "E5") < WATER_RECYCLING_MIN_PERCENT
        ),
        describe=lambda v, s: (
            f"High water consumption ({_num(v, 'E4'):,.0f} m3) "
            f"with low recycling ({_num(v, 'E5'):g}%)."
        ),
    ),
    AlertRule(
        id="gender-equality",
        level=AlertLevel.info,
        title="Notable gender pay gap",
        regulation="CSRD - gender equality",
        action="Analyse and correct pay differences.",
        triggered=lambda v, s: _num(v, "S3") > GENDER_PAY_GAP_MAX_PERCENT,
        describe=lambda v, s: (
            f"A {_num(v, 'S3'):g}% gap exceeds CSRD good practice "
            f"(<{GENDER_PAY_GAP_MAX_PERCENT}%)."
        ),
    ),
    AlertRule(
        id="env-performance",
        level=AlertLevel.success,
        title="Excellent environmental performance",
        regulation="Central bank circular 2023-08 (green credit)",
        action="",
        triggered=lambda v, s: s.get(Pillar.E, 0.0) >= GREEN_CREDIT_MIN_E_SCORE,
        describe=lambda v, s: (
            f"E score of {s.get(Pillar.E, 0.0):.0f}/100 is eligible for green credit lines."
        ),
    ),
)


def indicator_values(categories: Sequence[ESGCategory]) -> dict[str, Union[bool, float, None]]:
    return {i.id: i.value for c in categories for i in c.indicators}


def regulatory_alerts(
    categories: Sequence[ESGCategory],
    score: Optional[ESGScore] = None,
    rules: Sequence[AlertRule] = ALERT_RULES,
) -> list[RegulatoryAlert]:
    """Evaluate every rule against the indicators and pillar scores.

    Without a *score* (e.g. invalid pillar weights) pillar-based rules
    see a score of 0 and do not fire.
    """
    values = indicator_values(categories)
    pillars: dict[Pillar, float] = (
        {p.pillar: p.score for p in score.pillars} if score is not None else {}
    )

    alerts = [
        RegulatoryAlert(
            id=rule.id,
            level=rule.level,
            title=rule.title,
            description=rule.describe(values, pillars),
            regulation=rule.regulation,
            action=rule.action,
        )
        for rule in rules
        if rule.triggered(values, pillars)
    ]
    logger.debug("Regulatory alerts: %s", [a.id for a in alerts])
    return alerts

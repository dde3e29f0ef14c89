# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Master scoring orchestrator.

Runs aggregation, compliance, sector grading, ESG scoring, and uncertainty
propagation over one snapshot of activity entries and assembles the
results into a :class:`CarbonReport`.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from carbon_esg.compliance.scorer import compute_compliance
from carbon_esg.config import EngineConfig
from carbon_esg.data.models import (
    ActivityEntry,
    CarbonReport,
    ESGCategory,
    PeerPosition,
    SectorScore,
)
from carbon_esg.emissions.aggregation import aggregate_by_scope, snapshot
from carbon_esg.errors import CalcResult
from carbon_esg.scoring.alerts import regulatory_alerts
from carbon_esg.scoring.esg import refresh_calculated_indicators, score_esg
from carbon_esg.scoring.materiality import materiality_matrix
from carbon_esg.scoring.peers import esg_sector_key, position_against_peers
from carbon_esg.scoring.sector import emissions_intensity, score_sector
from carbon_esg.uncertainty.gum import propagate

logger = logging.getLogger(__name__)


class ScoringEngine:
    """Orchestrates every calculation for one organisation and period.

    Usage::

        engine = ScoringEngine(load_config("carbon-esg.yaml"))
        report = engine.score(entries, revenue=1200, sector="services")
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()

    def score(
        self,
        entries: Iterable[ActivityEntry],
        revenue: Optional[float] = None,
        sector: Optional[str] = None,
        esg: Optional[Sequence[ESGCategory]] = None,
        organisation: Optional[str] = None,
        period: str = "",
        esg_sector: Optional[str] = None,
    ) -> CarbonReport:
        """Run the full pipeline.

        Args:
            entries: Activity entries; only validated/integrated ones count.
            revenue: Annual revenue in thousands.  Falls back to the config.
                Drives both the sector intensity and the ESG E2/E8 values.
            sector: Emissions benchmark sector key.  Falls back to the config.
            esg: Optional ESG indicator categories to score.
            organisation: Report heading.  Falls back to the config.
            period: Free-text reporting period, e.g. ``"2024"``.
            esg_sector: ESG peer sector (indicator multipliers, peer
                positioning).  Falls back to the config, then to *sector*
                when that is also a peer sector.

        Returns:
            A :class:`CarbonReport`.  Sections that cannot be computed
            (missing revenue, unknown sector, missing uncertainties) carry
            an error value rather than a number.
        """
        cfg = self.config
        revenue = revenue if revenue is not None else cfg.revenue_thousands
        sector = sector or cfg.sector
        gwp = cfg.gwp or None
        entries = snapshot(entries)

        totals = aggregate_by_scope(entries, gwp)
        compliance = compute_compliance(entries)

        intensity = emissions_intensity(totals.total, revenue)
        if intensity.ok:
            sector_result = score_sector(
                intensity.value, sector, cfg.ladder, cfg.extra_sectors
            )
        else:
            sector_result = CalcResult[SectorScore](error=intensity.error)

        esg_result = None
        categories = None
        peers = None
        alerts = []
        materiality = []
        if esg is not None:
            peer_sector = esg_sector_key(esg_sector or cfg.esg_sector, sector)
            categories = refresh_calculated_indicators(esg, revenue)
            esg_result = score_esg(
                categories,
                peer_sector or "",
                cfg.pillar_weights.as_dict(),
                cfg.esg_grade_bands,
            )
            if peer_sector is not None:
                if esg_result.ok:
                    peers = position_against_peers(esg_result.value, peer_sector)
                else:
                    peers = CalcResult[PeerPosition](error=esg_result.error)
            alerts = regulatory_alerts(categories, esg_result.value)
            materiality = materiality_matrix(categories)

        by_scope, total_band = propagate(
            entries,
            cfg.missing_uncertainty_policy,
            cfg.coverage_factor,
            gwp,
        )

        logger.info(
            "Scored %d entries: total %.1f kg CO2e, compliance %d%%",
            totals.entry_count, totals.total, compliance.score,
        )
        return CarbonReport(
            organisation=organisation if organisation is not None else cfg.organisation,
            period=period,
            totals=totals,
            compliance=compliance,
            intensity=intensity,
            sector=sector_result,
            esg=esg_result,
            esg_indicators=categories,
            esg_peers=peers,
            esg_alerts=alerts,
            materiality=materiality,
            uncertainty=by_scope,
            total_uncertainty=total_band,
        )

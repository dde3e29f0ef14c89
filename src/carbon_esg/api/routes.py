# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""FastAPI router with REST endpoints for the calculation core."""

from __future__ import annotations

from carbon_esg.api import check_dependency

check_dependency("fastapi", "pip install -e '.[api]'")

from fastapi import APIRouter, Depends, HTTPException, Request  # noqa: E402

from carbon_esg.api.models import (  # noqa: E402
    EmissionsResponse,
    EntriesRequest,
    HealthResponse,
    ReportRequest,
    SectorRequest,
)
from carbon_esg.compliance.scorer import compute_compliance  # noqa: E402
from carbon_esg.config import EngineConfig  # noqa: E402
from carbon_esg.data.models import CarbonReport, ComplianceResult, SectorScore  # noqa: E402
from carbon_esg.emissions.aggregation import (  # noqa: E402
    aggregate_by_category,
    aggregate_by_scope,
)
from carbon_esg.errors import CalcResult  # noqa: E402
from carbon_esg.scoring.engine import ScoringEngine  # noqa: E402
from carbon_esg.scoring.indicators import apply_indicator_values, default_esg_schema  # noqa: E402
from carbon_esg.scoring.sector import score_sector, score_sector_emissions  # noqa: E402

router = APIRouter(prefix="/api/v1", tags=["carbon-esg"])


# ---------------------------------------------------------------------------
# Dependency injection: engine configuration
# ---------------------------------------------------------------------------

def get_config(request: Request) -> EngineConfig:
    """Configuration attached to the app by :func:`create_app`.

    Used as a FastAPI dependency so it can be overridden in tests.
    """
    return getattr(request.app.state, "config", None) or EngineConfig()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Return service health status and version information."""
    import carbon_esg

    return HealthResponse(status="ok", version=carbon_esg.__version__)


@router.post("/emissions", response_model=EmissionsResponse)
async def emissions(
    request: EntriesRequest,
    config: EngineConfig = Depends(get_config),
) -> EmissionsResponse:
    """Aggregate CO2e per scope and per category."""
    gwp = config.gwp or None
    return EmissionsResponse(
        totals=aggregate_by_scope(request.entries, gwp),
        by_category=aggregate_by_category(request.entries, gwp),
    )


@router.post("/compliance", response_model=ComplianceResult)
async def compliance(request: EntriesRequest) -> ComplianceResult:
    """Completeness of the entries against the mandatory categories."""
    return compute_compliance(request.entries)


@router.post("/sector", response_model=SectorScore)
async def sector(
    request: SectorRequest,
    config: EngineConfig = Depends(get_config),
) -> SectorScore:
    """Grade emissions intensity against the sector benchmark.

    Unknown sectors and non-positive revenue are reported as 422 with the
    error code in the detail.
    """
    sector_key = request.sector or config.sector
    result: CalcResult[SectorScore]
    if request.intensity is not None:
        result = score_sector(
            request.intensity, sector_key, config.ladder, config.extra_sectors
        )
    else:
        totals = aggregate_by_scope(request.entries, config.gwp or None)
        revenue = (
            request.revenue_thousands
            if request.revenue_thousands is not None
            else config.revenue_thousands
        )
        result = score_sector_emissions(
            totals.total, revenue, sector_key, config.ladder, config.extra_sectors
        )

    if not result.ok:
        raise HTTPException(status_code=422, detail=result.error.model_dump(mode="json"))
    return result.value


@router.post("/report", response_model=CarbonReport)
async def report(
    request: ReportRequest,
    config: EngineConfig = Depends(get_config),
) -> CarbonReport:
    """Run every calculation and return the full report.

    Sections that cannot be computed carry an error value in the body.
    """
    esg = None
    if request.esg_values is not None:
        esg = default_esg_schema()
        rejected = apply_indicator_values(esg, request.esg_values)
        if rejected:
            raise HTTPException(status_code=422, detail={"esg_values": rejected})

    return ScoringEngine(config).score(
        request.entries,
        revenue=request.revenue_thousands,
        sector=request.sector,
        esg=esg,
        organisation=request.organisation,
        period=request.period,
        esg_sector=request.esg_sector,
    )

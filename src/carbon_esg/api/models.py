# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""API request/response Pydantic models for the REST interface."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field

from carbon_esg.data.models import ActivityEntry, ScopeTotals


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class EntriesRequest(BaseModel):
    """Request body carrying a batch of activity entries."""

    entries: list[ActivityEntry] = Field(
        default_factory=list,
        description="Activity entries; only validated/integrated ones are counted.",
    )


class SectorRequest(EntriesRequest):
    """Request body for the ``POST /api/v1/sector`` endpoint."""

    sector: Optional[str] = Field(
        default=None, description="Sector key. Falls back to the server config."
    )
    revenue_thousands: Optional[float] = Field(
        default=None, description="Annual revenue in thousands."
    )
    intensity: Optional[float] = Field(
        default=None,
        ge=0,
        description="Grade this intensity directly instead of computing it from entries.",
    )


class ReportRequest(EntriesRequest):
    """Request body for the ``POST /api/v1/report`` endpoint."""

    organisation: Optional[str] = Field(default=None)
    period: str = Field(default="")
    sector: Optional[str] = Field(default=None)
    esg_sector: Optional[str] = Field(
        default=None, description="ESG peer sector (e.g. textile). Falls back to sector."
    )
    revenue_thousands: Optional[float] = Field(default=None)
    esg_values: Optional[dict[str, Union[bool, float, None]]] = Field(
        default=None,
        description="ESG indicator values keyed by id (E1..G9). Omit to skip ESG.",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class EmissionsResponse(BaseModel):
    """Response body returned by the ``POST /api/v1/emissions`` endpoint."""

    totals: ScopeTotals
    by_category: dict[str, float] = Field(
        default_factory=dict, description="kg CO2e per category, largest first."
    )


class HealthResponse(BaseModel):
    """Response body returned by the ``GET /api/v1/health`` endpoint."""

    status: str = Field(..., description="Service health status (e.g. 'ok').")
    version: str = Field(..., description="Application version string.")

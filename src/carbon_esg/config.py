# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Engine configuration model and YAML loader.

Every regulatory constant that may need adjusting (GWP values, the
coverage factor, ladder multipliers, pillar weights, grade bands) is
held here with defaults matching the published reference values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from carbon_esg.data.models import ESGGrade, Gas, SectorBenchmark
from carbon_esg.errors import ConfigError
from carbon_esg.uncertainty.gum import DEFAULT_COVERAGE_FACTOR, MissingUncertaintyPolicy


# ---------------------------------------------------------------------------
# Scoring sections
# ---------------------------------------------------------------------------

class LadderConfig(BaseModel):
    """Multipliers of the sector average that bound each grade."""

    a_ratio: float = Field(default=0.8, gt=0)
    b_plus_ratio: float = Field(default=1.0, gt=0)
    b_ratio: float = Field(default=1.2, gt=0)
    c_ratio: float = Field(default=1.5, gt=0)

    @field_validator("c_ratio")
    @classmethod
    def _ordered(cls, v: float, info: ValidationInfo) -> float:
        data = info.data
        ratios = [data.get("a_ratio"), data.get("b_plus_ratio"), data.get("b_ratio"), v]
        if any(r is None for r in ratios):
            return v
        if ratios != sorted(ratios):
            raise ValueError("Ladder ratios must be non-decreasing (a <= b+ <= b <= c)")
        return v


class GradeBand(BaseModel):
    """Minimum composite score for an ESG grade."""

    min: float = Field(..., ge=0, le=100)
    grade: ESGGrade


class PillarWeights(BaseModel):
    """Weight of each pillar in the composite ESG score."""

    E: float = Field(default=0.40, ge=0, le=1.0)
    S: float = Field(default=0.30, ge=0, le=1.0)
    G: float = Field(default=0.30, ge=0, le=1.0)

    def as_dict(self) -> dict[str, float]:
        return {"E": self.E, "S": self.S, "G": self.G}


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------

class EngineConfig(BaseModel):
    """Top-level engine configuration loaded from YAML."""

    organisation: str = Field(default="")
    sector: Optional[str] = Field(default=None, description="Default sector key")
    esg_sector: Optional[str] = Field(
        default=None,
        description="ESG peer sector (multipliers and peer scores); defaults to sector",
    )
    revenue_thousands: Optional[float] = Field(
        default=None, description="Annual revenue in thousands of currency units"
    )

    gwp: dict[Gas, float] = Field(
        default_factory=dict, description="GWP overrides keyed by gas"
    )
    coverage_factor: Union[float, Literal["auto"]] = Field(
        default=DEFAULT_COVERAGE_FACTOR,
        description="k for expanded uncertainty, or 'auto' for Student-t from dof",
    )
    missing_uncertainty_policy: MissingUncertaintyPolicy = Field(
        default=MissingUncertaintyPolicy.INVALIDATE
    )

    ladder: LadderConfig = Field(default_factory=LadderConfig)
    pillar_weights: PillarWeights = Field(default_factory=PillarWeights)
    esg_grade_bands: Optional[list[GradeBand]] = Field(
        default=None, description="Override of the ESG grade table"
    )
    extra_sectors: list[SectorBenchmark] = Field(default_factory=list)

    data_dir: Optional[str] = Field(default=None)

    @field_validator("coverage_factor")
    @classmethod
    def _positive_k(cls, v: Union[float, str]) -> Union[float, str]:
        if not isinstance(v, str) and v <= 0:
            raise ValueError("coverage_factor must be > 0")
        return v


def load_config(path: str | Path) -> EngineConfig:
    """Load an :class:`EngineConfig` from a YAML file."""
    import yaml

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    try:
        return EngineConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{exc}") from exc

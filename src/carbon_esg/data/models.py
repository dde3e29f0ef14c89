# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Core Pydantic v2 data models for the carbon accounting core.

This module defines the data contract shared by the emissions, compliance,
scoring, uncertainty, reporting, and CLI layers.
"""

from __future__ import annotations

import unicodedata
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, Field, computed_field

from carbon_esg.errors import CalcResult


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Scope(str, Enum):
    """GHG Protocol emission scope."""

    scope1 = "scope1"
    scope2 = "scope2"
    scope3 = "scope3"

    @property
    def label(self) -> str:
        return {
            Scope.scope1: "Scope 1 (direct)",
            Scope.scope2: "Scope 2 (purchased energy)",
            Scope.scope3: "Scope 3 (value chain)",
        }[self]


class Gas(str, Enum):
    """Greenhouse gas the activity mass is expressed in."""

    CO2 = "CO2"
    CH4 = "CH4"
    N2O = "N2O"
    SF6 = "SF6"
    R134A = "R-134a"
    R404A = "R-404A"
    R410A = "R-410A"
    R407C = "R-407C"
    R32 = "R-32"
    R22 = "R-22"
    R11 = "R-11"
    R12 = "R-12"


class EntryStatus(str, Enum):
    """Lifecycle of an activity entry."""

    draft = "draft"
    validated = "validated"
    integrated = "integrated"
    archived = "archived"


class SourceType(str, Enum):
    """Where an activity entry came from."""

    manual = "manual"
    ocr = "ocr"
    import_csv = "import_csv"
    erp_api = "erp_api"


class SectorGrade(str, Enum):
    """Letter grade on the sector-relative intensity ladder."""

    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C = "C"
    D = "D"

    @property
    def color(self) -> str:
        """Terminal / report color associated with this grade."""
        if self in (SectorGrade.A_PLUS, SectorGrade.A):
            return "green"
        if self is SectorGrade.B_PLUS:
            return "blue"
        if self in (SectorGrade.B, SectorGrade.C):
            return "yellow"
        return "red"


class PerformanceLevel(str, Enum):
    """Qualitative reading of an intensity against its sector."""

    excellent = "excellent"
    good = "good"
    average = "average"
    critical = "critical"


class ESGGrade(str, Enum):
    """Composite ESG rating band."""

    AAA = "AAA"
    AA = "AA"
    A = "A"
    BBB = "BBB"
    BB = "BB"
    B = "B"
    CCC = "CCC"

    @property
    def label(self) -> str:
        return {
            ESGGrade.AAA: "Leader",
            ESGGrade.AA: "Excellence",
            ESGGrade.A: "Performant",
            ESGGrade.BBB: "Average",
            ESGGrade.BB: "Progressing",
            ESGGrade.B: "Needs improvement",
            ESGGrade.CCC: "High risk",
        }[self]

    @property
    def color(self) -> str:
        if self in (ESGGrade.AAA, ESGGrade.AA, ESGGrade.A):
            return "green"
        if self in (ESGGrade.BBB, ESGGrade.BB):
            return "yellow"
        return "red"


class Pillar(str, Enum):
    """ESG pillar."""

    E = "E"
    S = "S"
    G = "G"

    @property
    def display_name(self) -> str:
        from carbon_esg.scoring.weights import PILLAR_NAMES
        return PILLAR_NAMES[self.value]


class IndicatorType(str, Enum):
    """How an ESG indicator gets its value."""

    numeric = "numeric"
    binary = "binary"
    calculated = "calculated"


class AlertLevel(str, Enum):
    """Severity of a regulatory alert."""

    info = "info"
    success = "success"
    warning = "warning"
    error = "error"

    @property
    def color(self) -> str:
        return {
            AlertLevel.info: "cyan",
            AlertLevel.success: "green",
            AlertLevel.warning: "yellow",
            AlertLevel.error: "red",
        }[self]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_text(text: str) -> str:
    """Lower-case *text* and strip diacritics (``Électricité`` -> ``electricite``)."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


# ---------------------------------------------------------------------------
# Activity data
# ---------------------------------------------------------------------------

class ActivityEntry(BaseModel):
    """One recorded consumption or activity fact."""

    model_config = {
        "frozen": False,
        "populate_by_name": True,
        "validate_assignment": True,
    }

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Entry identifier")
    scope: Scope = Field(..., description="GHG Protocol scope")
    category: str = Field(default="", description="Category key, e.g. 'electricite'")
    subcategory: str = Field(default="", description="Optional sub-category key")
    description: str = Field(default="", description="Free-text description")
    formula_detail: str = Field(
        default="",
        validation_alias=AliasChoices("formula_detail", "formulaDetail", "formuleDetail"),
        description="Free-text formula shown to auditors",
    )

    quantity: float = Field(..., ge=0, description="Activity quantity, in *unit*")
    unit: str = Field(default="", description="Unit of *quantity*")
    emission_factor_value: float = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices(
            "emission_factor_value", "emissionFactorValue", "factor"
        ),
        description="Mass of gas emitted per unit of activity (kg)",
    )
    emission_factor_source: str = Field(
        default="",
        validation_alias=AliasChoices("emission_factor_source", "emissionFactorSource"),
        description="Reference the factor was taken from",
    )
    gas: Gas = Field(default=Gas.CO2, description="Gas the factor is expressed in")

    uncertainty_percent: Optional[float] = Field(
        default=None, ge=0, description="Relative standard uncertainty in percent"
    )
    status: EntryStatus = Field(default=EntryStatus.validated)
    source_type: SourceType = Field(default=SourceType.manual)
    confidence_score: Optional[float] = Field(
        default=None, ge=0, le=1.0, description="Extraction confidence for OCR drafts"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def emissions(self) -> float:
        """CO2-equivalent emissions in kg (quantity x factor x GWP)."""
        from carbon_esg.emissions.gwp import gwp_for
        return self.quantity * self.emission_factor_value * gwp_for(self.gas)

    @property
    def search_text(self) -> str:
        """Normalised concatenation of every free-text field."""
        return normalize_text(" ".join([
            self.category,
            self.subcategory,
            self.description,
            self.formula_detail,
            self.unit,
            self.emission_factor_source,
        ]))

    @property
    def counts_toward_reporting(self) -> bool:
        """Drafts and archived rows are excluded until validated."""
        return self.status in (EntryStatus.validated, EntryStatus.integrated)


class ScopeTotals(BaseModel):
    """CO2e totals per scope, in kg."""

    scope1: float = Field(default=0.0, ge=0)
    scope2: float = Field(default=0.0, ge=0)
    scope3: float = Field(default=0.0, ge=0)
    entry_count: int = Field(default=0, ge=0, description="Entries that were summed")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> float:
        return self.scope1 + self.scope2 + self.scope3

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_tonnes(self) -> float:
        return self.total / 1000.0

    def for_scope(self, scope: Scope) -> float:
        return getattr(self, scope.value)


# ---------------------------------------------------------------------------
# Compliance
# ---------------------------------------------------------------------------

class MandatoryCategory(BaseModel):
    """A legally required reporting category."""

    model_config = {"frozen": True}

    id: str
    name: str
    scope: Scope
    keywords: frozenset[str] = Field(..., description="Lowercase, accent-free match tokens")


class CategoryStatus(BaseModel):
    """Whether one mandatory category is covered by the entry set."""

    category: MandatoryCategory
    is_filled: bool = False
    matching_entry_ids: list[str] = Field(default_factory=list)


class ComplianceResult(BaseModel):
    """Completeness of the entry set against the mandatory taxonomy."""

    score: int = Field(..., ge=0, le=100, description="round(filled / total * 100)")
    filled_count: int = Field(..., ge=0)
    total_count: int = Field(..., ge=0)
    categories: list[CategoryStatus] = Field(default_factory=list)
    has_data: bool = Field(
        default=False, description="False when no countable entry was supplied"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def filled_categories(self) -> list[MandatoryCategory]:
        return [c.category for c in self.categories if c.is_filled]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def missing_categories(self) -> list[MandatoryCategory]:
        return [c.category for c in self.categories if not c.is_filled]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_fully_compliant(self) -> bool:
        return self.total_count > 0 and self.filled_count == self.total_count


# ---------------------------------------------------------------------------
# Sector scoring
# ---------------------------------------------------------------------------

class SectorBenchmark(BaseModel):
    """Reference emissions intensity for one industry sector."""

    model_config = {"frozen": True}

    key: str
    name: str
    average: float = Field(..., gt=0, description="Sector average intensity")
    top_performers: float = Field(..., gt=0, description="10th-percentile intensity")
    threshold: float = Field(..., gt=0, description="Critical upper bound")
    unit: str = Field(default="tCO2e/k-revenue")
    regulations: tuple[str, ...] = Field(default=())


class SectorScore(BaseModel):
    """Result of grading an intensity against a sector benchmark."""

    sector: str
    intensity: float = Field(..., ge=0)
    score: int = Field(..., ge=0, le=100)
    grade: SectorGrade
    level: PerformanceLevel
    benchmark: SectorBenchmark


# ---------------------------------------------------------------------------
# ESG
# ---------------------------------------------------------------------------

class ESGIndicator(BaseModel):
    """One environmental, social, or governance metric."""

    model_config = {"frozen": False, "populate_by_name": True}

    id: str
    label: str
    pillar: Pillar
    type: IndicatorType
    value: Optional[Union[bool, float]] = None
    unit: str = ""
    weight: float = Field(default=1.0, gt=0)
    description: str = ""


class ESGCategory(BaseModel):
    """Indicators grouped under one pillar with a fixed weight."""

    pillar: Pillar
    label: str
    weight: float = Field(..., ge=0, le=1.0)
    indicators: list[ESGIndicator] = Field(default_factory=list)

    def get(self, indicator_id: str) -> Optional[ESGIndicator]:
        return next((i for i in self.indicators if i.id == indicator_id), None)


class PillarScore(BaseModel):
    """Score for one ESG pillar."""

    pillar: Pillar
    score: float = Field(..., ge=0, le=100)
    weight: float = Field(..., ge=0, le=1.0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def weighted_score(self) -> float:
        return self.score * self.weight


class ESGScore(BaseModel):
    """Composite ESG score and per-pillar breakdown."""

    total: float = Field(..., ge=0, le=100)
    grade: ESGGrade
    pillars: list[PillarScore] = Field(default_factory=list)
    sector: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return self.grade.label

    def pillar(self, pillar: Pillar) -> Optional[PillarScore]:
        return next((p for p in self.pillars if p.pillar == pillar), None)


class ESGPeerBenchmark(BaseModel):
    """Published ESG scores of the companies in one sector."""

    model_config = {"frozen": True}

    key: str
    name: str
    average: float = Field(..., ge=0, le=100, description="Sector average composite")
    top: float = Field(..., ge=0, le=100, description="Best composite in the sector")
    pillar_averages: dict[Pillar, float] = Field(default_factory=dict)


class PeerPosition(BaseModel):
    """Where a composite ESG score sits against its sector peers."""

    benchmark: ESGPeerBenchmark
    total: float = Field(..., ge=0, le=100)
    pillar_gaps: dict[Pillar, float] = Field(
        default_factory=dict, description="Pillar score minus the sector pillar average"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def gap_to_average(self) -> float:
        return round(self.total - self.benchmark.average, 2)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def gap_to_top(self) -> float:
        return round(self.total - self.benchmark.top, 2)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def above_average(self) -> bool:
        return self.total >= self.benchmark.average


class RegulatoryAlert(BaseModel):
    """A threshold-driven regulatory finding on the ESG indicators."""

    id: str
    level: AlertLevel
    title: str
    description: str
    regulation: str
    action: str = ""


class MaterialityPoint(BaseModel):
    """One indicator placed on the double-materiality matrix."""

    id: str
    label: str
    pillar: Pillar
    environmental_impact: float = Field(..., ge=0, le=100, description="Impact materiality")
    financial_risk: float = Field(..., ge=0, le=100, description="Financial materiality")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_double_material(self) -> bool:
        """Material on both axes (each at least 50)."""
        return self.environmental_impact >= 50 and self.financial_risk >= 50


# ---------------------------------------------------------------------------
# Uncertainty
# ---------------------------------------------------------------------------

class UncertaintyBand(BaseModel):
    """Combined and expanded uncertainty around an emissions figure."""

    emissions: float = Field(..., ge=0, description="Central value, kg CO2e")
    standard: float = Field(..., ge=0, description="Combined standard uncertainty u_c")
    coverage_factor: float = Field(..., gt=0, description="k")
    effective_degrees_of_freedom: Optional[float] = Field(
        default=None, description="Welch-Satterthwaite estimate; None when unbounded"
    )
    source_count: int = Field(default=0, ge=0)
    missing_sources: list[str] = Field(
        default_factory=list, description="Entry ids whose uncertainty was unknown"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def expanded(self) -> float:
        """U = k x u_c."""
        return self.coverage_factor * self.standard

    @computed_field  # type: ignore[prop-decorator]
    @property
    def relative_percent(self) -> float:
        if self.emissions == 0:
            return 0.0
        return round(self.expanded / self.emissions * 100, 2)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def lower(self) -> float:
        return max(0.0, self.emissions - self.expanded)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def upper(self) -> float:
        return self.emissions + self.expanded


# ---------------------------------------------------------------------------
# Report (top-level)
# ---------------------------------------------------------------------------

class CarbonReport(BaseModel):
    """Complete calculation output for one organisation and period."""

    organisation: str = Field(default="")
    period: str = Field(default="")
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    totals: ScopeTotals
    compliance: ComplianceResult
    intensity: CalcResult[float]
    sector: CalcResult[SectorScore]
    esg: Optional[CalcResult[ESGScore]] = None
    esg_indicators: Optional[list[ESGCategory]] = Field(
        default=None, description="Indicators as scored, calculated values refreshed"
    )
    esg_peers: Optional[CalcResult[PeerPosition]] = None
    esg_alerts: list[RegulatoryAlert] = Field(default_factory=list)
    materiality: list[MaterialityPoint] = Field(default_factory=list)
    uncertainty: dict[Scope, CalcResult[UncertaintyBand]] = Field(default_factory=dict)
    total_uncertainty: Optional[CalcResult[UncertaintyBand]] = None

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Error taxonomy for the calculation core.

Predictable bad input (negative quantities, non-positive revenue, unknown
sectors, missing uncertainties) is reported as a :class:`CalcResult`
carrying a :class:`CalcError`.  Exceptions are reserved for states the
caller cannot reasonably produce, such as a corrupted taxonomy table.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Machine-readable reason attached to a failed calculation."""

    NEGATIVE_QUANTITY = "negative_quantity"
    NEGATIVE_FACTOR = "negative_factor"
    UNKNOWN_GAS = "unknown_gas"
    NON_POSITIVE_REVENUE = "non_positive_revenue"
    UNKNOWN_SECTOR = "unknown_sector"
    INVALID_WEIGHTS = "invalid_weights"
    MISSING_UNCERTAINTY = "missing_uncertainty"
    INVALID_COVERAGE_FACTOR = "invalid_coverage_factor"
    INSUFFICIENT_DATA = "insufficient_data"
    READ_ONLY_INDICATOR = "read_only_indicator"
    UNKNOWN_INDICATOR = "unknown_indicator"


class CalcError(BaseModel):
    """A typed failure returned instead of raising."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str = Field(default="", description="Human-readable explanation")


class CalcResult(BaseModel, Generic[T]):
    """Either a value or an error, never both."""

    model_config = {"frozen": True}

    value: Optional[T] = None
    error: Optional[CalcError] = None

    @classmethod
    def success(cls, value: T) -> "CalcResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, code: ErrorCode, message: str = "") -> "CalcResult[T]":
        return cls(error=CalcError(code=code, message=message))

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise :class:`CalculationError`."""
        if self.error is not None:
            raise CalculationError(self.error)
        return self.value  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class CarbonESGError(Exception):
    """Base class for all exceptions raised by carbon_esg."""


class CalculationError(CarbonESGError):
    """Raised by :meth:`CalcResult.unwrap` on a failed result."""

    def __init__(self, error: CalcError) -> None:
        self.error = error
        super().__init__(f"{error.code.value}: {error.message}")


class TaxonomyError(CarbonESGError):
    """The mandatory-category table is malformed."""


class ConfigError(CarbonESGError):
    """A configuration file could not be loaded or is invalid."""


class MetadataNotFoundError(CarbonESGError):
    """No calculation metadata record exists for the requested id."""

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""GUM uncertainty propagation."""

from carbon_esg.uncertainty.gum import (
    MissingUncertaintyPolicy,
    combined_uncertainty,
    expanded_uncertainty,
    propagate,
)

__all__ = [
    "MissingUncertaintyPolicy",
    "combined_uncertainty",
    "expanded_uncertainty",
    "propagate",
]

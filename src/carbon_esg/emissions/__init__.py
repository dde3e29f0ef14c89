# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Emission calculation, GWP weighting, and scope aggregation."""

from carbon_esg.emissions.aggregation import (
    aggregate_by_category,
    aggregate_by_scope,
    compute_emissions,
)
from carbon_esg.emissions.gwp import DEFAULT_GWP, to_co2e

__all__ = [
    "DEFAULT_GWP",
    "aggregate_by_category",
    "aggregate_by_scope",
    "compute_emissions",
    "to_co2e",
]

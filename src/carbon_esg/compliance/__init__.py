# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Completeness scoring against the mandatory reporting categories."""

from carbon_esg.compliance.scorer import ComplianceMonitor, compute_compliance
from carbon_esg.compliance.taxonomy import MANDATORY_CATEGORIES, matches_category

__all__ = [
    "ComplianceMonitor",
    "MANDATORY_CATEGORIES",
    "compute_compliance",
    "matches_category",
]

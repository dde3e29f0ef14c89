# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Sector grading, ESG scoring, and the report orchestrator."""

from carbon_esg.scoring.engine import ScoringEngine

__all__ = ["ScoringEngine"]

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""JSON export of reports and audit records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel, Field

from carbon_esg.audit.models import CalculationMetadata
from carbon_esg.data.models import CarbonReport

logger = logging.getLogger(__name__)


class _AuditExport(BaseModel):
    record_count: int
    records: list[CalculationMetadata] = Field(default_factory=list)


def export_report_json(report: CarbonReport, path: str | Path) -> Path:
    """Write *report* as indented JSON and return the path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(report.model_dump_json(indent=2))
    logger.debug("Report written to %s", out)
    return out


def export_audit_json(records: Sequence[CalculationMetadata], path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = _AuditExport(record_count=len(records), records=list(records))
    out.write_text(payload.model_dump_json(indent=2))
    logger.debug("%d audit records written to %s", len(records), out)
    return out

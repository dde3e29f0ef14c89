# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""CSV and JSON import of activity entries.

Reads exported accounting data and produces an :class:`ImportResult`.
Rows that fail validation are reported in ``errors`` and skipped; the
rest of the file is still imported.  Rows extracted by OCR always land
as drafts and must be validated before they count toward any total.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, computed_field

from carbon_esg.data.factors import get_factor
from carbon_esg.data.models import ActivityEntry, EntryStatus, Scope, SourceType
from carbon_esg.emissions.units import canonical_unit, convert_unit

logger = logging.getLogger(__name__)

_SCOPE_ALIASES = {
    "1": Scope.scope1, "scope1": Scope.scope1, "scope 1": Scope.scope1, "scope_1": Scope.scope1,
    "2": Scope.scope2, "scope2": Scope.scope2, "scope 2": Scope.scope2, "scope_2": Scope.scope2,
    "3": Scope.scope3, "scope3": Scope.scope3, "scope 3": Scope.scope3, "scope_3": Scope.scope3,
}


class ImportResult(BaseModel):
    """Entries read from one or more files, plus what went wrong."""

    entries: list[ActivityEntry] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def imported_count(self) -> int:
        return len(self.entries)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def draft_count(self) -> int:
        return sum(1 for e in self.entries if e.status is EntryStatus.draft)


class FileImporter:
    """Import activity entries from CSV or JSON files.

    Args:
        column_map: Maps canonical field names to the column headers used
            in the file, e.g. ``{"quantity": "Quantite"}``.
        source_type: Source recorded on rows that do not state their own.
    """

    def __init__(
        self,
        column_map: Optional[Mapping[str, str]] = None,
        source_type: SourceType = SourceType.import_csv,
    ) -> None:
        self.column_map = dict(column_map or {})
        self.source_type = source_type

    def import_files(self, paths: Iterable[str | Path]) -> ImportResult:
        """Read every file and merge into a single result."""
        result = ImportResult()
        for path_str in paths:
            path = Path(path_str).expanduser()
            if not path.exists():
                result.errors.append(f"File not found: {path}")
                continue

            suffix = path.suffix.lower()
            try:
                if suffix == ".csv":
                    rows = self._read_csv(path)
                elif suffix == ".json":
                    rows = self._read_json(path)
                else:
                    result.errors.append(f"Unsupported file type: {path.suffix}")
                    continue
            except (OSError, UnicodeDecodeError, csv.Error, json.JSONDecodeError, ValueError) as exc:
                result.errors.append(f"Error reading {path}: {exc}")
                continue

            partial = self.import_rows(rows, origin=path.name)
            result.entries.extend(partial.entries)
            result.errors.extend(partial.errors)
            result.warnings.extend(partial.warnings)

        if not result.entries:
            result.warnings.append("No activity entries found in any file")
        return result

    def import_file(self, path: str | Path) -> ImportResult:
        return self.import_files([path])

    def import_rows(
        self, rows: Iterable[Mapping[str, Any]], origin: str = "input"
    ) -> ImportResult:
        """Convert already-parsed rows into entries."""
        result = ImportResult()
        for n, row in enumerate(rows, start=1):
            mapped = _apply_column_map(row, self.column_map)
            if not any(v not in (None, "") for v in mapped.values()):
                continue
            try:
                entry = self._to_entry(mapped)
            except (ValidationError, ValueError, KeyError) as exc:
                message = f"{origin} row {n}: {_short_error(exc)}"
                result.errors.append(message)
                logger.warning("Skipped %s", message)
                continue

            if entry.status is EntryStatus.draft and entry.source_type is SourceType.ocr:
                result.warnings.append(
                    f"{origin} row {n}: OCR entry imported as draft; validate before reporting"
                )
            result.entries.append(entry)
        return result

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _read_csv(self, path: Path) -> list[dict[str, Any]]:
        with open(path, newline="", encoding="utf-8-sig") as f:
            sample = f.read(2048)
            f.seek(0)
            delimiter = ";" if sample.count(";") > sample.count(",") else ","
            reader = csv.DictReader(f, delimiter=delimiter)
            if not reader.fieldnames:
                return []
            return list(reader)

    def _read_json(self, path: Path) -> list[dict[str, Any]]:
        """Supports a flat list or ``{"entries": [...]}``."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("entries", [])
        if not isinstance(data, list):
            raise ValueError("expected a list of entries")
        return [item for item in data if isinstance(item, dict)]

    def _to_entry(self, mapped: dict[str, Any]) -> ActivityEntry:
        scope = _parse_scope(_first(mapped, "scope"))
        factor_key = _first(mapped, "factor_key", "emission_factor_key")
        factor = _float_or_none(
            _first(mapped, "emission_factor_value", "emission_factor", "factor", "facteur")
        )
        quantity = _float_or_none(_first(mapped, "quantity", "quantite", "amount"))
        unit = _first(mapped, "unit", "unite") or ""
        factor_source = _first(mapped, "emission_factor_source", "source") or ""
        uncertainty = _float_or_none(_first(mapped, "uncertainty_percent", "uncertainty"))

        if factor is None and factor_key:
            ref = get_factor(factor_key)
            factor = ref.value
            if unit and canonical_unit(unit) != ref.unit:
                converted, target = convert_unit(quantity or 0.0, unit)
                if target != ref.unit:
                    raise ValueError(
                        f"unit '{unit}' does not match factor '{factor_key}' ({ref.unit})"
                    )
                if quantity is not None:
                    quantity = converted
            unit = ref.unit
            factor_source = factor_source or ref.source
            if uncertainty is None:
                uncertainty = ref.uncertainty_percent
            if scope is None:
                scope = ref.scope
        if scope is None:
            raise ValueError("missing or unrecognised scope")
        if factor is None:
            raise ValueError("missing emission factor")

        source_type = SourceType(_first(mapped, "source_type") or self.source_type.value)
        status_raw = _first(mapped, "status")
        status = EntryStatus(status_raw) if status_raw else EntryStatus.validated
        if source_type is SourceType.ocr:
            status = EntryStatus.draft

        fields: dict[str, Any] = {
            "scope": scope,
            "category": _first(mapped, "category", "categorie") or "",
            "subcategory": _first(mapped, "subcategory", "sous_categorie") or "",
            "description": _first(mapped, "description", "libelle") or "",
            "formula_detail": _first(mapped, "formula_detail") or "",
            "quantity": quantity,
            "unit": unit,
            "emission_factor_value": factor,
            "emission_factor_source": factor_source,
            "uncertainty_percent": uncertainty,
            "status": status,
            "source_type": source_type,
            "confidence_score": _float_or_none(_first(mapped, "confidence_score", "confidence")),
        }
        gas = _first(mapped, "gas")
        if gas:
            fields["gas"] = gas
        entry_id = _first(mapped, "id")
        if entry_id:
            fields["id"] = entry_id
        return ActivityEntry.model_validate(fields)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _apply_column_map(row: Mapping[str, Any], col_map: Mapping[str, str]) -> dict[str, Any]:
    """Apply column mapping and normalise keys to lowercase."""
    reverse_map = {v: k for k, v in col_map.items()}
    result: dict[str, Any] = {}
    for key, value in row.items():
        if key is None:
            continue
        mapped_key = reverse_map.get(key, key).lower().strip()
        result[mapped_key] = value.strip() if isinstance(value, str) else value
    return result


def _first(mapped: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = mapped.get(key)
        if value not in (None, ""):
            return value
    return None


def _float_or_none(val: Any) -> float | None:
    if val is None or val == "":
        return None
    if isinstance(val, str):
        val = val.replace(",", ".").replace(" ", "")
    try:
        return float(val)
    except (ValueError, TypeError):
        raise ValueError(f"not a number: {val!r}") from None


def _parse_scope(val: Any) -> Scope | None:
    if val is None:
        return None
    return _SCOPE_ALIASES.get(str(val).strip().lower())


def _short_error(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
    return str(exc)

# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Unicode bar gauges returned as Rich-markup strings."""

from __future__ import annotations

_FULL = "█"
_EMPTY = "░"


def _bar(ratio: float, width: int) -> str:
    filled = int(max(0.0, min(1.0, ratio)) * width)
    return _FULL * filled + _EMPTY * (width - filled)


def score_color(score: float) -> str:
    """green / yellow / red for a 0-100 score."""
    if score >= 70:
        return "green"
    if score >= 45:
        return "yellow"
    return "red"


def score_bar(score: float, width: int = 20, color: str | None = None) -> str:
    """Gauge for a 0-100 score, e.g. ``[green]█████░░░[/] 62/100``."""
    clamped = max(0.0, min(100.0, score))
    color = color or score_color(clamped)
    return f"[{color}]{_bar(clamped / 100, width)}[/] {clamped:.0f}/100"


def share_bar(part: float, whole: float, width: int = 20, color: str = "cyan") -> str:
    """Gauge of *part* as a share of *whole*, with the percentage."""
    if whole <= 0:
        return f"[dim]{_EMPTY * width}[/] [dim]  0.0%[/]"
    ratio = part / whole
    return f"[{color}]{_bar(ratio, width)}[/] {ratio * 100:5.1f}%"

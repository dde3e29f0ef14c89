# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Completeness scoring against the mandatory category taxonomy.

:func:`compute_compliance` is pure and idempotent.  :class:`ComplianceMonitor`
wraps it with an injected repository and an observer API so that views can
be told when completeness changes instead of polling for it.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Callable, Iterable, Optional, Sequence

from carbon_esg.compliance.taxonomy import (
    MANDATORY_CATEGORIES,
    matches_category,
    validate_taxonomy,
)
from carbon_esg.data.models import (
    ActivityEntry,
    CategoryStatus,
    ComplianceResult,
    MandatoryCategory,
)
from carbon_esg.data.repository import ActivityRepository
from carbon_esg.emissions.aggregation import snapshot

logger = logging.getLogger(__name__)

Subscriber = Callable[[ComplianceResult], None]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_compliance(
    entries: Iterable[ActivityEntry],
    taxonomy: Sequence[MandatoryCategory] = MANDATORY_CATEGORIES,
) -> ComplianceResult:
    """Classify every mandatory category as filled or missing.

    Only validated/integrated entries are considered.  The result does not
    depend on entry order.
    """
    if taxonomy is not MANDATORY_CATEGORIES:
        validate_taxonomy(taxonomy)

    countable = [e for e in snapshot(entries) if e.counts_toward_reporting]

    statuses: list[CategoryStatus] = []
    for cat in taxonomy:
        matching = sorted(e.id for e in countable if matches_category(e, cat))
        statuses.append(CategoryStatus(
            category=cat,
            is_filled=bool(matching),
            matching_entry_ids=matching,
        ))

    filled = sum(1 for s in statuses if s.is_filled)
    total = len(taxonomy)
    score = _round_half_up(filled / total * 100)

    return ComplianceResult(
        score=score,
        filled_count=filled,
        total_count=total,
        categories=statuses,
        has_data=bool(countable),
    )


class ComplianceMonitor:
    """Recompute compliance on demand and notify subscribers of changes.

    Usage::

        monitor = ComplianceMonitor(repository)
        unsubscribe = monitor.subscribe(lambda result: print(result.score))
        repository.add(entry)
        monitor.refresh()
    """

    def __init__(
        self,
        repository: ActivityRepository,
        taxonomy: Sequence[MandatoryCategory] = MANDATORY_CATEGORIES,
    ) -> None:
        validate_taxonomy(taxonomy)
        self.repository = repository
        self.taxonomy = taxonomy
        self._subscribers: list[Subscriber] = []
        self._current: Optional[ComplianceResult] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[ComplianceResult]:
        """Last computed result, or None before the first refresh."""
        return self._current

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def refresh(self) -> ComplianceResult:
        """Recompute from the repository; notify only if the result changed."""
        with self._lock:
            result = compute_compliance(self.repository.list_entries(), self.taxonomy)
            changed = self._current is None or result != self._current
            self._current = result
            subscribers = list(self._subscribers) if changed else []

        if changed:
            logger.debug(
                "Compliance changed: %d/%d (%d%%)",
                result.filled_count, result.total_count, result.score,
            )
        for callback in subscribers:
            try:
                callback(result)
            except Exception:
                logger.warning("Compliance subscriber %r failed", callback, exc_info=True)
        return result

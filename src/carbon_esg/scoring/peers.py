# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Positioning of a composite ESG score against sector peers."""

from __future__ import annotations

from typing import Mapping, Optional

from carbon_esg.data.models import ESGPeerBenchmark, ESGScore, PeerPosition
from carbon_esg.errors import CalcResult, ErrorCode
from carbon_esg.scoring.thresholds import ESG_PEER_BENCHMARKS


def esg_sector_key(
    esg_sector: Optional[str],
    fallback: Optional[str] = None,
    peers: Mapping[str, ESGPeerBenchmark] = ESG_PEER_BENCHMARKS,
) -> Optional[str]:
    """Resolve the ESG peer sector.

    An explicit *esg_sector* is returned as given (lower-cased), known or
    not.  Otherwise *fallback* (typically the emissions sector) is used
    only when it names a peer sector.
    """
    if esg_sector:
        return esg_sector.strip().lower()
    if fallback and fallback.strip().lower() in peers:
        return fallback.strip().lower()
    return None


def position_against_peers(
    score: ESGScore,
    sector: str,
    peers: Mapping[str, ESGPeerBenchmark] = ESG_PEER_BENCHMARKS,
) -> CalcResult[PeerPosition]:
    """Compare *score* with the average and best composite of *sector*."""
    key = sector.strip().lower()
    benchmark = peers.get(key)
    if benchmark is None:
        return CalcResult[PeerPosition].failure(
            ErrorCode.UNKNOWN_SECTOR,
            f"No ESG peer data for {sector!r}; known: {', '.join(sorted(peers))}",
        )

    gaps = {
        p.pillar: round(p.score - benchmark.pillar_averages[p.pillar], 2)
        for p in score.pillars
        if p.pillar in benchmark.pillar_averages
    }
    return CalcResult[PeerPosition].success(
        PeerPosition(benchmark=benchmark, total=score.total, pillar_gaps=gaps)
    )

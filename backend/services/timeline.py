"""
Timeline ordering over AFTER chains

A tenant's Moments form chains: (m1)-[:AFTER]->(m2)-[:AFTER]->(m3). A head is
a Moment with no incoming AFTER edge, so an unlinked Moment is a chain of
length one. Ordering is deterministic for any graph shape:

1. Heads are walked in (created_at, id) order, each chain followed forward
   until it ends or revisits a Moment.
2. A Moment with several outgoing AFTER edges follows the lowest next id.
3. Moments not reachable from any head (only inside a cycle) are appended
   last in (created_at, id) order.

Every Moment appears exactly once.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Set

from models.domain.moment import Moment
from models.domain.relationships import ChainLink

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(moment: Moment):
    created = moment.created_at or _EPOCH
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return (created, moment.id)


def order_timeline(moments: List[Moment], links: List[ChainLink]) -> List[Moment]:
    """
    Order moments by following AFTER chains from every head.

    Args:
        moments: All moments of one tenant
        links: AFTER edges between those moments

    Returns:
        Moments in timeline order
    """
    by_id: Dict[str, Moment] = {m.id: m for m in moments}

    successors: Dict[str, List[str]] = {}
    has_incoming: Set[str] = set()
    for link in links:
        if link.moment_id not in by_id or link.next_id not in by_id:
            continue
        successors.setdefault(link.moment_id, []).append(link.next_id)
        has_incoming.add(link.next_id)

    next_of: Dict[str, str] = {}
    for moment_id, next_ids in successors.items():
        ordered = sorted(set(next_ids))
        if len(ordered) > 1:
            logger.warning(f"Moment {moment_id} has {len(ordered)} AFTER edges; following {ordered[0]}")
        next_of[moment_id] = ordered[0]

    heads = sorted((m for m in moments if m.id not in has_incoming), key=_sort_key)
    if len(heads) > 1 and links:
        logger.info(f"Timeline has {len(heads)} chains")

    ordered_moments: List[Moment] = []
    visited: Set[str] = set()
    for head in heads:
        current = head.id
        while current is not None and current not in visited:
            visited.add(current)
            ordered_moments.append(by_id[current])
            current = next_of.get(current)

    stranded = sorted((m for m in moments if m.id not in visited), key=_sort_key)
    if stranded:
        logger.warning(f"Timeline has {len(stranded)} moments on a cycle; appended by creation time")
        for moment in stranded:
            if moment.id not in visited:
                visited.add(moment.id)
                ordered_moments.append(moment)

    return ordered_moments

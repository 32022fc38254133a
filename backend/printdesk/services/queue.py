from __future__ import annotations
"""Read-only projections over the current order set; nothing is stored."""
from typing import Dict, Iterable

from printdesk.models.order import Order


def queue_snapshot(orders: Iterable[Order]) -> Dict[str, int]:
    queued = [o for o in orders if o.status in Order.QUEUED_STATUSES]
    return {
        'count': len(queued),
        'estimated_time': sum(o.estimated_time for o in queued),
    }


def status_counts(orders: Iterable[Order]) -> Dict[str, int]:
    counts = {s: 0 for s in Order.ALL_STATUSES}
    for o in orders:
        counts[o.status] = counts.get(o.status, 0) + 1
    return counts

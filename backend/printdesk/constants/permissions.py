"""Central enum-like definitions to avoid typos in permission strings.
Extend cautiously; never rename codes silently, tokens issued earlier carry them.
"""
from __future__ import annotations
from typing import List

SERVICE_ACTIONS = {
    'ORDERS': ['READ', 'UPDATE'],
    'FILES': ['PURGE', 'SWEEP'],
}

ORDERS_READ = 'ORDERS.READ'
ORDERS_UPDATE = 'ORDERS.UPDATE'
FILES_PURGE = 'FILES.PURGE'
FILES_SWEEP = 'FILES.SWEEP'


def build_all_permission_codes() -> List[str]:
    codes: List[str] = []
    for svc, actions in SERVICE_ACTIONS.items():
        for act in actions:
            codes.append(f"{svc}.{act}")
    return codes

# Every active admin account receives the full set at login
ADMIN_PERMISSIONS = build_all_permission_codes()

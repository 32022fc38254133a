from __future__ import annotations
"""Simple finite state machine utility for enforcing allowed status transitions.

Usage:
    from printdesk.utils.fsm import TransitionValidator
    ORDER_FSM = TransitionValidator({
        'pending': {'printing', 'cancelled'},
        'printing': {'completed', 'cancelled'},
        'completed': {'delivered', 'cancelled'},
        'delivered': set(),
        'cancelled': set(),
    })
    ORDER_FSM.assert_can_transition(current_status, target_status)

Raises InvalidTransition (400) if the edge is not in the graph.
"""
from typing import Dict, List, Set
from printdesk.errors import InvalidTransition

class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            raise InvalidTransition(current, target, self.field_name)
        return True

    def allowed_from(self, current: str) -> List[str]:
        return sorted(self.graph.get(current, set()))

    def terminal_states(self) -> List[str]:
        return sorted(s for s, targets in self.graph.items() if not targets)

__all__ = ['TransitionValidator']

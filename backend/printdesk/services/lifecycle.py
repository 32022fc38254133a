from __future__ import annotations
"""Order status lifecycle.

pending -> printing -> completed -> delivered, with cancelled reachable from
every non-terminal state. delivered and cancelled are terminal.

Reaching delivered or cancelled schedules deletion of the uploaded document
and of the payment proof on two independent clocks; every other target
clears both schedules. Requests for an edge outside the table raise
InvalidTransition and change nothing.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Union

from printdesk.config.settings import LifecyclePolicy
from printdesk.errors import ValidationError
from printdesk.models.order import Order
from printdesk.utils.fsm import TransitionValidator
from printdesk.utils.timestamps import as_utc

ORDER_FSM = TransitionValidator({
    Order.STATUS_PENDING: {Order.STATUS_PRINTING, Order.STATUS_CANCELLED},
    Order.STATUS_PRINTING: {Order.STATUS_COMPLETED, Order.STATUS_CANCELLED},
    Order.STATUS_COMPLETED: {Order.STATUS_DELIVERED, Order.STATUS_CANCELLED},
    Order.STATUS_DELIVERED: set(),
    Order.STATUS_CANCELLED: set(),
})


@dataclass(frozen=True)
class SetPending:
    target = Order.STATUS_PENDING


@dataclass(frozen=True)
class SetPrinting:
    target = Order.STATUS_PRINTING


@dataclass(frozen=True)
class SetCompleted:
    target = Order.STATUS_COMPLETED


@dataclass(frozen=True)
class SetDelivered:
    target = Order.STATUS_DELIVERED


@dataclass(frozen=True)
class SetCancelled:
    target = Order.STATUS_CANCELLED


TransitionRequest = Union[SetPending, SetPrinting, SetCompleted, SetDelivered, SetCancelled]

_REQUESTS = {cls.target: cls for cls in (SetPending, SetPrinting, SetCompleted, SetDelivered, SetCancelled)}

# Targets after which the artifacts are no longer needed for active processing
_RETIRING = (SetDelivered, SetCancelled)


def transition_request(status: Any) -> TransitionRequest:
    """Build the typed request for a requested status string."""
    if not isinstance(status, str) or status not in Order.ALL_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(Order.ALL_STATUSES)}")
    return _REQUESTS[status]()


def schedule_expiry(now: datetime, policy: LifecyclePolicy) -> Dict[str, Any]:
    now = as_utc(now)
    return {
        'file_expires_at': now + timedelta(hours=policy.file_ttl_hours),
        'payment_proof_expires_at': now + timedelta(hours=policy.payment_proof_ttl_hours),
        'file_deleted': False,
        'payment_proof_deleted': False,
    }


def plan_transition(current_status: str, request: TransitionRequest, now: datetime, policy: LifecyclePolicy) -> Dict[str, Any]:
    """Return the exact column changes for moving an order to request.target.

    Raises InvalidTransition when the edge is not in ORDER_FSM.
    """
    ORDER_FSM.assert_can_transition(current_status, request.target)
    changes: Dict[str, Any] = {'status': request.target}
    if isinstance(request, _RETIRING):
        changes.update(schedule_expiry(now, policy))
    else:
        changes.update({'file_expires_at': None, 'payment_proof_expires_at': None})
    return changes


def transition_graph() -> Dict[str, list]:
    return {state: ORDER_FSM.allowed_from(state) for state in Order.ALL_STATUSES}


__all__ = [
    'ORDER_FSM', 'SetPending', 'SetPrinting', 'SetCompleted', 'SetDelivered', 'SetCancelled', 'TransitionRequest',
    'transition_request', 'plan_transition', 'schedule_expiry', 'transition_graph',
]

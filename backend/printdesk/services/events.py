from __future__ import annotations
"""In-process change notification for order rows.

The store publishes after every committed create/update. Subscribers are
plain callables ``(event, payload)`` so a deployment can bridge them to a
websocket push, a message queue, or leave clients on HTTP polling.
"""
from typing import Any, Callable, Dict, List
import logging

logger = logging.getLogger(__name__)

ORDER_CREATED = 'order.created'
ORDER_UPDATED = 'order.updated'

Subscriber = Callable[[str, Dict[str, Any]], None]


class OrderEvents:
    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback; returns a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def publish(self, event: str, payload: Dict[str, Any]):
        for callback in list(self._subscribers):
            try:
                callback(event, payload)
            except Exception:
                # A broken listener must not undo a committed write
                logger.exception('Order event subscriber failed for %s %s', event, payload.get('id'))

    def __len__(self):
        return len(self._subscribers)


def log_subscriber(event: str, payload: Dict[str, Any]):
    logger.info('%s id=%s status=%s', event, payload.get('id'), payload.get('status'))


__all__ = ['OrderEvents', 'ORDER_CREATED', 'ORDER_UPDATED', 'log_subscriber']

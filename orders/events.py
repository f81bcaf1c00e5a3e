"""
Typed order change events.

Every status update that commits is published on ``order_changed`` as an
``OrderChangeEvent`` so listeners can patch the one order that moved instead of
reloading every order. The same events back the ``/orders/feed/`` endpoint.
"""

import logging
import uuid
from typing import NamedTuple

from django.dispatch import Signal

from .models import Order

logger = logging.getLogger(__name__)

# Sent with sender=Order and event=OrderChangeEvent once the write has committed
order_changed = Signal()


class OrderChangeEvent(NamedTuple):
    update_id: int
    order_id: str
    customer_id: str
    status: str
    message: str
    created_at: object

    @classmethod
    def from_update(cls, update):
        return cls(
            update_id=update.id,
            order_id=str(update.order_id),
            customer_id=str(update.order.customer_id),
            status=update.status,
            message=update.message,
            created_at=update.created_at,
        )


def publish(event):
    """
    Send ``event`` to every listener. A listener that raises is logged and
    skipped; the change it reports has already been committed.
    """
    for receiver, result in order_changed.send_robust(sender=Order, event=event):
        if isinstance(result, Exception):
            logger.error(f"Listener {receiver!r} failed on update {event.update_id} "
                         f"(order {event.order_id})", exc_info=result)


class Subscription:
    """
    A live listener on ``order_changed``.

    Pass ``customer_id`` to hear about one customer's orders only. Call
    ``close`` (or leave the ``with`` block) when the consumer goes away so the
    receiver is disconnected.
    """

    def __init__(self, callback, customer_id=None):
        self.callback = callback
        self.customer_id = str(customer_id) if customer_id is not None else None
        self._dispatch_uid = f"order-subscription-{uuid.uuid4()}"
        order_changed.connect(self._receive, weak=False, dispatch_uid=self._dispatch_uid)
        self.active = True
        logger.debug(f"Opened {self._dispatch_uid} (customer={self.customer_id})")

    def _receive(self, sender, event, **kwargs):
        if self.customer_id is not None and event.customer_id != self.customer_id:
            return
        self.callback(event)

    def close(self):
        if not self.active:
            return
        order_changed.disconnect(dispatch_uid=self._dispatch_uid)
        self.active = False
        logger.debug(f"Closed {self._dispatch_uid}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def subscribe(callback, customer_id=None):
    return Subscription(callback, customer_id=customer_id)

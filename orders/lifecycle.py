"""
Order lifecycle rules.

An order moves ``pending -> accepted -> preparing -> ready -> completed`` and
may be cancelled while it is still ``pending`` or ``accepted``. Only employees
move orders. Every move rewrites ``Order.status`` and appends one
``OrderStatusUpdate`` in the same transaction.
"""

import logging
from typing import NamedTuple

from django.db import IntegrityError, transaction
from rest_framework import status
from rest_framework.exceptions import APIException, PermissionDenied, ValidationError

from inventory.models import MenuItem
from .models import Order, OrderItem, OrderStatus, OrderStatusUpdate, PaymentMethod

logger = logging.getLogger(__name__)

ORDER_PLACED_MESSAGE = "Order placed successfully"
TOKEN_ATTEMPTS = 5

ACTIVE_STATUSES = (
    OrderStatus.PENDING,
    OrderStatus.ACCEPTED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
)


class Transition(NamedTuple):
    source: str
    action: str
    target: str
    message: str


TRANSITIONS = (
    Transition(OrderStatus.PENDING, 'accept', OrderStatus.ACCEPTED,
               "Order accepted and being prepared"),
    Transition(OrderStatus.PENDING, 'decline', OrderStatus.CANCELLED,
               "Sorry, order cancelled"),
    Transition(OrderStatus.ACCEPTED, 'start_preparing', OrderStatus.PREPARING,
               "Food is getting ready"),
    Transition(OrderStatus.ACCEPTED, 'cancel', OrderStatus.CANCELLED,
               "Sorry, order cancelled"),
    Transition(OrderStatus.PREPARING, 'mark_ready', OrderStatus.READY,
               "Your food is ready! You can come and collect it now"),
    Transition(OrderStatus.READY, 'complete', OrderStatus.COMPLETED,
               "Order completed"),
)

ACTIONS = tuple(sorted({t.action for t in TRANSITIONS}))


class InvalidTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This status change is not allowed.'
    default_code = 'invalid_transition'


class EmptyCart(ValidationError):
    default_detail = 'Please add items to your cart before placing an order'
    default_code = 'empty_cart'


def allowed_transitions(current_status):
    """The moves an employee may make from ``current_status``"""
    return [t for t in TRANSITIONS if t.source == current_status]


def find_transition(current_status, target_status):
    for transition in TRANSITIONS:
        if transition.source == current_status and transition.target == target_status:
            return transition
    raise InvalidTransition(f"Cannot move an order from '{current_status}' to '{target_status}'.")


def find_action(current_status, action):
    for transition in TRANSITIONS:
        if transition.source == current_status and transition.action == action:
            return transition
    raise InvalidTransition(f"Action '{action}' is not available for a '{current_status}' order.")


def _ensure_employee(actor):
    if not getattr(actor, 'is_employee', False):
        raise PermissionDenied('Only employees can update order status.')


def _apply(order_id, actor, message, resolve):
    _ensure_employee(actor)

    with transaction.atomic():
        # Lock the row so concurrent moves on one order are serialised
        order = Order.objects.select_for_update().get(pk=order_id)
        try:
            transition = resolve(order.status)
        except InvalidTransition:
            logger.warning(f"Rejected status change on {order.display_number} by {actor.email}: "
                           f"order is '{order.status}'")
            raise

        order.status = transition.target
        order.save(update_fields=['status', 'updated_at'])

        update = OrderStatusUpdate.objects.create(
            order=order,
            status=transition.target,
            message=(message or '').strip() or transition.message,
            updated_by=actor,
        )

    logger.info(f"{order.display_number} {transition.source} -> {transition.target} by {actor.email}")
    return order, update


def transition_order(order_id, target_status, actor, message=None):
    """
    Move an order to ``target_status``.

    Raises ``InvalidTransition`` when the order's current status cannot reach
    ``target_status`` in one step, ``PermissionDenied`` when ``actor`` is not an
    employee and ``Order.DoesNotExist`` for an unknown id. Returns the updated
    order and the status update that was appended.
    """
    return _apply(order_id, actor, message, lambda current: find_transition(current, target_status))


def perform_action(order_id, action, actor, message=None):
    """Same as ``transition_order`` but addressed by action name (``accept``, ...)"""
    return _apply(order_id, actor, message, lambda current: find_action(current, action))


def _create_order(customer, total, payment_method):
    for attempt in range(1, TOKEN_ATTEMPTS + 1):
        try:
            with transaction.atomic():
                return Order.objects.create(
                    customer=customer,
                    total_amount=total,
                    payment_method=payment_method,
                    status=OrderStatus.PENDING,
                )
        except IntegrityError:
            # Another placement took the same daily token
            if attempt == TOKEN_ATTEMPTS:
                raise
            logger.warning(f"Pickup token clash for {customer.email}, retrying ({attempt}/{TOKEN_ATTEMPTS})")


def place_order(customer, cart, payment_method):
    """
    Turn a cart into a pending order.

    Prices are re-read from the menu rather than trusted from the cart, and
    every item must still be available. The order, its items and its first
    status update are written in one transaction. The cart itself is left
    untouched; clear it once this returns.
    """
    if cart.is_empty():
        raise EmptyCart()
    if not getattr(customer, 'is_customer', False):
        raise PermissionDenied('Only customers can place orders.')
    if payment_method not in PaymentMethod.values:
        raise ValidationError({'payment_method': f"'{payment_method}' is not a valid payment method."})

    with transaction.atomic():
        menu = {
            str(pk): item for pk, item in
            MenuItem.objects.filter(
                id__in=[line.menu_item_id for line in cart], is_available=True
            ).in_bulk().items()
        }
        missing = [line.name for line in cart if line.menu_item_id not in menu]
        if missing:
            raise ValidationError({'items': [f"{name} is no longer available" for name in missing]})

        total = sum(menu[line.menu_item_id].price * line.quantity for line in cart)
        if total != cart.total:
            logger.warning(f"Cart total {cart.total} for {customer.email} re-priced to {total}")

        order = _create_order(customer, total, payment_method)
        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                menu_item=menu[line.menu_item_id],
                quantity=line.quantity,
                price=menu[line.menu_item_id].price,
            )
            for line in cart
        ])
        OrderStatusUpdate.objects.create(
            order=order,
            status=OrderStatus.PENDING,
            message=ORDER_PLACED_MESSAGE,
            updated_by=None,
        )

    logger.info(f"{order.display_number} placed by {customer.email}: {len(cart)} lines, total {total}")
    return order

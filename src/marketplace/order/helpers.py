"""Shared loaders for order command handlers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.exceptions import ForbiddenError
from marketplace.order.order import Order


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": f"Order {order_id} does not exist"})


def load_customer_order(order_id, user_id) -> Order:
    """Load an order the caller placed, raise ``ForbiddenError`` for anyone else's."""
    order = load_order(order_id)
    if not order.is_placed_by(user_id):
        raise ForbiddenError("You are not the owner of this order")
    return order


def load_restaurant_order(order_id, restaurant_id) -> Order:
    """Load an order placed with ``restaurant_id``. Ownership is checked by the caller."""
    order = load_order(order_id)
    if not order.is_from_restaurant(restaurant_id):
        raise ForbiddenError("Order does not belong to this restaurant")
    return order

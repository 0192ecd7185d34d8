"""Delivery completion — the only way an order becomes DELIVERED."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.helpers import load_order
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class CompleteOrder:
    user_id = Identifier(required=True)  # the delivery partner
    order_id = Identifier(required=True)
    delivery_rating = Integer()


@marketplace.command_handler(part_of=Order)
class CompleteOrderHandler:
    @handle(CompleteOrder)
    def complete_order(self, command):
        order = load_order(command.order_id)
        order.complete_delivery(command.user_id, delivery_rating=command.delivery_rating)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order delivered",
            order_id=str(order.id),
            delivery_partner_id=str(command.user_id),
            delivery_rating=order.delivery_rating,
        )

"""Restaurant-side order updates — status transitions and cancellation."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.lookup import assert_restaurant_owner
from marketplace.domain import marketplace
from marketplace.order.dispatch import get_dispatcher
from marketplace.order.helpers import load_restaurant_order
from marketplace.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=30)


@marketplace.command(part_of="Order")
class CancelOrderByRestaurant:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = Text()


@marketplace.command_handler(part_of=Order)
class RestaurantOrderHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        try:
            target = OrderStatus(command.status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {command.status}"]})

        assert_restaurant_owner(command.restaurant_id, command.user_id)
        order = load_restaurant_order(command.order_id, command.restaurant_id)
        previous_status = order.status

        partner_id = None
        if target == OrderStatus.CONFIRMED:
            partner_id = get_dispatcher().assign(order)

        order.update_status_by_restaurant(target, delivery_partner_id=partner_id)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order status updated by restaurant",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
        )

    @handle(CancelOrderByRestaurant)
    def cancel_order(self, command):
        assert_restaurant_owner(command.restaurant_id, command.user_id)
        order = load_restaurant_order(command.order_id, command.restaurant_id)

        order.cancel_by_restaurant(command.reason)
        current_domain.repository_for(Order).add(order)

        logger.info("Order cancelled by restaurant", order_id=str(order.id))

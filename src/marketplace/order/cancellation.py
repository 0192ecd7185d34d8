"""Customer cancellation — only while the order is still PENDING."""

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.helpers import load_customer_order
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class CancelOrderByCustomer:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = Text()


@marketplace.command_handler(part_of=Order)
class CancelOrderByCustomerHandler:
    @handle(CancelOrderByCustomer)
    def cancel_order(self, command):
        order = load_customer_order(command.order_id, command.user_id)
        order.cancel_by_customer(command.reason)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order cancelled by customer",
            order_id=str(order.id),
            reason=order.cancellation_reason,
        )

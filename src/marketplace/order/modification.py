"""Customer-side order edits — special instructions and the post-delivery rating."""

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.helpers import load_customer_order
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class UpdateSpecialInstructions:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    special_instructions = Text()


@marketplace.command(part_of="Order")
class RateOrder:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    rating = Integer(required=True)
    review = Text()


@marketplace.command_handler(part_of=Order)
class CustomerOrderHandler:
    @handle(UpdateSpecialInstructions)
    def update_special_instructions(self, command):
        order = load_customer_order(command.order_id, command.user_id)
        order.update_special_instructions(command.special_instructions)
        current_domain.repository_for(Order).add(order)

    @handle(RateOrder)
    def rate_order(self, command):
        order = load_customer_order(command.order_id, command.user_id)
        order.rate(command.rating, review=command.review)
        current_domain.repository_for(Order).add(order)

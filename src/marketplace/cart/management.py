"""Whole-cart operations — clearing a cart and consuming it into an order."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart, DiscardReason
from marketplace.cart.items import find_cart, load_cart
from marketplace.domain import marketplace

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Cart")
class DeleteCart:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class CartManagementHandler:
    @handle(DeleteCart)
    def delete_cart(self, command):
        cart = load_cart(command.user_id, command.restaurant_id)
        cart.discard(DiscardReason.CLEARED)
        current_domain.repository_for(Cart)._dao.delete(cart)
        logger.info("Cart cleared", cart_id=str(cart.id))


def consume_cart(user_id, restaurant_id) -> None:
    """Delete the user's cart for the restaurant once its contents became an order."""
    cart = find_cart(user_id, restaurant_id)
    if cart is None:
        return

    cart.discard(DiscardReason.ORDERED)
    current_domain.repository_for(Cart)._dao.delete(cart)
    logger.info("Cart consumed into order", cart_id=str(cart.id))

"""Cart line management — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart, DiscardReason
from marketplace.catalogue.lookup import food_belongs_to_restaurant, lookup_food, lookup_restaurant
from marketplace.domain import marketplace

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    food_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    food_id = Identifier(required=True)


@marketplace.command_handler(part_of=Cart)
class CartLinesHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        if command.quantity is None or command.quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than zero"]})

        lookup_restaurant(command.restaurant_id)
        food = lookup_food(command.food_id)
        if not food_belongs_to_restaurant(food, command.restaurant_id):
            raise ValidationError({"food_id": ["Food item does not belong to this restaurant"]})
        if not food.is_available:
            raise ValidationError({"food_id": [f"{food.name} is currently unavailable"]})

        repo = current_domain.repository_for(Cart)
        cart = find_cart(command.user_id, command.restaurant_id)
        if cart is None:
            cart = Cart.open(user_id=command.user_id, restaurant_id=command.restaurant_id)

        # Name and cap always come from the catalogue, never from the caller
        cart.set_line(
            food_id=str(food.id),
            name=food.name,
            price=food.price,
            max_quantity=food.max_quantity,
            quantity=command.quantity,
        )
        repo.add(cart)

        logger.info(
            "Cart line set",
            cart_id=str(cart.id),
            food_id=str(food.id),
            quantity=command.quantity,
        )
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = load_cart(command.user_id, command.restaurant_id)
        cart.remove_line(command.food_id)

        if cart.is_empty:
            cart.discard(DiscardReason.EMPTIED)
            repo._dao.delete(cart)
            logger.info("Cart emptied and deleted", cart_id=str(cart.id))
            return

        repo.add(cart)


def find_cart(user_id, restaurant_id) -> Cart | None:
    """The user's open cart for the restaurant, if there is one."""
    carts = (
        current_domain.repository_for(Cart)
        ._dao.query.filter(user_id=str(user_id), restaurant_id=str(restaurant_id))
        .all()
        .items
    )
    return carts[0] if carts else None


def load_cart(user_id, restaurant_id) -> Cart:
    cart = find_cart(user_id, restaurant_id)
    if cart is None:
        raise ObjectNotFoundError({"_entity": "Cart does not exist"})
    return cart

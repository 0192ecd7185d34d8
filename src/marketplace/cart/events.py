"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Cart")
class CartLineAdded:
    """A food item was put in the cart for the first time."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    food_id = Identifier(required=True)
    price = Float(required=True)
    quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartLineQuantitySet:
    """An existing line's quantity was replaced."""

    __version__ = 1

    cart_id = Identifier(required=True)
    food_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartLineRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    food_id = Identifier(required=True)


@marketplace.event(part_of="Cart")
class CartDiscarded:
    """The cart was cleared, emptied, or consumed into an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    reason = String(required=True)

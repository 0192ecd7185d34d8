"""Domain events for the Restaurant and FoodItem aggregates."""

from protean.fields import Boolean, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Restaurant")
class RestaurantRegistered:
    """A restaurant joined the marketplace."""

    __version__ = 1

    restaurant_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)


@marketplace.event(part_of="FoodItem")
class FoodItemAdded:
    """A dish was added to a restaurant's menu."""

    __version__ = 1

    food_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    max_quantity = Integer(required=True)


@marketplace.event(part_of="FoodItem")
class FoodItemRepriced:
    """The owning restaurant changed a dish's price."""

    __version__ = 1

    food_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)


@marketplace.event(part_of="FoodItem")
class FoodItemAvailabilityChanged:
    __version__ = 1

    food_id = Identifier(required=True)
    is_available = Boolean(default=False)

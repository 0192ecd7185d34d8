"""FoodItem aggregate — a dish on a restaurant's menu.

Food items are reference data for the cart and order engines. Carts and
orders copy name, price and max quantity into their own lines, so a price or
availability edit here never reaches a line that already exists.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from marketplace.catalogue.events import (
    FoodItemAdded,
    FoodItemAvailabilityChanged,
    FoodItemRepriced,
)
from marketplace.domain import marketplace

DEFAULT_MAX_QUANTITY = 10


@marketplace.aggregate
class FoodItem:
    restaurant_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    description = Text()
    category = String(max_length=100)
    price = Float(required=True)
    max_quantity = Integer(default=DEFAULT_MAX_QUANTITY)
    preparation_time = Integer(default=0)  # minutes
    is_available = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def price_must_be_positive(self):
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": ["Price must be greater than zero"]})

    @invariant.post
    def max_quantity_must_be_positive(self):
        if self.max_quantity is not None and self.max_quantity < 1:
            raise ValidationError({"max_quantity": ["Max quantity must be at least 1"]})

    @classmethod
    def create(
        cls,
        restaurant_id,
        name,
        price,
        max_quantity=DEFAULT_MAX_QUANTITY,
        description=None,
        category=None,
        preparation_time=0,
        is_available=True,
    ):
        now = datetime.now(UTC)
        food = cls(
            restaurant_id=restaurant_id,
            name=name,
            price=price,
            max_quantity=max_quantity,
            description=description,
            category=category,
            preparation_time=preparation_time,
            is_available=is_available,
            created_at=now,
            updated_at=now,
        )
        food.raise_(
            FoodItemAdded(
                food_id=str(food.id),
                restaurant_id=str(restaurant_id),
                name=name,
                price=price,
                max_quantity=food.max_quantity,
            )
        )
        return food

    def belongs_to(self, restaurant_id) -> bool:
        return str(self.restaurant_id) == str(restaurant_id)

    def reprice(self, new_price):
        previous_price = self.price
        self.price = new_price
        self.updated_at = datetime.now(UTC)
        self.raise_(
            FoodItemRepriced(
                food_id=str(self.id),
                previous_price=previous_price,
                new_price=new_price,
            )
        )

    def set_availability(self, is_available):
        self.is_available = is_available
        self.updated_at = datetime.now(UTC)
        self.raise_(FoodItemAvailabilityChanged(food_id=str(self.id), is_available=is_available))

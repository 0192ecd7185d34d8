"""Cart aggregate (CQRS) — one mutable cart per user per restaurant.

A cart is found by its ``(user_id, restaurant_id)`` pair and gets a fresh
identity each time it is opened, so a cart deleted after an order can be
opened again without touching the old cart's history. Lines are
denormalized snapshots of catalogue food items: price and max quantity are
frozen when the line is first added.

Adding a food that is already in the cart replaces the line's quantity
instead of incrementing it.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.cart.events import (
    CartDiscarded,
    CartLineAdded,
    CartLineQuantitySet,
    CartLineRemoved,
)
from marketplace.domain import marketplace


class DiscardReason(Enum):
    CLEARED = "CLEARED"
    EMPTIED = "EMPTIED"
    ORDERED = "ORDERED"


def validate_quantity(quantity, max_quantity, field="quantity"):
    if quantity is None or quantity <= 0:
        raise ValidationError({field: ["Quantity must be greater than zero"]})
    if quantity > max_quantity:
        raise ValidationError({field: [f"Quantity cannot exceed {max_quantity}"]})


@marketplace.entity(part_of="Cart")
class CartLine:
    food_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True)
    quantity = Integer(required=True, min_value=1)
    max_quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


@marketplace.aggregate
class Cart:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def line_quantities_must_respect_caps(self):
        for line in self.lines:
            if line.quantity > line.max_quantity:
                raise ValidationError({"quantity": [f"Quantity cannot exceed {line.max_quantity}"]})

    @invariant.post
    def food_items_must_be_unique(self):
        food_ids = [str(line.food_id) for line in self.lines]
        if len(food_ids) != len(set(food_ids)):
            raise ValidationError({"lines": ["A food item can appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, user_id, restaurant_id):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            restaurant_id=restaurant_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lines
    # -------------------------------------------------------------------
    def line_for(self, food_id):
        return next((line for line in self.lines if str(line.food_id) == str(food_id)), None)

    def set_line(self, food_id, name, price, max_quantity, quantity):
        """Append a line for ``food_id`` or replace the quantity of the existing one."""
        existing = self.line_for(food_id)
        now = datetime.now(UTC)

        if existing:
            validate_quantity(quantity, existing.max_quantity)
            previous_quantity = existing.quantity
            existing.quantity = quantity
            self.updated_at = now
            self.raise_(
                CartLineQuantitySet(
                    cart_id=str(self.id),
                    food_id=str(food_id),
                    previous_quantity=previous_quantity,
                    new_quantity=quantity,
                )
            )
            return

        validate_quantity(quantity, max_quantity)
        self.add_lines(
            CartLine(
                food_id=food_id,
                name=name,
                price=price,
                quantity=quantity,
                max_quantity=max_quantity,
                added_at=now,
            )
        )
        self.updated_at = now
        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                restaurant_id=str(self.restaurant_id),
                food_id=str(food_id),
                price=price,
                quantity=quantity,
            )
        )

    def remove_line(self, food_id):
        line = self.line_for(food_id)
        if line is None:
            raise ObjectNotFoundError({"_entity": f"Food item {food_id} is not in the cart"})

        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartLineRemoved(cart_id=str(self.id), food_id=str(food_id)))

    def discard(self, reason: DiscardReason):
        self.raise_(
            CartDiscarded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                restaurant_id=str(self.restaurant_id),
                reason=reason.value,
            )
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> float:
        return sum(line.line_total for line in self.lines)

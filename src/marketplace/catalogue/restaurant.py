"""Restaurant aggregate — the owner-governed seller behind every cart and order."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Float, Identifier, String

from marketplace.catalogue.events import RestaurantRegistered
from marketplace.domain import marketplace


class RestaurantStatus(Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


@marketplace.aggregate
class Restaurant:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    address = String(required=True, max_length=500)
    phone = String(max_length=20)
    is_open = Boolean(default=True)
    rating = Float(default=0.0)
    status = String(choices=RestaurantStatus, default=RestaurantStatus.ACTIVE.value)
    created_at = DateTime()

    @classmethod
    def register(cls, owner_id, name, address, phone=None):
        restaurant = cls(
            owner_id=owner_id,
            name=name,
            address=address,
            phone=phone,
            created_at=datetime.now(UTC),
        )
        restaurant.raise_(
            RestaurantRegistered(
                restaurant_id=str(restaurant.id),
                owner_id=str(owner_id),
                name=name,
            )
        )
        return restaurant

    def is_owned_by(self, user_id) -> bool:
        return str(self.owner_id) == str(user_id)

    def summary(self) -> dict:
        """Name and address, as shown next to carts and orders."""
        return {"restaurant_id": str(self.id), "name": self.name, "address": self.address}

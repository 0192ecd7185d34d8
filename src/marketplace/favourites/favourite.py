"""Favourite aggregate — a customer's bookmark on one of their delivered orders.

A user holds at most one favourite per order; the handler looks the pair up
before bookmarking. Each bookmark gets a fresh identity, so an order can be
favourited again after it was removed.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier

from marketplace.domain import marketplace
from marketplace.exceptions import ForbiddenError, InvalidStateError
from marketplace.favourites.events import OrderFavourited, OrderUnfavourited
from marketplace.order.order import OrderStatus


@marketplace.aggregate
class Favourite:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    added_at = DateTime()

    @classmethod
    def bookmark(cls, user_id, order):
        """Favourite ``order`` for ``user_id``; the order must be theirs and delivered."""
        if not order.is_placed_by(user_id):
            raise ForbiddenError("You can only favourite your own orders")
        if OrderStatus(order.status) != OrderStatus.DELIVERED:
            raise InvalidStateError("Only delivered orders can be added to favourites")

        favourite = cls(
            user_id=user_id,
            order_id=str(order.id),
            restaurant_id=str(order.restaurant_id),
            added_at=datetime.now(UTC),
        )
        favourite.raise_(
            OrderFavourited(
                favourite_id=str(favourite.id),
                user_id=str(user_id),
                order_id=str(order.id),
            )
        )
        return favourite

    def unbookmark(self):
        self.raise_(
            OrderUnfavourited(
                favourite_id=str(self.id),
                user_id=str(self.user_id),
                order_id=str(self.order_id),
            )
        )

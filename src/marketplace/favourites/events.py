"""Domain events for the Favourite aggregate."""

from protean.fields import Identifier

from marketplace.domain import marketplace


@marketplace.event(part_of="Favourite")
class OrderFavourited:
    __version__ = 1

    favourite_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)


@marketplace.event(part_of="Favourite")
class OrderUnfavourited:
    __version__ = 1

    favourite_id = Identifier(required=True)
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)

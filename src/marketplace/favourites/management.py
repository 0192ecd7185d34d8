"""Favourites — add and remove delivered orders from a customer's favourites."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.exceptions import ConflictError
from marketplace.favourites.favourite import Favourite
from marketplace.order.helpers import load_customer_order, load_order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Favourite")
class AddToFavourites:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)


@marketplace.command(part_of="Favourite")
class RemoveFromFavourites:
    user_id = Identifier(required=True)
    order_id = Identifier(required=True)


def find_favourite(user_id, order_id) -> Favourite | None:
    favourites = (
        current_domain.repository_for(Favourite)
        ._dao.query.filter(user_id=str(user_id), order_id=str(order_id))
        .all()
        .items
    )
    return favourites[0] if favourites else None


@marketplace.command_handler(part_of=Favourite)
class FavouritesHandler:
    @handle(AddToFavourites)
    def add_to_favourites(self, command):
        order = load_order(command.order_id)
        favourite = Favourite.bookmark(command.user_id, order)

        if find_favourite(command.user_id, order.id) is not None:
            raise ConflictError("Order is already in favourites")

        current_domain.repository_for(Favourite).add(favourite)
        logger.info("Order added to favourites", order_id=str(order.id), user_id=str(command.user_id))
        return str(favourite.id)

    @handle(RemoveFromFavourites)
    def remove_from_favourites(self, command):
        order = load_customer_order(command.order_id, command.user_id)
        favourite = find_favourite(command.user_id, order.id)
        if favourite is None:
            raise ObjectNotFoundError({"_entity": "Order is not in favourites"})

        favourite.unbookmark()
        current_domain.repository_for(Favourite)._dao.delete(favourite)
        logger.info("Order removed from favourites", order_id=str(order.id))

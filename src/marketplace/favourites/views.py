"""Read-only favourites view with order and restaurant details."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.catalogue.lookup import restaurant_summaries
from marketplace.favourites.favourite import Favourite
from marketplace.order.helpers import load_order
from marketplace.order.views import order_view


def list_favourites(user_id) -> list[dict]:
    repo = current_domain.repository_for(Favourite)
    favourites = repo._dao.query.filter(user_id=str(user_id)).all().items
    favourites = sorted(favourites, key=lambda f: f.added_at, reverse=True)
    summaries = restaurant_summaries([f.restaurant_id for f in favourites])

    views = []
    for favourite in favourites:
        try:
            order = load_order(favourite.order_id)
        except ObjectNotFoundError:
            continue
        views.append(
            {
                "favourite_id": str(favourite.id),
                "added_at": favourite.added_at,
                "order": order_view(order, summaries.get(str(favourite.restaurant_id))),
            }
        )
    return views

"""Catalogue lookups used by the cart and order engines.

The engines never form a line without going through here, and never write
back to the catalogue.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.catalogue.food import FoodItem
from marketplace.catalogue.restaurant import Restaurant
from marketplace.exceptions import ForbiddenError


def lookup_food(food_id) -> FoodItem:
    try:
        return current_domain.repository_for(FoodItem).get(str(food_id))
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": f"Food item {food_id} does not exist"})


def food_belongs_to_restaurant(food: FoodItem, restaurant_id) -> bool:
    return food.belongs_to(restaurant_id)


def lookup_restaurant(restaurant_id) -> Restaurant:
    try:
        return current_domain.repository_for(Restaurant).get(str(restaurant_id))
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": f"Restaurant {restaurant_id} does not exist"})


def assert_restaurant_owner(restaurant_id, user_id) -> Restaurant:
    """Return the restaurant if ``user_id`` owns it, raise ``ForbiddenError`` otherwise."""
    restaurant = lookup_restaurant(restaurant_id)
    if not restaurant.is_owned_by(user_id):
        raise ForbiddenError("You are not the owner of this restaurant")
    return restaurant


def restaurant_summaries(restaurant_ids) -> dict[str, dict]:
    """Summaries keyed by restaurant id; unknown ids are left out."""
    repo = current_domain.repository_for(Restaurant)
    summaries = {}
    for restaurant_id in {str(rid) for rid in restaurant_ids}:
        try:
            summaries[restaurant_id] = repo.get(restaurant_id).summary()
        except ObjectNotFoundError:
            continue
    return summaries

"""Catalogue management — restaurant registration and menu edits."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.food import DEFAULT_MAX_QUANTITY, FoodItem
from marketplace.catalogue.lookup import assert_restaurant_owner, lookup_food
from marketplace.catalogue.restaurant import Restaurant
from marketplace.domain import marketplace
from marketplace.exceptions import ForbiddenError


@marketplace.command(part_of="Restaurant")
class RegisterRestaurant:
    owner_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    address = String(required=True, max_length=500)
    phone = String(max_length=20)


@marketplace.command(part_of="FoodItem")
class AddFoodItem:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True)
    max_quantity = Integer(default=DEFAULT_MAX_QUANTITY)
    description = Text()
    category = String(max_length=100)
    preparation_time = Integer(default=0)
    is_available = Boolean(default=True)


@marketplace.command(part_of="FoodItem")
class UpdateFoodItem:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    food_id = Identifier(required=True)
    price = Float()
    is_available = Boolean()


@marketplace.command_handler(part_of=Restaurant)
class RestaurantRegistrationHandler:
    @handle(RegisterRestaurant)
    def register_restaurant(self, command):
        restaurant = Restaurant.register(
            owner_id=command.owner_id,
            name=command.name,
            address=command.address,
            phone=command.phone,
        )
        current_domain.repository_for(Restaurant).add(restaurant)
        return str(restaurant.id)


@marketplace.command_handler(part_of=FoodItem)
class MenuHandler:
    @handle(AddFoodItem)
    def add_food_item(self, command):
        assert_restaurant_owner(command.restaurant_id, command.user_id)

        food = FoodItem.create(
            restaurant_id=command.restaurant_id,
            name=command.name,
            price=command.price,
            max_quantity=command.max_quantity,
            description=command.description,
            category=command.category,
            preparation_time=command.preparation_time,
            is_available=command.is_available,
        )
        current_domain.repository_for(FoodItem).add(food)
        return str(food.id)

    @handle(UpdateFoodItem)
    def update_food_item(self, command):
        assert_restaurant_owner(command.restaurant_id, command.user_id)

        food = lookup_food(command.food_id)
        if not food.belongs_to(command.restaurant_id):
            raise ForbiddenError("Food item does not belong to this restaurant")
        if command.price is None and command.is_available is None:
            raise ValidationError({"food": ["Nothing to update"]})

        if command.price is not None:
            food.reprice(command.price)
        if command.is_available is not None:
            food.set_availability(command.is_available)

        current_domain.repository_for(FoodItem).add(food)

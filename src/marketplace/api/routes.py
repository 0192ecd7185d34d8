"""FastAPI routes for the Marketplace domain — carts, orders, favourites and menus.

Thin adapters that translate HTTP requests into domain commands and shape
read views into response models. No business logic lives here.
"""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from marketplace.api.auth import current_user_id
from marketplace.api.schemas import (
    AddFoodItemRequest,
    AddToCartRequest,
    CancelOrderRequest,
    CartIdResponse,
    CartListResponse,
    CartResponse,
    CompleteOrderRequest,
    FavouriteIdResponse,
    FavouriteListResponse,
    FavouriteResponse,
    FoodIdResponse,
    InitiateOrderRequest,
    OrderIdResponse,
    OrderListResponse,
    OrderResponse,
    RateOrderRequest,
    RegisterRestaurantRequest,
    RemoveFromCartRequest,
    RestaurantIdResponse,
    StatusResponse,
    UpdateFoodItemRequest,
    UpdateOrderStatusRequest,
    UpdateSpecialInstructionsRequest,
)
from marketplace.cart.items import AddToCart, RemoveFromCart
from marketplace.cart.management import DeleteCart
from marketplace.cart.views import get_cart, list_carts
from marketplace.catalogue.management import AddFoodItem, RegisterRestaurant, UpdateFoodItem
from marketplace.favourites.management import AddToFavourites, RemoveFromFavourites
from marketplace.favourites.views import list_favourites
from marketplace.order.cancellation import CancelOrderByCustomer
from marketplace.order.completion import CompleteOrder
from marketplace.order.modification import RateOrder, UpdateSpecialInstructions
from marketplace.order.placement import InitiateOrder
from marketplace.order.status import CancelOrderByRestaurant, UpdateOrderStatus
from marketplace.order.views import get_order, list_restaurant_orders, list_user_orders

# ---------------------------------------------------------------------------
# Restaurant Router
# ---------------------------------------------------------------------------
restaurant_router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@restaurant_router.post("", status_code=201, response_model=RestaurantIdResponse)
async def register_restaurant(
    body: RegisterRestaurantRequest,
    user_id: str = Depends(current_user_id),
) -> RestaurantIdResponse:
    command = RegisterRestaurant(
        owner_id=user_id,
        name=body.name,
        address=body.address,
        phone=body.phone,
    )
    result = current_domain.process(command, asynchronous=False)
    return RestaurantIdResponse(restaurant_id=result)


@restaurant_router.post("/{restaurant_id}/foods", status_code=201, response_model=FoodIdResponse)
async def add_food_item(
    restaurant_id: str,
    body: AddFoodItemRequest,
    user_id: str = Depends(current_user_id),
) -> FoodIdResponse:
    command = AddFoodItem(
        user_id=user_id,
        restaurant_id=restaurant_id,
        name=body.name,
        price=body.price,
        max_quantity=body.max_quantity,
        description=body.description,
        category=body.category,
        preparation_time=body.preparation_time,
        is_available=body.is_available,
    )
    result = current_domain.process(command, asynchronous=False)
    return FoodIdResponse(food_id=result)


@restaurant_router.patch("/{restaurant_id}/foods/{food_id}", response_model=StatusResponse)
async def update_food_item(
    restaurant_id: str,
    food_id: str,
    body: UpdateFoodItemRequest,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    command = UpdateFoodItem(
        user_id=user_id,
        restaurant_id=restaurant_id,
        food_id=food_id,
        price=body.price,
        is_available=body.is_available,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartListResponse)
async def list_user_carts(user_id: str = Depends(current_user_id)) -> CartListResponse:
    return CartListResponse(carts=[CartResponse(**view) for view in list_carts(user_id)])


@cart_router.get("/{restaurant_id}", response_model=CartResponse)
async def get_user_cart(restaurant_id: str, user_id: str = Depends(current_user_id)) -> CartResponse:
    return CartResponse(**get_cart(user_id, restaurant_id))


@cart_router.post("/{restaurant_id}", status_code=201, response_model=CartIdResponse)
async def add_to_cart(
    restaurant_id: str,
    body: AddToCartRequest,
    user_id: str = Depends(current_user_id),
) -> CartIdResponse:
    command = AddToCart(
        user_id=user_id,
        restaurant_id=restaurant_id,
        food_id=body.food_id,
        quantity=body.quantity,
    )
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.patch("/{restaurant_id}", response_model=StatusResponse)
async def remove_from_cart(
    restaurant_id: str,
    body: RemoveFromCartRequest,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    command = RemoveFromCart(
        user_id=user_id,
        restaurant_id=restaurant_id,
        food_id=body.food_id,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{restaurant_id}", response_model=StatusResponse)
async def delete_cart(restaurant_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(DeleteCart(user_id=user_id, restaurant_id=restaurant_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=OrderListResponse)
async def list_orders(user_id: str = Depends(current_user_id)) -> OrderListResponse:
    return OrderListResponse(orders=[OrderResponse(**view) for view in list_user_orders(user_id)])


@order_router.get("/restaurant/{restaurant_id}", response_model=OrderListResponse)
async def list_orders_for_restaurant(
    restaurant_id: str,
    user_id: str = Depends(current_user_id),
) -> OrderListResponse:
    views = list_restaurant_orders(user_id, restaurant_id)
    return OrderListResponse(orders=[OrderResponse(**view) for view in views])


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order_details(order_id: str, user_id: str = Depends(current_user_id)) -> OrderResponse:
    return OrderResponse(**get_order(user_id, order_id))


@order_router.post("/{restaurant_id}/initiate", status_code=201, response_model=OrderIdResponse)
async def initiate_order(
    restaurant_id: str,
    body: InitiateOrderRequest,
    user_id: str = Depends(current_user_id),
) -> OrderIdResponse:
    command = InitiateOrder(
        user_id=user_id,
        restaurant_id=restaurant_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        delivery_address=json.dumps(body.delivery_address.model_dump()),
        payment_method=body.payment_method,
        payment_status=body.payment_status,
        preparation_time=body.preparation_time,
        is_gift=body.is_gift,
        special_instructions=body.special_instructions,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.patch("/{restaurant_id}/update/{order_id}", response_model=StatusResponse)
async def update_order_by_restaurant(
    restaurant_id: str,
    order_id: str,
    body: UpdateOrderStatusRequest,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    command = UpdateOrderStatus(
        user_id=user_id,
        restaurant_id=restaurant_id,
        order_id=order_id,
        status=body.status,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.patch("/{restaurant_id}/cancel/{order_id}", response_model=StatusResponse)
async def cancel_order_by_restaurant(
    restaurant_id: str,
    order_id: str,
    body: CancelOrderRequest | None = None,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    command = CancelOrderByRestaurant(
        user_id=user_id,
        restaurant_id=restaurant_id,
        order_id=order_id,
        reason=body.reason if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.patch("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order_by_customer(
    order_id: str,
    body: CancelOrderRequest,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    command = CancelOrderByCustomer(user_id=user_id, order_id=order_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.patch("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(
    order_id: str,
    body: CompleteOrderRequest | None = None,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    command = CompleteOrder(
        user_id=user_id,
        order_id=order_id,
        delivery_rating=body.delivery_rating if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.patch("/{order_id}/update", response_model=StatusResponse)
async def update_order_by_customer(
    order_id: str,
    body: UpdateSpecialInstructionsRequest,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    command = UpdateSpecialInstructions(
        user_id=user_id,
        order_id=order_id,
        special_instructions=body.special_instructions,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.patch("/{order_id}/rate", response_model=StatusResponse)
async def rate_order(
    order_id: str,
    body: RateOrderRequest,
    user_id: str = Depends(current_user_id),
) -> StatusResponse:
    command = RateOrder(user_id=user_id, order_id=order_id, rating=body.rating, review=body.review)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Favourites Router
# ---------------------------------------------------------------------------
favourites_router = APIRouter(prefix="/favourites", tags=["favourites"])


@favourites_router.get("", response_model=FavouriteListResponse)
async def get_favourites(user_id: str = Depends(current_user_id)) -> FavouriteListResponse:
    favourites = [
        FavouriteResponse(
            favourite_id=view["favourite_id"],
            added_at=view["added_at"],
            order=OrderResponse(**view["order"]),
        )
        for view in list_favourites(user_id)
    ]
    return FavouriteListResponse(favourites=favourites)


@favourites_router.post("/{order_id}", status_code=201, response_model=FavouriteIdResponse)
async def add_to_favourites(order_id: str, user_id: str = Depends(current_user_id)) -> FavouriteIdResponse:
    result = current_domain.process(AddToFavourites(user_id=user_id, order_id=order_id), asynchronous=False)
    return FavouriteIdResponse(favourite_id=result)


@favourites_router.delete("/{order_id}", response_model=StatusResponse)
async def remove_from_favourites(order_id: str, user_id: str = Depends(current_user_id)) -> StatusResponse:
    current_domain.process(RemoveFromFavourites(user_id=user_id, order_id=order_id), asynchronous=False)
    return StatusResponse()

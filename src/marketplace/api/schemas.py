"""Pydantic request/response schemas for the Marketplace API.

These are external contracts — separate from internal Protean commands.
Request bodies are deliberately loose on business rules (quantities, address
fields, payment combinations) so that the domain reports every violation in
one InvalidArgument response.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class RestaurantSummary(BaseModel):
    restaurant_id: str
    name: str
    address: str


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: dict[str, list[str]] | None = None


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class RegisterRestaurantRequest(BaseModel):
    name: str
    address: str
    phone: str | None = None


class RestaurantIdResponse(BaseModel):
    restaurant_id: str


class AddFoodItemRequest(BaseModel):
    name: str
    price: float
    max_quantity: int = 10
    description: str | None = None
    category: str | None = None
    preparation_time: int = 0
    is_available: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Paneer Tikka",
                    "price": 240.0,
                    "max_quantity": 5,
                    "category": "Starters",
                    "preparation_time": 20,
                }
            ]
        }
    }


class FoodIdResponse(BaseModel):
    food_id: str


class UpdateFoodItemRequest(BaseModel):
    price: float | None = None
    is_available: bool | None = None


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    food_id: str
    quantity: int

    model_config = {"json_schema_extra": {"examples": [{"food_id": "food-001", "quantity": 2}]}}


class RemoveFromCartRequest(BaseModel):
    food_id: str


class CartIdResponse(BaseModel):
    cart_id: str


class CartLineResponse(BaseModel):
    food_id: str
    name: str
    price: float
    quantity: int
    max_quantity: int


class CartResponse(BaseModel):
    cart_id: str
    user_id: str
    restaurant_id: str
    restaurant: RestaurantSummary | None = None
    lines: list[CartLineResponse]
    subtotal: float
    updated_at: datetime | None = None


class CartListResponse(BaseModel):
    carts: list[CartResponse]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemRequest(BaseModel):
    food_id: str
    quantity: int


class DeliveryAddressSchema(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    pincode: str | None = None


class InitiateOrderRequest(BaseModel):
    items: list[OrderItemRequest] = Field(default_factory=list)
    delivery_address: DeliveryAddressSchema = Field(default_factory=DeliveryAddressSchema)
    payment_method: str
    payment_status: str = "PENDING"
    preparation_time: int
    is_gift: bool = False
    special_instructions: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"food_id": "food-001", "quantity": 2}],
                    "delivery_address": {
                        "street": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "country": "India",
                        "pincode": "560001",
                    },
                    "payment_method": "UPI",
                    "payment_status": "PAID",
                    "preparation_time": 30,
                    "is_gift": False,
                    "special_instructions": "Less spicy",
                }
            ]
        }
    }


class OrderIdResponse(BaseModel):
    order_id: str


class UpdateOrderStatusRequest(BaseModel):
    status: str


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class CompleteOrderRequest(BaseModel):
    delivery_rating: int | None = None


class UpdateSpecialInstructionsRequest(BaseModel):
    special_instructions: str


class RateOrderRequest(BaseModel):
    rating: int
    review: str | None = None


class OrderItemResponse(BaseModel):
    food_id: str
    name: str
    price: float
    quantity: int
    max_quantity: int


class DeliveryAddressResponse(BaseModel):
    street: str
    city: str
    state: str
    country: str
    pincode: str


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    restaurant_id: str
    restaurant: RestaurantSummary | None = None
    items: list[OrderItemResponse]
    total_amount: float
    delivery_address: DeliveryAddressResponse | None = None
    status: str
    payment_method: str
    payment_status: str
    order_placed_at: datetime
    estimated_delivery_time: datetime | None = None
    actual_delivery_time: datetime | None = None
    preparation_time: int
    delivery_partner_id: str | None = None
    is_gift: bool = False
    special_instructions: str | None = None
    cancellation_reason: str | None = None
    rating: int | None = None
    delivery_rating: int | None = None
    review: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


# ---------------------------------------------------------------------------
# Favourites
# ---------------------------------------------------------------------------
class FavouriteIdResponse(BaseModel):
    favourite_id: str


class FavouriteResponse(BaseModel):
    favourite_id: str
    added_at: datetime | None = None
    order: OrderResponse


class FavouriteListResponse(BaseModel):
    favourites: list[FavouriteResponse]

"""Order placement — the single way into PENDING.

Every argument guard is checked and collected before anything is written, so
a rejected request leaves neither an order nor a consumed cart behind.
Prices come from the customer's cart when the food is in it (frozen at add
time), otherwise from the catalogue. Names and caps always come from the
catalogue, and the total is computed here, never taken from the caller.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.cart.items import find_cart
from marketplace.cart.management import consume_cart
from marketplace.catalogue.lookup import food_belongs_to_restaurant, lookup_food, lookup_restaurant
from marketplace.domain import marketplace
from marketplace.order.order import ADDRESS_FIELDS, Order, PaymentMethod, PaymentStatus

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class InitiateOrder:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{food_id, quantity}]
    delivery_address = Text(required=True)  # JSON: {street, city, state, country, pincode}
    payment_method = String(required=True, max_length=20)
    payment_status = String(max_length=20, default=PaymentStatus.PENDING.value)
    preparation_time = Integer(required=True)
    is_gift = Boolean(default=False)
    special_instructions = Text()


def _loads(value, default):
    if value is None:
        return default
    return json.loads(value) if isinstance(value, str) else value


class _Rejections:
    """Collects field errors so every guard runs before the request is rejected."""

    def __init__(self):
        self.errors = {}

    def add(self, field, message):
        self.errors.setdefault(field, []).append(message)

    def raise_if_any(self):
        if self.errors:
            raise ValidationError(self.errors)


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@marketplace.command_handler(part_of=Order)
class InitiateOrderHandler:
    @handle(InitiateOrder)
    def initiate_order(self, command):
        lookup_restaurant(command.restaurant_id)

        rejections = _Rejections()
        items = _loads(command.items, [])
        address = _loads(command.delivery_address, {})

        lines = self._build_lines(command, items, rejections)
        self._check_address(address, rejections)
        self._check_payment(command.payment_method, command.payment_status, rejections)
        if not _is_positive_int(command.preparation_time):
            rejections.add("preparation_time", "Preparation time must be greater than zero")

        rejections.raise_if_any()

        order = Order.place(
            user_id=command.user_id,
            restaurant_id=command.restaurant_id,
            lines=lines,
            delivery_address={field: address[field].strip() for field in ADDRESS_FIELDS},
            payment_method=command.payment_method,
            payment_status=command.payment_status,
            preparation_time=command.preparation_time,
            is_gift=command.is_gift,
            special_instructions=command.special_instructions,
        )
        current_domain.repository_for(Order).add(order)
        consume_cart(command.user_id, command.restaurant_id)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(command.user_id),
            restaurant_id=str(command.restaurant_id),
            total_amount=order.total_amount,
        )
        return str(order.id)

    def _build_lines(self, command, items, rejections):
        if not isinstance(items, list) or not items:
            rejections.add("items", "Order must contain at least one item")
            return []

        cart = find_cart(command.user_id, command.restaurant_id)
        lines = []
        seen = set()

        for index, item in enumerate(items):
            field = f"items.{index}"
            food_id = str(item.get("food_id") or "") if isinstance(item, dict) else ""
            if not food_id:
                rejections.add(field, "Food id is required")
                continue
            if food_id in seen:
                rejections.add(field, "Food item appears more than once")
                continue
            seen.add(food_id)

            food = lookup_food(food_id)
            if not food_belongs_to_restaurant(food, command.restaurant_id):
                rejections.add(field, f"{food.name} does not belong to this restaurant")
                continue
            if not food.is_available:
                rejections.add(field, f"{food.name} is currently unavailable")
                continue

            quantity = item.get("quantity")
            if not _is_positive_int(quantity) or quantity > food.max_quantity:
                rejections.add(field, f"Quantity of {food.name} must be between 1 and {food.max_quantity}")
                continue

            cart_line = cart.line_for(food_id) if cart else None
            lines.append(
                {
                    "food_id": food_id,
                    "name": food.name,
                    "price": cart_line.price if cart_line else food.price,
                    "quantity": quantity,
                    "max_quantity": food.max_quantity,
                }
            )

        return lines

    def _check_address(self, address, rejections):
        if not isinstance(address, dict):
            address = {}
        for field in ADDRESS_FIELDS:
            value = address.get(field)
            if not isinstance(value, str) or not value.strip():
                rejections.add(f"delivery_address.{field}", f"{field.capitalize()} is required")

    def _check_payment(self, payment_method, payment_status, rejections):
        valid_methods = {m.value for m in PaymentMethod}
        valid_statuses = {s.value for s in PaymentStatus}

        if payment_method not in valid_methods:
            rejections.add("payment_method", f"Payment method must be one of {', '.join(sorted(valid_methods))}")
        if payment_status not in valid_statuses:
            rejections.add("payment_status", f"Payment status must be one of {', '.join(sorted(valid_statuses))}")
        if payment_method == PaymentMethod.CASH.value and payment_status == PaymentStatus.PAID.value:
            rejections.add("payment_status", "Cash orders are paid on delivery and cannot be prepaid")

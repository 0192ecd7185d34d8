"""Shared BDD fixtures and step definitions for the marketplace."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, then

from marketplace.exceptions import MarketplaceError
from marketplace.order.order import Order
from marketplace.order.placement import InitiateOrder

CUSTOMER_ID = "cust-001"

ADDRESS = {
    "street": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "country": "India",
    "pincode": "560001",
}


def error_kind(exc) -> str:
    if isinstance(exc, ValidationError):
        return "InvalidArgument"
    if isinstance(exc, ObjectNotFoundError):
        return "NotFound"
    if isinstance(exc, MarketplaceError):
        return exc.kind
    return type(exc).__name__


@pytest.fixture()
def error():
    """Container for the last rejected request."""
    return {"exc": None}


@pytest.fixture()
def attempt(error):
    """Run an operation and capture a domain rejection in ``error`` instead of raising."""

    def _attempt(operation, *args, **kwargs):
        error["exc"] = None
        try:
            return operation(*args, **kwargs)
        except (ValidationError, ObjectNotFoundError, MarketplaceError) as exc:
            error["exc"] = exc
            return None

    return _attempt


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a restaurant selling "{name}" at {price:g} with a limit of {cap:d}'),
    target_fixture="menu_food_id",
)
def restaurant_with_food(add_food, name, price, cap):
    return add_food(name=name, price=price, max_quantity=cap)


@given(
    parsers.cfparse("the customer has placed an order for {qty:d} of the food"),
    target_fixture="placed_order_id",
)
def customer_placed_order(restaurant_id, menu_food_id, qty):
    return current_domain.process(
        InitiateOrder(
            user_id=CUSTOMER_ID,
            restaurant_id=restaurant_id,
            items=json.dumps([{"food_id": menu_food_id, "quantity": qty}]),
            delivery_address=json.dumps(ADDRESS),
            payment_method="UPI",
            payment_status="PAID",
            preparation_time=30,
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the request fails with {kind}"))
def request_fails_with(error, kind):
    assert error["exc"] is not None, "expected the request to be rejected"
    assert error_kind(error["exc"]) == kind


@then(parsers.cfparse("the order is {status}"))
def order_is_in_status(placed_order_id, status):
    assert current_domain.repository_for(Order).get(placed_order_id).status == status

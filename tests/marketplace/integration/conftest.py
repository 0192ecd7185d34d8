import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from marketplace.api import (
    cart_router,
    favourites_router,
    order_router,
    register_error_handlers,
    restaurant_router,
)

OWNER_ID = "owner-001"
CUSTOMER_ID = "cust-001"
PARTNER_ID = "partner-001"

ADDRESS = {
    "street": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "country": "India",
    "pincode": "560001",
}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(restaurant_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(favourites_router)
    register_error_handlers(app)
    return TestClient(app)


def as_user(user_id):
    return {"X-User-Id": user_id}


@pytest.fixture()
def place_order(client, restaurant_id, food_id):
    """Factory: POST an order as CUSTOMER_ID and return its id."""

    def _place(quantity=2, **overrides):
        body = {
            "items": [{"food_id": food_id, "quantity": quantity}],
            "delivery_address": ADDRESS,
            "payment_method": "UPI",
            "payment_status": "PAID",
            "preparation_time": 30,
        }
        body.update(overrides)
        response = client.post(f"/orders/{restaurant_id}/initiate", json=body, headers=as_user(CUSTOMER_ID))
        assert response.status_code == 201, response.json()
        return response.json()["order_id"]

    return _place

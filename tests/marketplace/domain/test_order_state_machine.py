"""Tests for the Order state machine — per-actor transitions and closure."""

import itertools

import pytest
from protean.exceptions import ValidationError

from marketplace.exceptions import ForbiddenError, InvalidStateError
from marketplace.order.events import OrderCancelled, OrderDelivered, OrderStatusChanged
from marketplace.order.order import (
    PARTIAL_REFUND_MESSAGE,
    Actor,
    Order,
    OrderStatus,
    allowed_transitions,
)

PARTNER_ID = "partner-001"


def _make_order():
    return Order.place(
        user_id="cust-001",
        restaurant_id="rest-001",
        lines=[{"food_id": "food-001", "name": "Paneer Tikka", "price": 100.0, "quantity": 2, "max_quantity": 5}],
        delivery_address={
            "street": "12 MG Road",
            "city": "Bengaluru",
            "state": "Karnataka",
            "country": "India",
            "pincode": "560001",
        },
        payment_method="UPI",
        payment_status="PAID",
        preparation_time=30,
    )


def _order_at_state(target_status):
    """Create an order and advance it to the desired state."""
    order = _make_order()
    order._events.clear()

    if target_status == OrderStatus.PENDING:
        return order

    if target_status == OrderStatus.CANCELLED:
        order.cancel_by_customer("Ordered by mistake")
        order._events.clear()
        return order

    order.update_status_by_restaurant(OrderStatus.CONFIRMED, delivery_partner_id=PARTNER_ID)
    order._events.clear()
    if target_status == OrderStatus.CONFIRMED:
        return order

    order.update_status_by_restaurant(OrderStatus.PREPARING)
    order._events.clear()
    if target_status == OrderStatus.PREPARING:
        return order

    order.update_status_by_restaurant(OrderStatus.READY_TO_DELIVER)
    order._events.clear()
    if target_status == OrderStatus.READY_TO_DELIVER:
        return order

    order.update_status_by_restaurant(OrderStatus.OUT_FOR_DELIVERY)
    order._events.clear()
    if target_status == OrderStatus.OUT_FOR_DELIVERY:
        return order

    order.complete_delivery(PARTNER_ID)
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Restaurant
# ---------------------------------------------------------------------------
class TestRestaurantTransitions:
    def test_confirm_pending_order(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.update_status_by_restaurant(OrderStatus.CONFIRMED, delivery_partner_id=PARTNER_ID)

        assert order.status == OrderStatus.CONFIRMED.value
        assert str(order.delivery_partner_id) == PARTNER_ID

    def test_confirm_raises_status_changed(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.update_status_by_restaurant(OrderStatus.CONFIRMED, delivery_partner_id=PARTNER_ID)

        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "PENDING"
        assert event.new_status == "CONFIRMED"
        assert event.changed_by == Actor.RESTAURANT.value

    def test_confirmed_can_skip_preparing(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        order.update_status_by_restaurant(OrderStatus.READY_TO_DELIVER)
        assert order.status == OrderStatus.READY_TO_DELIVER.value

    def test_restaurant_can_cancel_pending_order(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.cancel_by_restaurant("Out of ingredients")

        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_reason == "Out of ingredients"
        assert order.cancelled_by == Actor.RESTAURANT.value

    def test_restaurant_cancel_without_reason_gets_default(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.cancel_by_restaurant()
        assert order.cancellation_reason == "Cancelled by restaurant"

    def test_status_update_to_cancelled_cancels(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.update_status_by_restaurant(OrderStatus.CANCELLED)

        assert order.status == OrderStatus.CANCELLED.value
        assert isinstance(order._events[0], OrderCancelled)

    def test_restaurant_cannot_cancel_confirmed_order(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        with pytest.raises(InvalidStateError):
            order.cancel_by_restaurant("Too busy")
        assert order.status == OrderStatus.CONFIRMED.value

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.OUT_FOR_DELIVERY],
    )
    def test_restaurant_can_never_set_delivered(self, status):
        order = _order_at_state(status)
        with pytest.raises(ForbiddenError):
            order.update_status_by_restaurant(OrderStatus.DELIVERED)
        assert order.status == status.value

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_orders_reject_status_updates(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidStateError):
            order.update_status_by_restaurant(OrderStatus.PREPARING)

    def test_replaying_a_transition_is_rejected(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.update_status_by_restaurant(OrderStatus.CONFIRMED, delivery_partner_id=PARTNER_ID)

        with pytest.raises(InvalidStateError):
            order.update_status_by_restaurant(OrderStatus.CONFIRMED, delivery_partner_id=PARTNER_ID)


# ---------------------------------------------------------------------------
# Customer
# ---------------------------------------------------------------------------
class TestCustomerCancellation:
    def test_cancel_pending_order(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.cancel_by_customer("  Changed my mind  ")

        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_reason == "Changed my mind"
        assert order.cancelled_by == Actor.CUSTOMER.value
        assert order.cancelled_at is not None

    def test_cancel_raises_event(self):
        order = _order_at_state(OrderStatus.PENDING)
        order.cancel_by_customer("Changed my mind")

        event = order._events[0]
        assert isinstance(event, OrderCancelled)
        assert event.previous_status == "PENDING"
        assert event.cancelled_by == "CUSTOMER"

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_reason_is_required(self, reason):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(ValidationError) as exc:
            order.cancel_by_customer(reason)
        assert "cancellation_reason" in exc.value.messages
        assert order.status == OrderStatus.PENDING.value

    @pytest.mark.parametrize("status", [OrderStatus.CONFIRMED, OrderStatus.PREPARING])
    def test_in_kitchen_orders_get_partial_refund_hint(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidStateError) as exc:
            order.cancel_by_customer("Taking too long")

        assert exc.value.message == PARTIAL_REFUND_MESSAGE
        assert order.status == status.value

    def test_cancelling_twice_is_rejected(self):
        order = _order_at_state(OrderStatus.CANCELLED)
        with pytest.raises(InvalidStateError):
            order.cancel_by_customer("Again")


class TestSpecialInstructions:
    def test_update_on_active_order(self):
        order = _order_at_state(OrderStatus.PREPARING)
        order.update_special_instructions("Leave at the door")
        assert order.special_instructions == "Leave at the door"

    def test_blank_instructions_rejected(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(ValidationError):
            order.update_special_instructions("  ")

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_orders_reject_update(self, status):
        order = _order_at_state(status)
        with pytest.raises(InvalidStateError):
            order.update_special_instructions("Leave at the door")


# ---------------------------------------------------------------------------
# Delivery partner
# ---------------------------------------------------------------------------
class TestDeliveryCompletion:
    def test_assigned_partner_delivers_confirmed_order(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        order.complete_delivery(PARTNER_ID, delivery_rating=4)

        assert order.status == OrderStatus.DELIVERED.value
        assert order.actual_delivery_time is not None
        assert order.delivery_rating == 4

    def test_delivery_from_out_for_delivery(self):
        order = _order_at_state(OrderStatus.OUT_FOR_DELIVERY)
        order.complete_delivery(PARTNER_ID)
        assert order.status == OrderStatus.DELIVERED.value

    def test_delivery_rating_defaults_to_zero(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        order.complete_delivery(PARTNER_ID)
        assert order.delivery_rating == 0

    def test_delivery_raises_event(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        order.complete_delivery(PARTNER_ID, delivery_rating=5)

        event = order._events[0]
        assert isinstance(event, OrderDelivered)
        assert str(event.delivery_partner_id) == PARTNER_ID
        assert event.delivery_rating == 5

    def test_other_partner_is_forbidden(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        with pytest.raises(ForbiddenError):
            order.complete_delivery("partner-999")
        assert order.status == OrderStatus.CONFIRMED.value

    def test_unassigned_order_cannot_be_delivered(self):
        order = _order_at_state(OrderStatus.PENDING)
        with pytest.raises(ForbiddenError):
            order.complete_delivery(PARTNER_ID)

    def test_rating_out_of_range_rejected(self):
        order = _order_at_state(OrderStatus.CONFIRMED)
        with pytest.raises(ValidationError):
            order.complete_delivery(PARTNER_ID, delivery_rating=6)
        assert order.status == OrderStatus.CONFIRMED.value

    def test_preparing_order_cannot_be_delivered(self):
        order = _order_at_state(OrderStatus.PREPARING)
        with pytest.raises(InvalidStateError):
            order.complete_delivery(PARTNER_ID)

    def test_delivering_twice_is_rejected(self):
        order = _order_at_state(OrderStatus.DELIVERED)
        with pytest.raises(InvalidStateError):
            order.complete_delivery(PARTNER_ID)

    def test_replayed_delivery_reports_state_before_rating(self):
        order = _order_at_state(OrderStatus.DELIVERED)
        with pytest.raises(InvalidStateError):
            order.complete_delivery(PARTNER_ID, delivery_rating=9)
        assert order.delivery_rating == 0


class TestRating:
    def test_rate_delivered_order(self):
        order = _order_at_state(OrderStatus.DELIVERED)
        order.rate(5, review="Hot and on time")

        assert order.rating == 5
        assert order.review == "Hot and on time"
        assert order.rated_at is not None

    def test_rating_is_append_only(self):
        from marketplace.exceptions import ConflictError

        order = _order_at_state(OrderStatus.DELIVERED)
        order.rate(4)
        with pytest.raises(ConflictError):
            order.rate(2)
        assert order.rating == 4

    def test_undelivered_order_cannot_be_rated(self):
        order = _order_at_state(OrderStatus.PREPARING)
        with pytest.raises(InvalidStateError):
            order.rate(5)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_must_be_one_to_five(self, rating):
        order = _order_at_state(OrderStatus.DELIVERED)
        with pytest.raises(ValidationError):
            order.rate(rating)


# ---------------------------------------------------------------------------
# Closure: anything outside the table fails and leaves the status alone
# ---------------------------------------------------------------------------
_ALLOWED = {
    (OrderStatus.PENDING, "restaurant", OrderStatus.CONFIRMED),
    (OrderStatus.PENDING, "restaurant", OrderStatus.CANCELLED),
    (OrderStatus.CONFIRMED, "restaurant", OrderStatus.PREPARING),
    (OrderStatus.CONFIRMED, "restaurant", OrderStatus.READY_TO_DELIVER),
    (OrderStatus.PREPARING, "restaurant", OrderStatus.READY_TO_DELIVER),
    (OrderStatus.READY_TO_DELIVER, "restaurant", OrderStatus.OUT_FOR_DELIVERY),
    (OrderStatus.PENDING, "customer", OrderStatus.CANCELLED),
    (OrderStatus.CONFIRMED, "delivery", OrderStatus.DELIVERED),
    (OrderStatus.OUT_FOR_DELIVERY, "delivery", OrderStatus.DELIVERED),
}

_ACTIONS = [("restaurant", target) for target in OrderStatus] + [
    ("customer", OrderStatus.CANCELLED),
    ("delivery", OrderStatus.DELIVERED),
]


def _perform(order, actor, target):
    if actor == "restaurant":
        order.update_status_by_restaurant(target, delivery_partner_id=PARTNER_ID)
    elif actor == "customer":
        order.cancel_by_customer("No longer needed")
    else:
        order.complete_delivery(PARTNER_ID)


@pytest.mark.parametrize(
    "from_status,action",
    list(itertools.product(list(OrderStatus), _ACTIONS)),
    ids=lambda value: value.value if isinstance(value, OrderStatus) else f"{value[0]}->{value[1].value}",
)
def test_state_machine_closure(from_status, action):
    actor, target = action
    order = _order_at_state(from_status)

    if (from_status, actor, target) in _ALLOWED:
        _perform(order, actor, target)
        assert order.status == target.value
    else:
        with pytest.raises((InvalidStateError, ForbiddenError)):
            _perform(order, actor, target)
        assert order.status == from_status.value


def test_allowed_transitions_match_table():
    for actor, key in [(Actor.RESTAURANT, "restaurant"), (Actor.CUSTOMER, "customer"), (Actor.DELIVERY_PARTNER, "delivery")]:
        for status in OrderStatus:
            expected = {to for (frm, who, to) in _ALLOWED if frm == status and who == key}
            assert allowed_transitions(actor, status) == expected

"""Order aggregate (CQRS) — the core of the marketplace.

An order is an immutable snapshot of the lines a customer asked for, plus
delivery and payment metadata. After placement only the status moves, and
only through the per-actor transitions below. Two fields are append-only:
the cancellation reason and the post-delivery rating/review.

CQRS (not event sourced) — orders are listed per customer and per restaurant
straight from the repository.

State Machine (7 states):
    PENDING → CONFIRMED → PREPARING → READY_TO_DELIVER → OUT_FOR_DELIVERY → DELIVERED
    CONFIRMED → READY_TO_DELIVER, CONFIRMED → DELIVERED
    PENDING → CANCELLED
    DELIVERED, CANCELLED → (terminal)

Who may move what:
    Restaurant        PENDING → CONFIRMED | CANCELLED
                      CONFIRMED → PREPARING | READY_TO_DELIVER
                      PREPARING → READY_TO_DELIVER
                      READY_TO_DELIVER → OUT_FOR_DELIVERY
    Customer          PENDING → CANCELLED (with a reason)
    Delivery partner  CONFIRMED | OUT_FOR_DELIVERY → DELIVERED
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.domain import marketplace
from marketplace.exceptions import ConflictError, ForbiddenError, InvalidStateError
from marketplace.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderRated,
    OrderStatusChanged,
    SpecialInstructionsUpdated,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY_TO_DELIVER = "READY_TO_DELIVER"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMethod(Enum):
    CASH = "CASH"
    UPI = "UPI"
    DEBIT_CARD = "DEBIT_CARD"
    CREDIT_CARD = "CREDIT_CARD"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    REFUNDED = "REFUNDED"
    FAILED = "FAILED"


class Actor(Enum):
    CUSTOMER = "CUSTOMER"
    RESTAURANT = "RESTAURANT"
    DELIVERY_PARTNER = "DELIVERY_PARTNER"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

_ACTOR_TRANSITIONS = {
    Actor.RESTAURANT: {
        OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
        OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.READY_TO_DELIVER},
        OrderStatus.PREPARING: {OrderStatus.READY_TO_DELIVER},
        OrderStatus.READY_TO_DELIVER: {OrderStatus.OUT_FOR_DELIVERY},
    },
    Actor.CUSTOMER: {
        OrderStatus.PENDING: {OrderStatus.CANCELLED},
    },
    Actor.DELIVERY_PARTNER: {
        OrderStatus.CONFIRMED: {OrderStatus.DELIVERED},
        OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    },
}

# Customer cancellation from these states is refused with a refund hint
_IN_KITCHEN_STATES = {OrderStatus.CONFIRMED, OrderStatus.PREPARING}

PARTIAL_REFUND_MESSAGE = (
    "Order is already being prepared and cannot be cancelled. "
    "A partial refund is possible for items not yet prepared; please contact support."
)

ADDRESS_FIELDS = ("street", "city", "state", "country", "pincode")


def allowed_transitions(actor: Actor, status: OrderStatus) -> set[OrderStatus]:
    return _ACTOR_TRANSITIONS[actor].get(status, set())


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order goes. Captured at placement and never edited."""

    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    country = String(required=True, max_length=100)
    pincode = String(required=True, max_length=20)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderLine:
    """A food item copied by value from the catalogue or the customer's cart."""

    food_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True)
    quantity = Integer(required=True, min_value=1)
    max_quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    items = HasMany(OrderLine)
    total_amount = Float(required=True)
    delivery_address = ValueObject(DeliveryAddress)

    # Timeline
    order_placed_at = DateTime(required=True)
    estimated_delivery_time = DateTime()
    actual_delivery_time = DateTime()
    preparation_time = Integer(required=True)  # minutes

    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)

    # Payment
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)

    delivery_partner_id = Identifier()
    is_gift = Boolean(default=False)
    special_instructions = Text()

    # Append-only
    cancellation_reason = Text()
    cancelled_by = String(choices=Actor)
    cancelled_at = DateTime()
    rating = Integer()
    delivery_rating = Integer()
    review = Text()
    rated_at = DateTime()

    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def cash_orders_cannot_be_prepaid(self):
        if self.payment_method == PaymentMethod.CASH.value and self.payment_status == PaymentStatus.PAID.value:
            raise ValidationError({"payment_status": ["Cash orders are paid on delivery and cannot be prepaid"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        restaurant_id,
        lines,
        delivery_address,
        payment_method,
        payment_status,
        preparation_time,
        is_gift=False,
        special_instructions=None,
        placed_at=None,
    ):
        """Create a PENDING order from already-validated line snapshots.

        ``lines`` is a list of dicts with food_id, name, price, quantity and
        max_quantity. ``delivery_address`` is a dict with the five address
        fields.
        """
        placed_at = placed_at or datetime.now(UTC)
        order_lines = [OrderLine(**line) for line in lines]
        total_amount = round(sum(line.line_total for line in order_lines), 2)

        order = cls(
            user_id=user_id,
            restaurant_id=restaurant_id,
            total_amount=total_amount,
            delivery_address=DeliveryAddress(**{f: delivery_address[f] for f in ADDRESS_FIELDS}),
            order_placed_at=placed_at,
            estimated_delivery_time=placed_at + timedelta(minutes=preparation_time),
            preparation_time=preparation_time,
            status=OrderStatus.PENDING.value,
            payment_method=payment_method,
            payment_status=payment_status,
            is_gift=bool(is_gift),
            special_instructions=special_instructions,
            updated_at=placed_at,
        )
        for line in order_lines:
            order.add_items(line)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                restaurant_id=str(restaurant_id),
                total_amount=total_amount,
                item_count=len(order_lines),
                payment_method=payment_method,
                payment_status=payment_status,
                estimated_delivery_time=order.estimated_delivery_time,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def is_placed_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def is_from_restaurant(self, restaurant_id) -> bool:
        return str(self.restaurant_id) == str(restaurant_id)

    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATES

    def _assert_not_terminal(self):
        if self.is_terminal:
            raise InvalidStateError(f"Order is already {self.status} and can no longer be changed")

    def _assert_can_transition(self, actor: Actor, target: OrderStatus):
        self._assert_not_terminal()
        current = OrderStatus(self.status)
        if target not in allowed_transitions(actor, current):
            raise InvalidStateError(f"Cannot move order from {current.value} to {target.value}")

    # -------------------------------------------------------------------
    # Restaurant actions
    # -------------------------------------------------------------------
    def update_status_by_restaurant(self, target: OrderStatus, delivery_partner_id=None):
        """Move the order along the kitchen pipeline.

        DELIVERED is never reachable here; only the delivery partner's
        completion sets it. Confirming records the dispatched partner, if any.
        """
        self._assert_not_terminal()
        if target == OrderStatus.DELIVERED:
            raise ForbiddenError("Only the assigned delivery partner can mark an order as delivered")
        if target == OrderStatus.CANCELLED:
            self.cancel_by_restaurant()
            return

        self._assert_can_transition(Actor.RESTAURANT, target)

        previous_status = self.status
        self.status = target.value
        if target == OrderStatus.CONFIRMED:
            self.delivery_partner_id = delivery_partner_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=target.value,
                changed_by=Actor.RESTAURANT.value,
                delivery_partner_id=self.delivery_partner_id,
            )
        )

    def cancel_by_restaurant(self, reason=None):
        self._assert_can_transition(Actor.RESTAURANT, OrderStatus.CANCELLED)
        reason = reason.strip() if reason and reason.strip() else "Cancelled by restaurant"
        self._cancel(reason, Actor.RESTAURANT)

    # -------------------------------------------------------------------
    # Customer actions
    # -------------------------------------------------------------------
    def cancel_by_customer(self, reason):
        if not reason or not reason.strip():
            raise ValidationError({"cancellation_reason": ["A cancellation reason is required"]})

        self._assert_not_terminal()
        if OrderStatus(self.status) in _IN_KITCHEN_STATES:
            raise InvalidStateError(PARTIAL_REFUND_MESSAGE)
        self._assert_can_transition(Actor.CUSTOMER, OrderStatus.CANCELLED)

        self._cancel(reason.strip(), Actor.CUSTOMER)

    def update_special_instructions(self, special_instructions):
        if not special_instructions or not special_instructions.strip():
            raise ValidationError({"special_instructions": ["Special instructions cannot be empty"]})
        self._assert_not_terminal()

        self.special_instructions = special_instructions.strip()
        self.updated_at = datetime.now(UTC)
        self.raise_(
            SpecialInstructionsUpdated(
                order_id=str(self.id),
                special_instructions=self.special_instructions,
            )
        )

    def rate(self, rating, review=None):
        """Record the customer's rating and review. Allowed once, after delivery."""
        if OrderStatus(self.status) != OrderStatus.DELIVERED:
            raise InvalidStateError("Only delivered orders can be rated")
        if self.rating is not None:
            raise ConflictError("This order has already been rated")
        if rating is None or not 1 <= rating <= 5:
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})

        now = datetime.now(UTC)
        self.rating = rating
        self.review = review.strip() if review and review.strip() else None
        self.rated_at = now
        self.updated_at = now
        self.raise_(
            OrderRated(
                order_id=str(self.id),
                user_id=str(self.user_id),
                rating=rating,
                review=self.review,
            )
        )

    # -------------------------------------------------------------------
    # Delivery partner actions
    # -------------------------------------------------------------------
    def complete_delivery(self, delivery_partner_id, delivery_rating=None):
        if not self.delivery_partner_id or str(self.delivery_partner_id) != str(delivery_partner_id):
            raise ForbiddenError("You are not the delivery partner for this order")

        self._assert_can_transition(Actor.DELIVERY_PARTNER, OrderStatus.DELIVERED)

        delivery_rating = 0 if delivery_rating is None else delivery_rating
        if not 0 <= delivery_rating <= 5:
            raise ValidationError({"delivery_rating": ["Delivery rating must be between 0 and 5"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.actual_delivery_time = now
        self.delivery_rating = delivery_rating
        self.updated_at = now

        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                delivery_partner_id=str(delivery_partner_id),
                delivered_at=now,
                delivery_rating=delivery_rating,
            )
        )

    # -------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------
    def _cancel(self, reason, actor: Actor):
        previous_status = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancellation_reason = reason
        self.cancelled_by = actor.value
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous_status,
                reason=reason,
                cancelled_by=actor.value,
            )
        )

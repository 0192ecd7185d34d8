"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order; it starts out PENDING."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    total_amount = Float(required=True)
    item_count = Integer(required=True)
    payment_method = String(required=True)
    payment_status = String(required=True)
    estimated_delivery_time = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """The restaurant moved the order forward in the kitchen pipeline."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = String(required=True)
    delivery_partner_id = Identifier()


@marketplace.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = Text(required=True)
    cancelled_by = String(required=True)


@marketplace.event(part_of="Order")
class OrderDelivered:
    """The assigned delivery partner handed the order over."""

    __version__ = 1

    order_id = Identifier(required=True)
    delivery_partner_id = Identifier(required=True)
    delivered_at = DateTime(required=True)
    delivery_rating = Integer(default=0)


@marketplace.event(part_of="Order")
class SpecialInstructionsUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    special_instructions = Text(required=True)


@marketplace.event(part_of="Order")
class OrderRated:
    """The customer rated a delivered order."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    review = Text()

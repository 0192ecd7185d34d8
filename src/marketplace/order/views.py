"""Read-only order views, newest first, joined with restaurant summaries."""

from protean.utils.globals import current_domain

from marketplace.catalogue.lookup import assert_restaurant_owner, restaurant_summaries
from marketplace.order.helpers import load_customer_order
from marketplace.order.order import Order


def order_view(order: Order, restaurant: dict | None = None) -> dict:
    address = order.delivery_address
    return {
        "order_id": str(order.id),
        "user_id": str(order.user_id),
        "restaurant_id": str(order.restaurant_id),
        "restaurant": restaurant,
        "items": [
            {
                "food_id": str(line.food_id),
                "name": line.name,
                "price": line.price,
                "quantity": line.quantity,
                "max_quantity": line.max_quantity,
            }
            for line in order.items
        ],
        "total_amount": order.total_amount,
        "delivery_address": (
            {
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "country": address.country,
                "pincode": address.pincode,
            }
            if address
            else None
        ),
        "status": order.status,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "order_placed_at": order.order_placed_at,
        "estimated_delivery_time": order.estimated_delivery_time,
        "actual_delivery_time": order.actual_delivery_time,
        "preparation_time": order.preparation_time,
        "delivery_partner_id": str(order.delivery_partner_id) if order.delivery_partner_id else None,
        "is_gift": order.is_gift,
        "special_instructions": order.special_instructions,
        "cancellation_reason": order.cancellation_reason,
        "rating": order.rating,
        "delivery_rating": order.delivery_rating,
        "review": order.review,
    }


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.order_placed_at, reverse=True)


def list_user_orders(user_id) -> list[dict]:
    repo = current_domain.repository_for(Order)
    orders = _newest_first(repo._dao.query.filter(user_id=str(user_id)).all().items)
    summaries = restaurant_summaries([o.restaurant_id for o in orders])
    return [order_view(o, summaries.get(str(o.restaurant_id))) for o in orders]


def list_restaurant_orders(user_id, restaurant_id) -> list[dict]:
    restaurant = assert_restaurant_owner(restaurant_id, user_id)
    repo = current_domain.repository_for(Order)
    orders = _newest_first(repo._dao.query.filter(restaurant_id=str(restaurant_id)).all().items)
    return [order_view(o, restaurant.summary()) for o in orders]


def get_order(user_id, order_id) -> dict:
    order = load_customer_order(order_id, user_id)
    summaries = restaurant_summaries([order.restaurant_id])
    return order_view(order, summaries.get(str(order.restaurant_id)))

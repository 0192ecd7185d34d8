"""Read-only cart views joined with the restaurant summary."""

from protean.utils.globals import current_domain

from marketplace.cart.cart import Cart
from marketplace.cart.items import load_cart
from marketplace.catalogue.lookup import restaurant_summaries


def _cart_view(cart: Cart, restaurant: dict | None) -> dict:
    return {
        "cart_id": str(cart.id),
        "user_id": str(cart.user_id),
        "restaurant_id": str(cart.restaurant_id),
        "restaurant": restaurant,
        "lines": [
            {
                "food_id": str(line.food_id),
                "name": line.name,
                "price": line.price,
                "quantity": line.quantity,
                "max_quantity": line.max_quantity,
            }
            for line in cart.lines
        ],
        "subtotal": cart.subtotal,
        "updated_at": cart.updated_at,
    }


def get_cart(user_id, restaurant_id) -> dict:
    cart = load_cart(user_id, restaurant_id)
    summaries = restaurant_summaries([cart.restaurant_id])
    return _cart_view(cart, summaries.get(str(cart.restaurant_id)))


def list_carts(user_id) -> list[dict]:
    repo = current_domain.repository_for(Cart)
    carts = repo._dao.query.filter(user_id=str(user_id)).all().items
    carts = sorted(carts, key=lambda c: c.updated_at, reverse=True)
    summaries = restaurant_summaries([c.restaurant_id for c in carts])
    return [_cart_view(cart, summaries.get(str(cart.restaurant_id))) for cart in carts]

"""Marketplace bounded context — Restaurants, Carts, Orders and Favourites.

Diners build one cart per restaurant, turn it into an order, and the order is
driven to delivery by the restaurant and the delivery partner. Carts and
orders are CQRS aggregates; the catalogue is reference data the cart and
order engines read but never write.
"""

from protean.domain import Domain

from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")

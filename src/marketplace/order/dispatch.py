"""Delivery dispatch — assigns a delivery partner when a restaurant confirms an order.

There is no dispatch subsystem yet. ``FixedDispatcher`` hands every order to
one configured partner; ``NoDispatcher`` leaves orders unassigned, which makes
delivery completion impossible until a partner is assigned.

Configure with the ``DELIVERY_DISPATCH`` (``fixed`` | ``none``) and
``DELIVERY_PARTNER_ID`` environment variables.
"""

import os

DEFAULT_DELIVERY_PARTNER_ID = "delivery-partner-001"

_dispatcher_instance = None


class FixedDispatcher:
    def __init__(self, partner_id: str = DEFAULT_DELIVERY_PARTNER_ID):
        self.partner_id = partner_id

    def assign(self, order) -> str | None:
        return self.partner_id


class NoDispatcher:
    def assign(self, order) -> str | None:
        return None


def get_dispatcher():
    """Return the configured dispatcher (singleton)."""
    global _dispatcher_instance
    if _dispatcher_instance is None:
        mode = os.environ.get("DELIVERY_DISPATCH", "fixed")
        if mode == "fixed":
            _dispatcher_instance = FixedDispatcher(
                os.environ.get("DELIVERY_PARTNER_ID", DEFAULT_DELIVERY_PARTNER_ID)
            )
        elif mode == "none":
            _dispatcher_instance = NoDispatcher()
        else:
            raise ValueError(f"Unknown delivery dispatch mode: {mode}")
    return _dispatcher_instance


def reset_dispatcher():
    """Reset the dispatcher singleton (useful for testing)."""
    global _dispatcher_instance
    _dispatcher_instance = None

"""Marketplace error kinds not covered by protean's own exceptions.

Malformed input is reported with ``protean.exceptions.ValidationError`` and
missing records with ``protean.exceptions.ObjectNotFoundError``. The errors
below cover authority, state-machine and uniqueness failures.
"""


class MarketplaceError(Exception):
    """Base class for guard failures raised by the marketplace engines."""

    kind = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ForbiddenError(MarketplaceError):
    """The actor has no authority over the resource."""

    kind = "Forbidden"


class InvalidStateError(MarketplaceError):
    """The operation is not legal from the resource's current state."""

    kind = "InvalidState"


class ConflictError(MarketplaceError):
    """The operation would duplicate a record that must be unique."""

    kind = "Conflict"

"""Storefront error taxonomy.

Every error carries a stable ``code`` and a user-facing ``message``. The API
layer renders them as ``{"error": {"code": ..., "message": ...}}`` with the
class's ``status_code``; nothing internal (stack, query) is exposed.
"""


class StorefrontError(Exception):
    """Base class for errors raised by the checkout and order lifecycle core."""

    code = "STOREFRONT_ERROR"
    status_code = 400

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFound(StorefrontError):
    """A product, order or cart item is missing (or the product is inactive)."""

    code = "NOT_FOUND"
    status_code = 404


class OutOfStock(StorefrontError):
    """The requested quantity exceeds the product's available stock."""

    code = "OUT_OF_STOCK"
    status_code = 400


class EmptyCart(StorefrontError):
    """Checkout was requested for a cart with no lines."""

    code = "EMPTY_CART"
    status_code = 400


class InvalidTransition(StorefrontError):
    """The order cannot move from its current status to the requested one."""

    code = "INVALID_TRANSITION"
    status_code = 409


class AccessDenied(StorefrontError):
    """The caller may not read the requested order."""

    code = "FORBIDDEN"
    status_code = 403


class PersistenceFailure(StorefrontError):
    """The store aborted the transaction; nothing was written."""

    code = "PERSISTENCE_FAILURE"
    status_code = 503


class NotAuthenticated(StorefrontError):
    """The request carries no caller identity."""

    code = "UNAUTHORIZED"
    status_code = 401

# storefront/domain/errors.py
"""
Bledy domenowe. Kazdy niesie status HTTP i staly kod,
handlery w storefront.api zamieniaja je na koperte {success, error, message}.
"""


class StorefrontError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(StorefrontError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class Forbidden(StorefrontError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Admin access required"


class NotFound(StorefrontError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class CartNotFound(NotFound):
    code = "CART_NOT_FOUND"
    default_message = "Cart not found"


class ItemNotInCart(NotFound):
    code = "ITEM_NOT_IN_CART"
    default_message = "Item not found in cart"


class ItemNotFound(NotFound):
    code = "ITEM_NOT_FOUND"
    default_message = "Menu item not found"


class OrderNotFound(NotFound):
    code = "ORDER_NOT_FOUND"
    default_message = "Order not found"


class InvalidInput(StorefrontError):
    status_code = 400
    code = "INVALID_INPUT"
    default_message = "Invalid input"


class InvalidOrder(InvalidInput):
    code = "INVALID_ORDER"
    default_message = "Invalid order"


class UpstreamFailure(StorefrontError):
    status_code = 502
    code = "UPSTREAM_FAILURE"
    default_message = "Upstream service unavailable"


class CartBusy(UpstreamFailure):
    status_code = 503
    code = "CART_BUSY"
    default_message = "Cart is being modified, try again"

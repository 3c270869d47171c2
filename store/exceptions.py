"""
Error taxonomy for the storefront API.

Every error carries the HTTP status it maps to; ``JsonErrorMiddleware``
turns them into ``{"error": message}`` responses.
"""


class StoreError(Exception):
    status_code = 400
    default_message = "Bad request"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StoreError):
    status_code = 400
    default_message = "Invalid input"


class NotFoundError(StoreError):
    status_code = 404
    default_message = "Not found"


class ConflictError(StoreError):
    status_code = 400
    default_message = "Already exists"


class AuthError(StoreError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AuthError):
    status_code = 403
    default_message = "Admin access required"


class InternalError(StoreError):
    status_code = 500
    default_message = "Server error"


# ------------------------------
# BUSINESS RULES
# ------------------------------
class BusinessRuleError(StoreError):
    status_code = 400


class EmptyCart(BusinessRuleError):
    default_message = "Cart is empty"


class InsufficientStock(BusinessRuleError):
    def __init__(self, product_id, message=None):
        self.product_id = product_id
        super().__init__(message or f"Insufficient stock for product {product_id}")


class InvalidStatus(BusinessRuleError):
    default_message = "Invalid status"


class OrderTotalTooLarge(BusinessRuleError):
    default_message = "Order total exceeds the maximum allowed amount"

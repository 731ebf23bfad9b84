"""
Common error constants and backend error helpers.
"""

# Postgres SQLSTATE for unique_violation, surfaced by PostgREST as `code`.
UNIQUE_VIOLATION = "23505"

# Auth errors
ERROR_INVALID_CREDENTIALS = "Invalid credentials. Please try again."
ERROR_INVALID_TOKEN = "Invalid or expired token"
ERROR_OAUTH_UNAVAILABLE = "Google sign-in is currently unavailable"

# Catalog / cart errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_ITEM_NOT_IN_CART = "Item not in cart"


def is_unique_violation(exc: BaseException) -> bool:
    """True if a PostgREST error reports a duplicate key."""
    return getattr(exc, "code", None) == UNIQUE_VIOLATION

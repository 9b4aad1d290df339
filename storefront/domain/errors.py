"""Errors raised by the storefront services.

Routers translate them into JSON responses carrying a ``message``.
"""


class StoreError(Exception):
    """Base exception for all storefront errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(StoreError):
    """Missing or malformed input, detected before any write."""

    status_code = 400


class PaymentVerificationError(ValidationError):
    """Payment confirmation is incomplete or its signature does not match."""


class AuthenticationError(StoreError):
    """Missing (401) or invalid (403) credentials."""

    def __init__(self, message: str, status_code: int = 401):
        self.status_code = status_code
        self.headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        super().__init__(message)


class NotFoundError(StoreError):
    """Resource is absent or owned by another user.

    Both cases produce the same message so callers cannot discover
    other users' carts or orders.
    """

    status_code = 404


class TransactionError(StoreError):
    """A multi-statement write failed and was rolled back."""

    status_code = 500


class ExternalServiceError(StoreError):
    """An outbound call (payment gateway, broker) failed."""

    status_code = 502

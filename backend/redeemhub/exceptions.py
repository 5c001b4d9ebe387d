"""
Exception hierarchy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to; the handlers registered in
main.py render it as {"error": <message>}.
"""


class RedeemError(Exception):
    """Base class for all anticipated service errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(RedeemError):
    """Raised when a referenced product, account or message does not exist."""

    status_code = 404


class InvalidCodeError(NotFoundError):
    """Raised when a code is unknown, already used or its account/product is gone."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__("Invalid or used code")


class ValidationError(RedeemError):
    """Raised when input is malformed or violates a business rule."""

    status_code = 400


class DuplicateError(ValidationError):
    """Raised when a unique key (e.g. product_code) already exists."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} already exists: {value}")


class InsufficientAccountsError(ValidationError):
    """Raised when a batch asks for more codes than available accounts."""

    def __init__(self, available: int, requested: int) -> None:
        self.available = available
        self.requested = requested
        super().__init__(
            f"Only {available} accounts available (requested: {requested})"
        )


class CodeGenerationError(RedeemError):
    """Raised when no unique code could be produced within the retry budget."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__("Failed to generate unique code")


class AuthenticationError(RedeemError):
    """Raised when the credential verifier rejects a login."""

    status_code = 401


class ConcurrencyError(RedeemError):
    """Raised when a per-product lock cannot be acquired in time."""

    status_code = 409

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"Could not acquire lock for {resource}; try again")


class StorageError(RedeemError):
    """Raised when a storage write fails and the transaction was rolled back."""

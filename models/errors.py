"""
models/errors.py
----------------
Error taxonomy shared by the domain, repository and service layers.
"""


class SubLoopError(Exception):
    """Base class for all SubLoop errors."""

    def __init__(self, message: str, code: str = "SUBLOOP_ERROR") -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(SubLoopError, ValueError):
    """
    Raised when form input is rejected before it reaches the store.

    Attributes:
        field: Name of the offending field (e.g. 'price').
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message, code="VALIDATION_FAILED")
        self.field = field


class PersistenceError(SubLoopError):
    """
    Raised when a write to the store fails.
    The transaction has already been rolled back when this is raised.
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}", code="PERSISTENCE_FAILED")
        self.operation = operation


class SubscriptionNotFoundError(SubLoopError):
    """Raised when an update targets a subscription id that is not stored."""

    def __init__(self, subscription_id: str) -> None:
        super().__init__(
            f"Subscription '{subscription_id}' does not exist.",
            code="SUBSCRIPTION_NOT_FOUND",
        )
        self.subscription_id = subscription_id

class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class UnsupportedQueryError(DomainError):
    """Raised when a query needs more than the store can evaluate in one call."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class InternalTransactionError(ForbiddenError):
    """A transaction body failed for a reason other than the expected outcomes."""


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class TransactionConflictError(ConflictError):
    """Optimistic concurrency check failed at commit time."""


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str = 'Authorization required') -> None:
        super().__init__(message, 401)

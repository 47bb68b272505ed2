"""
Application errors.

Services raise these instead of bare ValueError so the API layer
can map each category to the right status code. The message is
safe to show to a client; ``details`` carries internal context
(the wrapped exception text) and is only logged.
"""


class AppError(Exception):
    """Base class for all ledger errors."""

    error_type = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ValidationError(AppError):
    """Malformed input rejected before it reaches the ledger."""

    error_type = "VALIDATION_ERROR"
    status_code = 422


class NotFoundError(AppError):
    """A transaction, wallet or user does not exist (or is deleted)."""

    error_type = "NOT_FOUND_ERROR"
    status_code = 404


class ForbiddenError(AppError):
    """Ownership violation, e.g. a wallet that belongs to another user."""

    error_type = "FORBIDDEN_ERROR"
    status_code = 403


class ConflictError(AppError):
    """Duplicate resource."""

    error_type = "CONFLICT_ERROR"
    status_code = 409


class InternalError(AppError):
    """Store failure. The unit of work has already been rolled back."""

    error_type = "INTERNAL_ERROR"
    status_code = 500

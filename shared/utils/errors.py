"""
shared/utils/errors.py
Application error taxonomy. Each error carries the HTTP status it maps to;
main.py renders them as {"detail": ..., "errors": [...]}.
"""

from typing import List, Optional


class AppError(Exception):
    status_code: int = 500
    default_detail: str = "An internal server error occurred"

    def __init__(self, detail: Optional[str] = None, errors: Optional[List[dict]] = None):
        self.detail = detail or self.default_detail
        self.errors = errors
        super().__init__(self.detail)


class ValidationError(AppError):
    """Malformed or out-of-range input."""
    status_code = 400
    default_detail = "Validation failed"


class NoAvailabilityError(ValidationError):
    default_detail = "No available slots for this activity"


class AuthError(AppError):
    """Missing, invalid or expired credential."""
    status_code = 401
    default_detail = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    default_detail = "Not authorized"


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Not found"


class ConflictError(AppError):
    # Conflicts are reported as 400, not 409, to keep existing clients working
    status_code = 400
    default_detail = "Conflict"


class AlreadyCancelledError(ConflictError):
    default_detail = "Booking is already cancelled"

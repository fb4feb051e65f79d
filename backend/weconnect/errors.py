"""Error taxonomy shared by the engines and the HTTP layer.

Every error carries the HTTP status it maps to; ``main`` renders them as
``{"error": message, ...extra}`` JSON bodies.
"""

from typing import Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_payload(self) -> dict:
        return {"error": self.message, **self.extra}


class ValidationError(AppError):
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, **extra):
        if field:
            extra["field"] = field
        super().__init__(message, **extra)
        self.field = field


class MissingFieldsError(ValidationError):
    def __init__(self, missing: list, required: list):
        super().__init__("Missing required fields", required=list(required), missing=list(missing))
        self.missing = list(missing)


class VisitDateInPastError(ValidationError):
    def __init__(self):
        super().__init__("Visit date cannot be in the past", field="visit_date")


class VisitDateNotServedError(ValidationError):
    def __init__(self):
        super().__init__(
            "We only provide transportation on weekends (Saturday and Sunday) and federal holidays",
            field="visit_date",
        )


class UnauthorizedError(AppError):
    status_code = 401


class SessionExpiredError(UnauthorizedError):
    def __init__(self):
        super().__init__("Session expired")


class InvalidCredentialsError(UnauthorizedError):
    def __init__(self):
        super().__init__("Invalid password")


class NotFoundError(AppError):
    status_code = 404


class AlreadyInStateError(AppError):
    status_code = 400

    def __init__(self, booking_id, status: str):
        super().__init__(f"Booking already {status}", status=status)
        self.booking_id = booking_id
        self.status = status


class RateLimitExceededError(AppError):
    status_code = 429

    def __init__(self, retry_after: int):
        super().__init__("Too many login attempts, please try again later.", retry_after=retry_after)
        self.retry_after = retry_after


class StorageError(AppError):
    status_code = 500

    def __init__(self, message: str, public_message: str = "Failed to access bookings"):
        super().__init__(message)
        self.public_message = public_message

    def to_payload(self) -> dict:
        return {"error": self.public_message}


class NotificationError(AppError):
    """Raised by a transport; always captured into a channel outcome."""

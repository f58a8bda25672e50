"""Domain error codes and exceptions.

Every failure a boundary operation can report is a ``DomainError`` with a
stable ``ErrorCode``, a user-safe message and the HTTP status the API layer
uses when it has to pick one.
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_EMAIL = "INVALID_EMAIL"
    SLUG_MISMATCH = "SLUG_MISMATCH"
    MALFORMED_FORM = "MALFORMED_FORM"
    MISSING_IMAGE = "MISSING_IMAGE"
    MALFORMED_TAGS_OR_AGENDA = "MALFORMED_TAGS_OR_AGENDA"
    INVALID_DATE_FORMAT = "INVALID_DATE_FORMAT"
    INVALID_TIME_FORMAT = "INVALID_TIME_FORMAT"
    INVALID_TIME_VALUES = "INVALID_TIME_VALUES"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    DUPLICATE_SLUG = "DUPLICATE_SLUG"
    DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
    UPLOAD_FAILED = "UPLOAD_FAILED"
    PERSIST_FAILED = "PERSIST_FAILED"
    EVENT_PERSIST_FAILED = "EVENT_PERSIST_FAILED"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.PERSIST_FAILED
    status_code: int = 500

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message}


# -- Categories ---------------------------------------------------------------


class ValidationError(DomainError):
    """A field is missing, oversized or malformed."""

    code = ErrorCode.VALIDATION_FAILED
    status_code = 400


class NormalizationError(DomainError):
    """A date or time could not be brought into canonical form."""

    status_code = 400


class ReferentialError(DomainError):
    status_code = 404


class DuplicateError(DomainError):
    status_code = 409


class UploadError(DomainError):
    code = ErrorCode.UPLOAD_FAILED
    status_code = 500


class PersistError(DomainError):
    """Storage-layer failure not otherwise classified."""

    code = ErrorCode.PERSIST_FAILED
    status_code = 500


# -- Validation ---------------------------------------------------------------


class EventValidationError(ValidationError):
    """Raised when event fields fail required/length/enum checks."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors) or "event"
        super().__init__(f"Invalid event fields: {fields}")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "fields": self.errors}


class InvalidEmailError(ValidationError):
    code = ErrorCode.INVALID_EMAIL

    def __init__(self) -> None:
        super().__init__("Please provide a valid email address")


class SlugMismatchError(ValidationError):
    code = ErrorCode.SLUG_MISMATCH

    def __init__(self, event_id: int, slug: str) -> None:
        super().__init__(f"Slug '{slug}' does not belong to event {event_id}")
        self.event_id = event_id
        self.slug = slug


class MalformedFormError(ValidationError):
    code = ErrorCode.MALFORMED_FORM

    def __init__(self) -> None:
        super().__init__("Invalid form data format")


class MissingImageError(ValidationError):
    code = ErrorCode.MISSING_IMAGE

    def __init__(self) -> None:
        super().__init__("Image file is required")


class MalformedTagsOrAgendaError(ValidationError):
    code = ErrorCode.MALFORMED_TAGS_OR_AGENDA

    def __init__(self, field: str) -> None:
        super().__init__(f"'{field}' must be a JSON array of strings")
        self.field = field


# -- Normalization ------------------------------------------------------------


class InvalidDateFormatError(NormalizationError):
    code = ErrorCode.INVALID_DATE_FORMAT

    def __init__(self, value: str) -> None:
        super().__init__("Invalid date format")
        self.value = value


class InvalidTimeFormatError(NormalizationError):
    code = ErrorCode.INVALID_TIME_FORMAT

    def __init__(self, value: str) -> None:
        super().__init__("Invalid time format. Use HH:MM or HH:MM AM/PM")
        self.value = value


class InvalidTimeValuesError(InvalidTimeFormatError):
    """Well-formed time whose hour or minute is out of range."""

    code = ErrorCode.INVALID_TIME_VALUES

    def __init__(self, value: str) -> None:
        NormalizationError.__init__(self, "Invalid time values")
        self.value = value


# -- Referential / duplicates -------------------------------------------------


class EventNotFoundError(ReferentialError):
    """Raised when an event is not found."""

    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_ref: Any) -> None:
        super().__init__(f"Event with ID {event_ref} does not exist")
        self.event_ref = event_ref


class DuplicateSlugError(DuplicateError):
    code = ErrorCode.DUPLICATE_SLUG

    def __init__(self, slug: str) -> None:
        super().__init__(f"An event with slug '{slug}' already exists")
        self.slug = slug


class DuplicateBookingError(DuplicateError):
    code = ErrorCode.DUPLICATE_BOOKING

    def __init__(self, event_id: int, email: str) -> None:
        super().__init__(f"{email} has already booked event {event_id}")
        self.event_id = event_id
        self.email = email


# -- Pipeline -----------------------------------------------------------------


class UploadFailedError(UploadError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Image upload failed: {reason}")
        self.reason = reason


class EventPersistFailedError(PersistError):
    """Wraps the entity-level failure that stopped an event from being saved."""

    code = ErrorCode.EVENT_PERSIST_FAILED

    def __init__(self, cause: DomainError) -> None:
        super().__init__(cause.message)
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "cause": self.cause.to_dict()}

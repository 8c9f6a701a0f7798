"""Typed failures raised by the booking services.

Each subclass pins an error code and the HTTP status the API layer uses
when it renders the failure into an ``APIResponse`` envelope.
"""

from testdrive_desk.core.error_codes import ErrorCode


class DomainException(Exception):
    status_code = 400
    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message


class Unauthorized(DomainException):
    status_code = 403
    default_code = ErrorCode.UNAUTHORIZED


class Unauthenticated(Unauthorized):
    status_code = 401


class NotFound(DomainException):
    status_code = 404
    default_code = ErrorCode.BOOKING_NOT_FOUND


class SlotConflict(DomainException):
    status_code = 409
    default_code = ErrorCode.SLOT_CONFLICT


class CarUnavailable(DomainException):
    status_code = 409
    default_code = ErrorCode.CAR_UNAVAILABLE


class BookingValidationError(DomainException):
    status_code = 422
    default_code = ErrorCode.VALIDATION_ERROR


class InvalidStatus(DomainException):
    status_code = 400
    default_code = ErrorCode.INVALID_STATUS


class AlreadyCancelled(DomainException):
    status_code = 409
    default_code = ErrorCode.ALREADY_CANCELLED


class AlreadyCompleted(DomainException):
    status_code = 409
    default_code = ErrorCode.ALREADY_COMPLETED


class StorageUnavailable(DomainException):
    status_code = 503
    default_code = ErrorCode.STORAGE_UNAVAILABLE

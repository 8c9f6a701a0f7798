"""Machine-readable error codes returned in the API error envelope."""


class ErrorCode:
    UNAUTHORIZED = "UNAUTHORIZED"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    CAR_NOT_FOUND = "CAR_NOT_FOUND"
    DEALERSHIP_NOT_FOUND = "DEALERSHIP_NOT_FOUND"
    SLOT_CONFLICT = "SLOT_CONFLICT"
    CAR_UNAVAILABLE = "CAR_UNAVAILABLE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_STATUS = "INVALID_STATUS"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    ALREADY_COMPLETED = "ALREADY_COMPLETED"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"

import logging

from fastapi import Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from testdrive_desk.schemas.common import APIResponse, APIError
from testdrive_desk.core.error_codes import ErrorCode

from testdrive_desk.core.domain_exceptions import DomainException

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse(
            success=False,
            error=APIError(
                code=code,
                message=message,
            ),
        ).model_dump(),
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(exc.status_code, ErrorCode.VALIDATION_ERROR, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    first_error = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first_error.get("loc", ()))
    message = first_error.get("msg", "Invalid request.")
    return _error_response(
        422,
        ErrorCode.VALIDATION_ERROR,
        f"{location}: {message}" if location else message,
    )


async def domain_exception_handler(request: Request, exc: DomainException):
    logger.info(
        "Request rejected",
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "error_code": exc.code,
            "path": request.url.path,
        },
    )
    return _error_response(exc.status_code, exc.code, exc.message)


async def storage_exception_handler(request: Request, exc: OperationalError):
    logger.exception("Storage failure while handling %s.", request.url.path)
    return _error_response(
        503,
        ErrorCode.STORAGE_UNAVAILABLE,
        "Booking storage is unavailable. Please try again later.",
    )

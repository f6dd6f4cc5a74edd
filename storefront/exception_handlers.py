from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.debug import logger
from .core.exceptions import StorefrontError
from .schemas.common import ErrorEnvelope, FieldError

VALUE_ERROR_PREFIX = "Value error, "


def error_response(
    status_code: int, error: str, headers=None, details=None
) -> JSONResponse:
    body = ErrorEnvelope(error=error, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(
            mode="json", exclude={"details"} if details is None else None
        ),
        headers=headers,
    )


async def storefront_error_handler(request: Request, exc: StorefrontError):
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, detail, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        message = error.get("msg", "Invalid value")
        if message.startswith(VALUE_ERROR_PREFIX):
            message = message[len(VALUE_ERROR_PREFIX) :]
        details.append(
            FieldError(
                field=".".join(location), message=message, value=error.get("input")
            )
        )
    return error_response(
        status.HTTP_400_BAD_REQUEST, "Validation failed", details=details
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

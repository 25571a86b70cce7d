from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from medgram.core.logger import logger


class MedgramError(Exception):
    """Base error carrying the message and status returned to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MedgramError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid data"


class ConflictError(ValidationError):
    default_message = "User already exists"


class InvalidCredentialsError(MedgramError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class InvalidTokenError(MedgramError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class PermissionDeniedError(MedgramError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class AuthBackendError(MedgramError):
    pass


class StorageBackendError(MedgramError):
    default_message = "Could not generate upload URL"


class PersistenceError(MedgramError):
    pass


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid data"
    first = errors[0]
    # drop the leading "body"/"query" segment
    loc = [str(part) for part in first.get("loc", ())[1:]]
    if loc:
        return f"{'.'.join(loc)}: {first.get('msg', 'invalid value')}"
    return first.get("msg", "Invalid data")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MedgramError)
    async def _medgram_error(request: Request, exc: MedgramError):
        if exc.status_code >= 500:
            logger.error(
                "request_error",
                path=request.url.path,
                error=exc.message,
                cause=repr(exc.__cause__) if exc.__cause__ else None,
            )
        else:
            logger.warning(
                "request_rejected",
                path=request.url.path,
                status=exc.status_code,
                error=exc.message,
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        logger.warning("request_invalid", path=request.url.path, error=message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        logger.error(
            "request_unhandled_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": MedgramError.default_message},
        )

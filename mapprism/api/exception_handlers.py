"""
Exception handlers for converting domain exceptions to HTTP responses.

Domain exceptions are mapped by their ``ErrorKind`` tag, never by message
text. Messages of internal and database errors are not sent to clients.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mapprism.exceptions.domain import ErrorKind, MapprismError
from mapprism.utils.logger import logger

KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.AUTHENTICATION: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Kinds whose message may be shown to the client
PUBLIC_KINDS = frozenset(
    {ErrorKind.VALIDATION, ErrorKind.NOT_FOUND, ErrorKind.CONFLICT, ErrorKind.AUTHENTICATION}
)


def error_response(exc: MapprismError) -> JSONResponse:
    """Build the HTTP response for a domain exception."""
    status_code = KIND_STATUS.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if exc.kind in PUBLIC_KINDS and str(exc):
        detail = str(exc)
    else:
        detail = "Internal server error"
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind == ErrorKind.AUTHENTICATION else None
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


def format_request_errors(exc: RequestValidationError) -> str:
    """Render request schema errors as ``loc: message`` pairs."""
    parts = []
    for error in exc.errors():
        loc = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = str(error.get("msg", "invalid value")).removeprefix("Value error, ")
        parts.append(f"{loc}: {message}" if loc else message)
    return "; ".join(parts) or "Invalid request body"


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(MapprismError)
    async def handle_domain_error(request: Request, exc: MapprismError) -> JSONResponse:
        """Convert a domain exception according to its kind."""
        if exc.kind in PUBLIC_KINDS:
            logger.info(f"{request.method} {request.url.path} rejected ({exc.kind.value}): {exc}")
        else:
            logger.opt(exception=exc).error(
                f"{request.method} {request.url.path} failed ({exc.kind.value}): {exc}"
            )
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Convert request schema errors to 400 response."""
        detail = format_request_errors(exc)
        logger.info(f"{request.method} {request.url.path} bad request: {detail}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})

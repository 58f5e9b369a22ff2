import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from powerdash.errors import (
    AccessDeniedError,
    AlreadyInitializedError,
    AuthenticationError,
    ControllerAuthFailedError,
    ControllerProtocolError,
    ControllerUnreachableError,
    NotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

CONTROLLER_ERROR_MESSAGE = "Could not reach server controller"


def create_json_error_response(status_code: int, message: str, error_type: str | None = None) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, AlreadyInitializedError):
        status_code = 403
        error_type = "already_initialized"
    elif isinstance(exc, AccessDeniedError):
        status_code = 403
        error_type = "access_denied"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type)


async def request_validation_error_handler(request: Request, exc: Exception) -> Response:
    """Answer malformed request bodies with 400 instead of FastAPI's default 422."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    logger.debug("request_validation_failed", path=request.url.path, errors=errors)
    return create_json_error_response(status_code=400, message="Invalid request payload", error_type="validation_error")


async def controller_error_handler(request: Request, exc: Exception) -> Response:
    """Map controller failures to a generic message; details go to the log only."""
    if isinstance(exc, ControllerAuthFailedError):
        logger.error("controller_auth_failed", path=request.url.path, detail=str(exc), hint="check controller credentials")
        return create_json_error_response(status_code=500, message=CONTROLLER_ERROR_MESSAGE, error_type="controller_auth_failed")
    if isinstance(exc, ControllerUnreachableError):
        logger.warning("controller_unreachable", path=request.url.path, detail=str(exc))
        error_type = "controller_unreachable"
    elif isinstance(exc, ControllerProtocolError):
        logger.error("controller_protocol_error", path=request.url.path, detail=str(exc))
        error_type = "controller_protocol_error"
    else:
        logger.error("controller_error", path=request.url.path, detail=str(exc))
        error_type = "controller_error"
    return create_json_error_response(status_code=502, message=CONTROLLER_ERROR_MESSAGE, error_type=error_type)


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("unexpected_error", error=str(exc))
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )

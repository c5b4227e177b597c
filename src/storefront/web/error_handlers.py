import logging

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from storefront.errors import AuthenticationError, RateLimitError, ValidationError
from storefront.web.cookies import delete_session_cookie

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    headers = None
    # Determine the appropriate status code and type based on error
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    elif isinstance(exc, RateLimitError):
        status_code = 429
        error_type = "rate_limited"
        headers = {"Retry-After": str(exc.retry_after)}
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    response = create_json_error_response(
        status_code=status_code, message=str(exc), error_type=error_type, headers=headers
    )
    if getattr(request.state, "clear_session_cookie", False):
        delete_session_cookie(response, secure=request.app.state.config.secure_cookies)
    return response


async def general_exception_handler(_: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.exception("Unexpected error: %s", exc)
    return create_json_error_response(
        status_code=500, message="An unexpected error occurred.", error_type="internal_server_error"
    )

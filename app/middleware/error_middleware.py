import logging
import traceback
from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as ModelValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.utils.error_handling import APIError
from app.utils.response_formatter import error_response, from_api_error

logger = logging.getLogger(__name__)


def api_error_response(error: APIError) -> JSONResponse:
    """Standard error envelope for an APIError, with its status code."""
    return JSONResponse(
        status_code=error.status_code,
        content=from_api_error(error)
    )


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that turns calculation errors escaping a handler into
    standard error envelopes.

    Input problems (APIError subclasses) keep their own status code. A
    result model that fails its own invariant check is a calculation
    failure and becomes a 500 ``calculation_error``.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except APIError as e:
            logger.warning(f"API error on {request.url.path}: {e.error_code} - {e.message}")
            return api_error_response(e)
        except ModelValidationError as e:
            logger.error(f"Result invariant violated on {request.url.path}: {e}")
            return JSONResponse(
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                content=error_response(
                    message="Calculation produced an inconsistent result",
                    error_code="calculation_error",
                    details={"errors": [err["msg"] for err in e.errors()]}
                )
            )
        except Exception as e:
            tb = traceback.format_exc()
            logger.error(f"Unexpected error: {str(e)}\n{tb}")
            return JSONResponse(
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                content=error_response(
                    message="An unexpected error occurred",
                    error_code="internal_error",
                    details={"error_type": type(e).__name__}
                )
            )

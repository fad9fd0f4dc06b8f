# app/utils/response_formatter.py

from typing import Any, Dict, Optional

from app.utils.error_handling import APIError


def error_response(
    message: str,
    error_code: str = "internal_error",
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Error envelope returned by the middleware and the global exception handler.

    Args:
        message: Human readable message
        error_code: Machine readable code (invalid_unit, validation_error, ...)
        details: Extra context; validation failures carry an ``errors`` list

    Returns:
        Dictionary with ``status`` set to "error" and an ``error`` object
    """
    return {
        "status": "error",
        "error": {
            "code": error_code,
            "message": message,
            "details": details or {}
        }
    }


def from_api_error(error: APIError) -> Dict[str, Any]:
    return error_response(error.message, error.error_code, error.details)

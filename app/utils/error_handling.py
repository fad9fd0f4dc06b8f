# app/utils/error_handling.py

import logging
import traceback
from typing import Dict, Any, List, Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

class APIError(Exception):
    """Base class for API errors"""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)

class ValidationError(APIError):
    """
    Aggregated input validation failure.

    Every problem found in an input is collected into ``errors`` so that the
    caller can report all of them at once.
    """
    def __init__(self, errors: List[str], details: Optional[Dict[str, Any]] = None):
        self.errors = list(errors)
        details = dict(details or {})
        details["errors"] = self.errors
        super().__init__(
            message="; ".join(self.errors) if self.errors else "Invalid input",
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="validation_error",
            details=details
        )

class InvalidUnitError(APIError):
    """Error for a unit that is not registered for a quantity kind"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="invalid_unit",
            details=details
        )

class UnknownGeometryError(APIError):
    """Error for a nominal size / schedule / material with no table entry"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="unknown_geometry",
            details=details
        )

class InvalidFlowError(APIError):
    """Error for non-physical flow inputs (non-positive flow, density, viscosity, diameter)"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="invalid_flow",
            details=details
        )

class CalculationError(APIError):
    """Error for calculation failures"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="calculation_error",
            details=details
        )

def handle_api_error(error: Exception) -> HTTPException:
    """
    Convert any exception to an appropriate HTTPException.
    This provides consistent error handling across the application.

    Args:
        error: The exception to handle

    Returns:
        HTTPException with appropriate status code and details
    """
    if isinstance(error, APIError):
        # For our custom API errors, use their status code and details
        return HTTPException(
            status_code=error.status_code,
            detail={
                "error": error.error_code,
                "message": error.message,
                "details": error.details
            }
        )
    elif isinstance(error, HTTPException):
        return error
    else:
        # For unexpected errors, log the full traceback and return a generic error
        tb = traceback.format_exc()
        logger.error(f"Unexpected error: {str(error)}\n{tb}")

        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "internal_error",
                "message": "An unexpected error occurred",
                "details": {"error_type": type(error).__name__}
            }
        )

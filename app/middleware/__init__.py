from app.middleware.logging_middleware import LoggingMiddleware
from app.middleware.error_middleware import ErrorHandlingMiddleware, api_error_response

__all__ = ["LoggingMiddleware", "ErrorHandlingMiddleware", "api_error_response"]

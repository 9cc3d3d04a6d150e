from app.middleware.logging_middleware import LoggingMiddleware
from app.middleware.error_middleware import ErrorHandlingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlingMiddleware"]
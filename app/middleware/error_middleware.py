import logging
import traceback

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.utils.error_handling import APIError
from app.utils.response_formatter import response_formatter

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Last line of defence for errors that escape the route handlers.

    API errors keep their status and error code; anything else becomes a
    500 ``internal_error`` envelope with the exception type in the details.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except APIError as e:
            log = logger.error if e.status_code >= HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
            log(f"{request.url.path}: {e.error_code} - {e.message}")
            return JSONResponse(
                status_code=e.status_code,
                content=response_formatter.error(e.message, e.error_code, e.details),
            )
        except Exception as e:
            logger.error(f"Unexpected error on {request.url.path}: {str(e)}\n{traceback.format_exc()}")
            return JSONResponse(
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                content=response_formatter.error(
                    message="An unexpected error occurred",
                    error_code="internal_error",
                    details={"error_type": type(e).__name__, "path": request.url.path},
                ),
            )

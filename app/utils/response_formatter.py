# app/utils/response_formatter.py

from typing import Any, Dict, Optional


def error_response(
    message: str,
    error_code: str = "internal_error",
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Error envelope returned for every failed request.

    Args:
        message: User-facing message, e.g. "Unsupported file format '.pdf'"
        error_code: Stable code for clients (unsupported_format, no_valid_data, ...)
        details: Additional error details

    Returns:
        ``{"status": "error", "error": {"code", "message", "details"}}``
    """
    return {
        "status": "error",
        "error": {
            "code": error_code,
            "message": message,
            "details": details or {}
        }
    }


class ResponseFormatter:
    """
    Utility class for formatting API responses.
    """

    @staticmethod
    def error(
        message: str,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return error_response(message, error_code, details)


# Create a singleton instance for easy access
response_formatter = ResponseFormatter()

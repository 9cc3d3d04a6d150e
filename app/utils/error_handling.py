# app/utils/error_handling.py

from typing import Dict, Any, Optional

from fastapi import status

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
    """Error for validation failures"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="validation_error",
            details=details
        )

class NotFoundError(APIError):
    """Error for resource not found"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
            details=details
        )

class CalculationError(APIError):
    """Error for calculations given inputs they cannot work with"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="calculation_error",
            details=details
        )

class UnsupportedFormatError(APIError):
    """The uploaded file's extension is not one we can ingest. Fatal for that file."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            error_code="unsupported_format",
            details=details
        )

class ParseFailure(APIError):
    """
    A parse strategy could not read the file.

    Raised inside strategies and caught by the parser chain, which logs it
    and moves on to the next strategy.
    """
    def __init__(self, message: str, strategy: str = "", details: Optional[Dict[str, Any]] = None):
        self.strategy = strategy
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="parse_failure",
            details={"strategy": strategy, **(details or {})}
        )

class NoValidDataError(APIError):
    """Every row of the file was rejected. A normal outcome for empty or malformed files."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="no_valid_data",
            details=details
        )

class StorageError(APIError):
    """Error for persistence failures"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="storage_error",
            details=details
        )

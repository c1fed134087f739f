"""
Custom exceptions for the application.

This module defines a hierarchy of custom exceptions for error handling:
- AppException: Base exception for all application errors
- ValidationError: Request validation failures (400)
- InvalidIdentifierError: MSISDN is not exactly 11 characters (400)
- InvalidDateFormatError: Malformed YYYY-MM / YYYY-MM-DD input (400)
- NoDataError: Query resolved to an empty record set (404)
- InvalidRecordError: Stored record rejected by aggregation (422)
- ReportExportError: CSV report could not be written (500)
"""

import logging
from typing import Any


logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base exception for application errors.

    All custom exceptions should inherit from this class.
    Provides consistent error structure with error_code, message, and details.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        details: Any = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON response."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result


class ValidationError(AppException):
    """Raised when request validation fails.

    HTTP Status: 400 Bad Request
    """

    def __init__(
        self,
        message: str,
        details: Any = None,
        error_code: str = "validation_error",
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InvalidIdentifierError(ValidationError):
    """Raised when a subscriber MSISDN does not have the fixed length.

    HTTP Status: 400 Bad Request
    """

    def __init__(self, msisdn: str | None = None, expected_length: int = 11):
        super().__init__(
            message="Incorrect phone number",
            details={"msisdn": msisdn, "expected_length": expected_length},
            error_code="invalid_identifier",
        )
        self.msisdn = msisdn


class InvalidDateFormatError(ValidationError):
    """Raised when a day or month string cannot be parsed.

    HTTP Status: 400 Bad Request
    """

    def __init__(self, value: str | None = None, expected_format: str = "YYYY-MM-DD"):
        super().__init__(
            message=(
                "Incorrect date, use YYYY-MM-DD for a day or YYYY-MM for a month"
            ),
            details={"value": value, "expected_format": expected_format},
            error_code="invalid_date_format",
        )
        self.value = value


class NoDataError(AppException):
    """Raised when a query resolves to no call records.

    HTTP Status: 404 Not Found
    """

    def __init__(self, message: str = "No data to receive", query: dict | None = None):
        super().__init__(
            message=message,
            error_code="no_data",
            details=query,
        )
        self.query = query


class InvalidRecordError(AppException):
    """Raised when a stored call record cannot be aggregated.

    HTTP Status: 422 Unprocessable Entity
    """

    def __init__(self, message: str = "Call record has a negative duration", record: Any = None):
        super().__init__(
            message=message,
            error_code="invalid_record",
            details=record,
        )
        self.record = record


class ReportExportError(AppException):
    """Raised when a CDR report file cannot be written.

    HTTP Status: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Failed to generate report",
        path: str | None = None,
        original_error: Exception | None = None,
    ):
        details = {"path": path} if path else None
        super().__init__(
            message=message,
            error_code="report_export_error",
            details=details,
        )
        self.path = path
        self.original_error = original_error


def log_exception(exc: Exception, context: str | None = None) -> None:
    """Log an exception with context information.

    Args:
        exc: The exception to log.
        context: Optional context string for the log message.
    """
    if isinstance(exc, AppException):
        logger.error(
            f"{context or 'Error'}: [{exc.error_code}] {exc.message}",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
    else:
        logger.exception(f"{context or 'Unexpected error'}: {exc}")

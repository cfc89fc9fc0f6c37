"""
Custom Exception Classes for the Resume Screener API
"""
from typing import Dict, Any
from fastapi import HTTPException


class ScreenerBaseException(Exception):
    """Base exception for the Resume Screener API"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ScreenerBaseException):
    """Raised when the screening request is missing a job description or resumes"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class ExtractionError(ScreenerBaseException):
    """Raised by a format handler when a document cannot be turned into text.

    Never leaves the extraction boundary: it is converted into a failed
    ExtractionResult there.
    """

    def __init__(self, message: str, filename: str = None, document_format: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if filename:
            details['filename'] = filename
        if document_format:
            details['document_format'] = document_format
        super().__init__(message, error_code="EXTRACTION_ERROR", details=details, **kwargs)


class ProcessingError(ScreenerBaseException):
    """Raised when scoring a batch fails unexpectedly"""

    def __init__(self, message: str, filename: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if filename:
            details['filename'] = filename
        super().__init__(message, error_code="PROCESSING_ERROR", details=details, **kwargs)


class ConfigurationError(ScreenerBaseException):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


# HTTP Exception Mapping
def map_to_http_exception(exc: ScreenerBaseException) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        ConfigurationError: 500,
        ProcessingError: 500,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


class ExceptionContext:
    """Context manager that logs an operation and wraps foreign exceptions"""

    def __init__(self, operation: str, logger=None, **context):
        self.operation = operation
        self.logger = logger
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            if self.logger:
                self.logger.error(
                    f"Operation failed: {self.operation} - {exc_val}",
                    extra={**self.context, "exception_type": exc_type.__name__}
                )

            # Re-raise custom exceptions as-is
            if isinstance(exc_val, ScreenerBaseException):
                return False

            wrapped_exc = ProcessingError(
                f"Processing error in {self.operation}: {str(exc_val)}",
                details=dict(self.context),
                cause=exc_val
            )
            raise wrapped_exc from exc_val
        else:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)

        return False

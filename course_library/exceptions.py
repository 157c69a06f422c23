"""
Custom Exception Classes for the Course Library API

This module defines the error hierarchy raised by the property mapping
and data shaping services. Configuration errors signal programming
mistakes found at startup; invalid field errors are client-facing and
map onto 400 responses.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes included in error responses."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    CONFIGURATION_DUPLICATE_MAPPING = "CONFIGURATION_DUPLICATE_MAPPING"
    CONFIGURATION_MAPPING_NOT_FOUND = "CONFIGURATION_MAPPING_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_INVALID_FIELD = "VALIDATION_INVALID_FIELD"
    VALIDATION_INVALID_SHAPING_FIELD = "VALIDATION_INVALID_SHAPING_FIELD"
    VALIDATION_INVALID_SORT_FIELD = "VALIDATION_INVALID_SORT_FIELD"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"


class CourseLibraryError(Exception):
    """Base exception class for all Course Library exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(CourseLibraryError):
    """Raised when the mapping configuration is inconsistent"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=error_code,
            details=details,
        )


class DuplicateMappingError(ConfigurationError):
    """Raised when a mapping table is registered twice for the same type pair"""

    def __init__(self, source: type, destination: type):
        super().__init__(
            message=f"A mapping from {source.__name__} to {destination.__name__} is already registered",
            error_code=ErrorCode.CONFIGURATION_DUPLICATE_MAPPING,
            details={"source": source.__name__, "destination": destination.__name__},
        )


class MappingNotFoundError(ConfigurationError):
    """Raised when no mapping table exists for a type pair"""

    def __init__(self, source: type, destination: type):
        super().__init__(
            message=f"Cannot find exact property mapping instance for <{source.__name__},{destination.__name__}>",
            error_code=ErrorCode.CONFIGURATION_MAPPING_NOT_FOUND,
            details={"source": source.__name__, "destination": destination.__name__},
        )


# ============================================================================
# Client Field Exceptions
# ============================================================================


class InvalidFieldError(CourseLibraryError):
    """Raised when a requested field does not exist on the target type"""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_INVALID_FIELD,
        details: dict[str, Any] | None = None,
    ):
        error_details = details or {}
        if field is not None:
            error_details["field"] = field
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            details=error_details,
        )


class InvalidShapingFieldError(InvalidFieldError):
    """Raised when a data shaping field does not exist on the resource"""

    def __init__(self, field: str, resource_type: type, message: str | None = None):
        super().__init__(
            message=message or f"Property '{field}' wasn't found on {resource_type.__name__}",
            field=field,
            error_code=ErrorCode.VALIDATION_INVALID_SHAPING_FIELD,
            details={"resource_type": resource_type.__name__},
        )


class InvalidSortFieldError(InvalidFieldError):
    """Raised when an orderBy clause cannot be mapped onto the entity"""

    def __init__(self, field: str, message: str | None = None):
        super().__init__(
            message=message or f"Key mapping for '{field}' is missing",
            field=field,
            error_code=ErrorCode.VALIDATION_INVALID_SORT_FIELD,
        )

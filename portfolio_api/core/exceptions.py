# portfolio_api/core/exceptions.py
"""
Core exceptions - standardized error handling for the portfolio API.

Every error raised by the store, the security layer and the content
services derives from PortfolioBaseException, so the HTTP layer can map
them to status codes in one place.
"""

from typing import Optional, Dict, Any, List


class PortfolioBaseException(Exception):
    """Base exception for all portfolio API errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class PortfolioValidationError(PortfolioBaseException):
    """Errors in input validation and data integrity"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize validation error.

        Args:
            message: Error description (safe to show to the caller)
            field: Field that failed validation
            value: Invalid value
            details: Additional validation context
        """
        super().__init__(message, details)
        self.field = field
        self.value = value

        if field:
            self.details['field'] = field
        if value is not None:
            self.details['value'] = str(value)


class NotFoundError(PortfolioBaseException):
    """A requested record does not exist"""

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        missing_ids: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.resource = resource
        self.missing_ids = missing_ids or []

        if resource:
            self.details['resource'] = resource
        if missing_ids:
            self.details['missing_ids'] = missing_ids


class PortfolioServiceError(PortfolioBaseException):
    """Errors in external service interactions"""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize service error.

        Args:
            message: Error description
            service_name: Name of the failing service
            operation: Operation that failed
            details: Additional service context
        """
        super().__init__(message, details)
        self.service_name = service_name
        self.operation = operation

        if service_name:
            self.details['service'] = service_name
        if operation:
            self.details['operation'] = operation


class StoreError(PortfolioServiceError):
    """Key-value store connectivity or command failure"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        operation: Optional[str] = None,
        backend: str = "store",
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize store error.

        Args:
            message: Error description
            key: Key that failed
            operation: Store operation that failed (read, write, delete)
            backend: Backend name (redis, memory)
            details: Additional store context
        """
        super().__init__(message, service_name=backend, operation=operation, details=details)
        self.key = key

        if key:
            self.details['key'] = key


class PortfolioConfigurationError(PortfolioBaseException):
    """Errors in system configuration and initialization"""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize configuration error.

        Args:
            message: Error description
            component: Component with configuration issue
            details: Additional configuration context
        """
        super().__init__(message, details)
        self.component = component

        if component:
            self.details['component'] = component


class PortfolioSecurityError(PortfolioBaseException):
    """Errors in security validation and authentication"""

    def __init__(
        self,
        message: str,
        error_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize security error.

        Args:
            message: Error description
            error_type: Type of security error (auth, token, expiration)
            details: Additional security context
        """
        super().__init__(message, details)
        self.error_type = error_type

        if error_type:
            self.details['error_type'] = error_type


# Convenience functions for creating common errors

def validation_error(message: str, field: str = None, value: Any = None) -> PortfolioValidationError:
    """Create a validation error with field context."""
    return PortfolioValidationError(message, field=field, value=value)


def not_found_error(message: str, resource: str, missing_ids: List[str] = None) -> NotFoundError:
    """Create a not-found error with resource context."""
    return NotFoundError(message, resource=resource, missing_ids=missing_ids)


def store_error(message: str, key: str = None, operation: str = None, backend: str = "store") -> StoreError:
    """Create a store error with key context."""
    return StoreError(message, key=key, operation=operation, backend=backend)


def config_error(message: str, component: str) -> PortfolioConfigurationError:
    """Create a configuration error with component context."""
    return PortfolioConfigurationError(message, component=component)


def security_error(message: str, error_type: str = None) -> PortfolioSecurityError:
    """Create a security error with its type (auth, token, expiration)."""
    return PortfolioSecurityError(message, error_type=error_type)


# Shorter names
ServiceError = PortfolioServiceError
ConfigurationError = PortfolioConfigurationError
SecurityError = PortfolioSecurityError
ValidationError = PortfolioValidationError

"""Custom exceptions for the SalesDesk application."""


class SalesDeskException(Exception):
    """Base exception for SalesDesk application."""

    pass


class ValidationError(SalesDeskException):
    """Raised when validation fails."""

    pass


class ConfigurationError(SalesDeskException):
    """Raised when configuration is invalid."""

    pass


class AuthenticationError(SalesDeskException):
    """Raised when authentication fails."""

    pass


class AuthorizationError(SalesDeskException):
    """Raised when an authenticated user lacks permission."""

    pass

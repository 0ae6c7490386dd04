"""
Custom exceptions for the application.
"""


class AiPathException(Exception):
    """Base exception for all AiPath application exceptions."""
    pass


class ValidationError(AiPathException):
    """Raised when validation fails."""
    pass


class NotFoundError(AiPathException):
    """Raised when a requested resource is not found."""
    pass


class AuthenticationError(AiPathException):
    """Raised when no authenticated user is present."""
    pass

"""Custom exceptions for the LeadRadar application."""

from __future__ import annotations


class LeadRadarException(Exception):
    """Base exception for LeadRadar application."""

    pass


class ValidationError(LeadRadarException):
    """Raised when caller input is malformed."""

    pass


class NotFoundError(LeadRadarException):
    """Raised when a resource is missing or not owned by the caller."""

    pass


class ConflictError(LeadRadarException):
    """Raised when a write collides with an existing row or a concurrent update."""

    def __init__(self, message: str, existing_id: str | None = None) -> None:
        super().__init__(message)
        self.existing_id = existing_id


class FetchError(LeadRadarException):
    """Raised when an upstream page fetch fails or violates fetch limits."""

    pass


class AIProviderError(LeadRadarException):
    """Raised when the live AI provider call fails or returns unusable output."""

    pass


class DatabaseError(LeadRadarException):
    """Raised when a database operation fails."""

    pass


class ServiceError(LeadRadarException):
    """Raised when a service operation fails."""

    pass


class ConfigurationError(LeadRadarException):
    """Raised when configuration is invalid."""

    pass


class AuthenticationError(LeadRadarException):
    """Raised when authentication fails."""

    pass


class AuthorizationError(LeadRadarException):
    """Raised when an authenticated user lacks a required scope."""

    pass

from __future__ import annotations


class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class AuthenticationError(AppError):
    """Login against the identity provider failed."""


class ApiError(AppError):
    """A backend request failed."""

    def __init__(self, message: str, status: int | None = None, server_message: str | None = None):
        super().__init__(message)
        self.status = status
        self.server_message = server_message


class AuthenticationExpired(ApiError):
    pass


class AuthorizationDenied(ApiError):
    pass


class OperationFailed(ApiError):
    pass

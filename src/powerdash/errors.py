from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when a password does not match the stored hash."""

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class AlreadyInitializedError(AccessDeniedError):
    """Raised when registration is attempted after the first user exists."""

    def __init__(self, message: str = "Registration is closed. An account already exists.") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ControllerError(Exception):
    """Base class for failures talking to the management controller.

    Messages carry diagnostic detail for the logs and are never shown to the user.
    """


class ControllerUnreachableError(ControllerError):
    """Raised on network errors or timeouts."""


class ControllerAuthFailedError(ControllerError):
    """Raised when the controller rejects the configured credentials (HTTP 401/403)."""


class ControllerProtocolError(ControllerError):
    """Raised when the controller answers with an unexpected status or body."""

"""
Domain exceptions raised by the service layer.

Services raise these instead of ``HTTPException`` so they stay usable
outside a request (for example from the command line scripts).  Each
exception carries the HTTP status the API layer should answer with;
``main.create_app`` registers a single handler that renders them as the
``{"success": false, "message": ...}`` envelope.
"""

from fastapi import status


class AddressBookError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(AddressBookError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class UserNotFound(AddressBookError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class InvalidOrExpiredToken(AddressBookError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid or expired token"


class EmailAlreadyRegistered(AddressBookError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Email is already registered"


class EmailDeliveryError(AddressBookError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Failed to send password reset email"


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""

"""
Domain error taxonomy.

Every error that may reach a client derives from ``PlacesError`` and
carries an HTTP-style ``status_code`` plus a human-readable ``message``.
The exception handlers in ``places_api.main`` render them as
``{"message": ...}``.  ``TokenInvalid`` and ``GeocodeFailed`` are
internal signals that services translate before they reach a route.
"""

from typing import Optional


class PlacesError(Exception):
    """Base class for errors rendered to API clients."""

    status_code: int = 500
    default_message: str = "An unknown error occurred!"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(PlacesError):
    status_code = 401
    default_message = "Authentication failed!"


class Forbidden(PlacesError):
    """Authenticated, but not the creator of the target place."""

    status_code = 401
    default_message = "You are not allowed to modify this place."


class NotFound(PlacesError):
    status_code = 404
    default_message = "Could not find the requested resource."


class UserNotFound(NotFound):
    default_message = "Could not find user for the provided id."


class InvalidInput(PlacesError):
    status_code = 422
    default_message = "Invalid inputs passed, please check your data."


class InvalidAddress(InvalidInput):
    default_message = "Could not find location for the specified address."


class EmailExists(InvalidInput):
    default_message = "User exists already, please login instead."


class UploadInvalid(InvalidInput):
    default_message = "Invalid image upload."


class InvalidCredentials(PlacesError):
    """Same message for unknown email and wrong password."""

    status_code = 401
    default_message = "Invalid credentials, could not log you in."


class PersistenceFailed(PlacesError):
    status_code = 500
    default_message = "Something went wrong, please try again later."


class TokenInvalid(Exception):
    """Raised when a session token has a bad signature, bad payload or is expired"""

    pass


class GeocodeFailed(Exception):
    """Raised when an address cannot be resolved to coordinates"""

    pass

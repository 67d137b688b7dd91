# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Domain errors.

Business code (store, reset lifecycle, mailer) raises these and never builds
HTTP responses itself.  ``main.py`` maps every :class:`ServiceError` onto the
``{"success": false, "message": ...}`` envelope using the class's
``status_code``.
"""

from fastapi import status


class ServiceError(Exception):
    """Base class – anything unexpected surfaces as a generic 500."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An error occurred. Please try again later."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InternalError(ServiceError):
    """Unexpected store failure."""


# -- Input -----------------------------------------------------------------


class InvalidInput(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class WeakPassword(InvalidInput):
    default_message = "Password must be at least 6 characters long"


# -- Accounts --------------------------------------------------------------


class InvalidCredentials(ServiceError):
    # Same message for unknown email and wrong password
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class Conflict(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class DuplicateEmail(Conflict):
    default_message = "User with this email already exists"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


# -- Reset secret ----------------------------------------------------------


class NoActiveSecret(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No reset code found. Please request a new password reset."


class SecretMismatch(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid reset code. Please check and try again."


class SecretExpired(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Reset code has expired. Please request a new password reset."


# -- Notification ----------------------------------------------------------


class DeliveryFailure(ServiceError):
    default_message = "Failed to send email. Please try again later."

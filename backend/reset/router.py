# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Password-reset endpoints.

``router`` carries the routes shared by both reset variants.  Exactly one of
``otp_router`` / ``token_router`` is mounted next to it, matching the
configured ``RESET_VARIANT``.

Security notes
--------------
* forgot-password answers unknown and known emails with the same 200 body,
  so the endpoint cannot be used to discover accounts.
* Neither the secret nor any hash is ever echoed back; the secret only
  travels by email.
"""

from typing import Optional, Tuple

from fastapi import APIRouter, Depends

from auth.schemas import MessageResponse
from core.errors import InvalidInput
from dependencies import get_lifecycle
from reset.lifecycle import ResetLifecycle
from reset.schemas import ForgotPasswordRequest, ResetPasswordRequest, VerifyOtpRequest

router = APIRouter(prefix="/api/password-reset", tags=["password-reset"])
otp_router = APIRouter(prefix="/api/password-reset", tags=["password-reset"])
token_router = APIRouter(prefix="/api/password-reset", tags=["password-reset"])

_FORGOT_OK = "If an account with that email exists, password reset instructions have been sent."


def _reset_credentials(body: ResetPasswordRequest, variant: str) -> Tuple[Optional[str], str]:
    """Return ``(identifier, secret)`` for the active variant or raise 400."""
    if variant == "token":
        if not body.token or not body.new_password:
            raise InvalidInput("Token and new password are required")
        return None, body.token
    if not body.email or not body.otp or not body.new_password:
        raise InvalidInput("Email, OTP, and new password are required")
    return body.email, body.otp


# ---------------------------------------------------------------------------
# POST /api/password-reset/forgot-password
# ---------------------------------------------------------------------------


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(body: ForgotPasswordRequest, lifecycle: ResetLifecycle = Depends(get_lifecycle)):
    """Issue a reset secret and email it."""
    lifecycle.issue(body.email)
    return MessageResponse(success=True, message=_FORGOT_OK)


# ---------------------------------------------------------------------------
# POST /api/password-reset/reset-password
# ---------------------------------------------------------------------------


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(body: ResetPasswordRequest, lifecycle: ResetLifecycle = Depends(get_lifecycle)):
    """Consume the secret and set the new password."""
    identifier, secret = _reset_credentials(body, lifecycle.strategy.name)
    lifecycle.consume(identifier, secret, body.new_password)
    return MessageResponse(success=True, message="Password has been reset successfully.")


# ---------------------------------------------------------------------------
# POST /api/password-reset/verify-otp          (OTP variant)
# ---------------------------------------------------------------------------


@otp_router.post("/verify-otp", response_model=MessageResponse)
def verify_otp(body: VerifyOtpRequest, lifecycle: ResetLifecycle = Depends(get_lifecycle)):
    """Check a code without consuming it."""
    if not body.email or not body.otp:
        raise InvalidInput("Email and OTP are required")
    lifecycle.verify(body.email, body.otp)
    return MessageResponse(success=True, message="OTP verified successfully")


# ---------------------------------------------------------------------------
# GET /api/password-reset/verify-token/{token}  (token variant)
# ---------------------------------------------------------------------------


@token_router.get("/verify-token/{token}", response_model=MessageResponse)
def verify_token(token: str, lifecycle: ResetLifecycle = Depends(get_lifecycle)):
    """Check a link token without consuming it."""
    lifecycle.verify(None, token)
    return MessageResponse(success=True, message="Reset token is valid")

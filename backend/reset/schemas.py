# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request models for the password-reset endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class VerifyOtpRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    # OTP variant sends email + otp, token variant sends token
    email: Optional[str] = None
    otp: Optional[str] = None
    token: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")

    model_config = {"populate_by_name": True}

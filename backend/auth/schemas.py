# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the account endpoints."""

from typing import Optional

from pydantic import BaseModel


# -- Requests --------------------------------------------------------------
# Fields are optional so that a missing value reaches the handler and gets
# the same 400 message as an empty one.


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# -- Responses -------------------------------------------------------------


class MessageResponse(BaseModel):
    success: bool
    message: str


class UserInfo(BaseModel):
    email: str

    model_config = {"from_attributes": True}


class UserResponse(MessageResponse):
    user: UserInfo

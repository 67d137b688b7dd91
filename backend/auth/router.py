# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Account endpoints – registration and login.

Security notes
--------------
* Login returns the *same* error message whether the email doesn't exist or
  the password is wrong.  This prevents user-enumeration attacks.
* Login only reports success; no session or token is issued.
"""

from fastapi import APIRouter, Depends, status

from auth.schemas import LoginRequest, RegisterRequest, UserInfo, UserResponse
from auth.store import CredentialStore
from core.errors import InvalidCredentials, InvalidInput
from dependencies import get_store

router = APIRouter(prefix="/api/user", tags=["user"])


# ---------------------------------------------------------------------------
# POST /api/user/register
# ---------------------------------------------------------------------------


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, store: CredentialStore = Depends(get_store)):
    """Create an account.  Validation lives in the credential store."""
    user = store.register(body.email, body.password)
    return UserResponse(
        success=True,
        message="User registered successfully",
        user=UserInfo.model_validate(user),
    )


# ---------------------------------------------------------------------------
# POST /api/user/login
# ---------------------------------------------------------------------------


@router.post("/login", response_model=UserResponse)
def login(body: LoginRequest, store: CredentialStore = Depends(get_store)):
    """Check an email/password pair."""
    if not body.email or not body.password:
        raise InvalidInput("Email and password are required")

    user = store.find_by_email(body.email)

    # Unified failure path – same message and the same hashing work whether
    # or not the email exists
    if not store.verify_password(user, body.password):
        raise InvalidCredentials()

    return UserResponse(
        success=True,
        message="Login successful",
        user=UserInfo.model_validate(user),
    )

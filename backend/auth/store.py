# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Credential store – the only code that reads or writes ``User`` rows.

Emails are normalized (trimmed, lower-cased) before every lookup and write,
so ``" Alice@Example.COM "`` and ``"alice@example.com"`` are the same
account.  The password hash is only ever replaced through
:meth:`CredentialStore.set_password` or :meth:`CredentialStore.register`.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core import security
from core.errors import DuplicateEmail, InvalidInput, WeakPassword
from core.logger import logger
from models.user import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    def __init__(self, db: Session, min_password_length: int = 6, hash_rounds: Optional[int] = None):
        self.db = db
        self.min_password_length = min_password_length
        # None → PASSWORD_HASH_ROUNDS from settings
        self.hash_rounds = hash_rounds

    # -- Password policy -----------------------------------------------------

    def check_password(self, plain: str) -> None:
        """
        Raise :class:`WeakPassword` if *plain* is below the minimum length,
        or :class:`InvalidInput` if it is longer than the hasher accepts.
        """
        if len(plain) < self.min_password_length:
            raise WeakPassword(
                f"Password must be at least {self.min_password_length} characters long"
            )
        if len(plain) > security.MAX_PASSWORD_LENGTH:
            raise InvalidInput(
                f"Password must be at most {security.MAX_PASSWORD_LENGTH} characters long"
            )

    # -- Writes --------------------------------------------------------------

    def register(self, email: Optional[str], password: Optional[str]) -> User:
        """
        Create an account.

        Raises InvalidInput (missing field), WeakPassword (too short) or
        DuplicateEmail (normalized email already registered).
        """
        if not email or not email.strip() or not password:
            raise InvalidInput("Email and password are required")
        self.check_password(password)

        email = normalize_email(email)
        if self.find_by_email(email):
            raise DuplicateEmail()

        user = User(email=email)
        self.set_password(user, password)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise DuplicateEmail()
        self.db.refresh(user)

        logger.info("Registered user id=%s", user.id)
        return user

    def set_password(self, user: User, plain: str) -> None:
        """Validate and re-hash.  Does not commit – call :meth:`save`."""
        self.check_password(plain)
        user.password_hash = security.hash_password(plain, rounds=self.hash_rounds)

    def save(self, user: User) -> None:
        self.db.add(user)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    # -- Reads ---------------------------------------------------------------

    def find_by_email(self, email: Optional[str]) -> Optional[User]:
        if not email:
            return None
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def find_by_secret(self, secret: Optional[str]) -> Optional[User]:
        """Exact match on the stored reset secret (token variant lookup)."""
        if not secret:
            return None
        return self.db.query(User).filter(User.reset_secret == secret).first()

    def verify_password(self, user: Optional[User], plain: str) -> bool:
        """
        Check *plain* against the user's hash.  With no user the check still
        runs against a dummy hash of the same cost and returns False, so an
        unknown email takes as long as a wrong password.
        """
        if user is None:
            security.verify_password(plain, security.dummy_hash(self.hash_rounds))
            return False
        return security.verify_password(plain, user.password_hash)

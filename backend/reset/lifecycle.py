# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Reset-secret lifecycle – "forgot password → verify → reset".

Per user record the secret moves through

    NoActiveSecret → SecretIssued → {Consumed, Expired, Overwritten} → NoActiveSecret

* ``issue``   generates a fresh secret, stores it with its expiry and emails
  it.  If the email cannot be sent the secret is cleared again, so an
  undelivered secret is never left live.
* ``verify``  checks a secret without consuming it.
* ``consume`` re-checks the secret, sets the new password and clears the
  secret.

Expiry is evaluated lazily: the first check at or after the expiry instant
clears the secret and reports it expired.  There is no cleanup sweep.

What kind of secret is used (6-digit OTP looked up by email, or a long hex
token that is its own lookup key) is decided once per deployment by the
strategy object.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from auth.store import CredentialStore
from core import security
from core.errors import (
    DeliveryFailure,
    InvalidInput,
    NoActiveSecret,
    NotFound,
    SecretExpired,
    SecretMismatch,
)
from core.logger import logger
from models.user import MAX_SECRET_LENGTH, User
from notify.mailer import Notifier


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class ResetStrategy:
    """
    How secrets are generated, looked up and delivered.

    Abstract: use :class:`OtpStrategy` or :class:`TokenStrategy`, each of
    which overrides ``generate``, ``locate`` and ``deliver``.
    """

    name = ""
    label = "reset code"

    def __init__(self, ttl_minutes: int):
        self.ttl = timedelta(minutes=ttl_minutes)

    @property
    def ttl_minutes(self) -> int:
        return int(self.ttl.total_seconds() // 60)

    def generate(self) -> str:
        raise NotImplementedError

    def locate(self, store: CredentialStore, identifier: Optional[str], secret: str) -> Optional[User]:
        raise NotImplementedError

    def deliver(self, notifier: Notifier, email: str, secret: str) -> None:
        raise NotImplementedError


class OtpStrategy(ResetStrategy):
    """6-digit numeric code, addressed by the account's email."""

    name = "otp"
    label = "OTP"

    def __init__(self, ttl_minutes: int = 10):
        super().__init__(ttl_minutes)

    def generate(self) -> str:
        return security.generate_otp()

    def locate(self, store, identifier, secret):
        # Codes are not globally unique, so the email picks the record
        return store.find_by_email(identifier)

    def deliver(self, notifier: Notifier, email: str, secret: str) -> None:
        notifier.send_otp(email, secret, self.ttl_minutes)


class TokenStrategy(ResetStrategy):
    """High-entropy hex token embedded in an emailed link."""

    name = "token"
    label = "reset token"

    def __init__(self, ttl_minutes: int = 60, nbytes: int = 32,
                 url_base: str = "http://localhost:3000/reset-password"):
        super().__init__(ttl_minutes)
        if nbytes < 32:
            raise ValueError("reset tokens need at least 32 random bytes")
        if nbytes * 2 > MAX_SECRET_LENGTH:
            raise ValueError(f"reset tokens are limited to {MAX_SECRET_LENGTH // 2} random bytes")
        self.nbytes = nbytes
        self.url_base = url_base.rstrip("/")

    def generate(self) -> str:
        return security.generate_token(self.nbytes)

    def locate(self, store, identifier, secret):
        return store.find_by_secret(secret)

    def build_url(self, token: str) -> str:
        return f"{self.url_base}/{token}"

    def deliver(self, notifier: Notifier, email: str, secret: str) -> None:
        notifier.send_reset_link(email, self.build_url(secret), self.ttl_minutes)


def build_strategy(config) -> ResetStrategy:
    """Pick the strategy named by ``config.reset_variant``."""
    if config.reset_variant == "otp":
        return OtpStrategy(ttl_minutes=config.otp_expire_minutes)
    if config.reset_variant == "token":
        return TokenStrategy(
            ttl_minutes=config.reset_token_expire_minutes,
            nbytes=config.reset_token_bytes,
            url_base=config.reset_url_base,
        )
    raise ValueError(f"Unknown reset variant: {config.reset_variant!r}")


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class ResetLifecycle:
    def __init__(
        self,
        store: CredentialStore,
        notifier: Notifier,
        strategy: ResetStrategy,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.notifier = notifier
        self.strategy = strategy
        self.clock = clock

    def issue(self, email: Optional[str]) -> None:
        """
        Generate, store and deliver a fresh secret for *email*.

        Unknown emails return normally, exactly like known ones.  A newer
        secret overwrites any previous one.

        Raises InvalidInput (no email) or DeliveryFailure (email not sent;
        the secret has been cleared again).  If the database also fails
        while clearing, DeliveryFailure is still raised and the error is
        logged; the undelivered secret then stays stored until it expires
        or is overwritten.
        """
        if not email or not email.strip():
            raise InvalidInput("Email is required")

        user = self.store.find_by_email(email)
        if user is None:
            logger.info("Password reset requested for an unknown account")
            return

        user_id = user.id
        secret = self.strategy.generate()
        user.reset_secret = secret
        user.reset_secret_expiry = self.clock() + self.strategy.ttl
        self.store.save(user)

        try:
            self.strategy.deliver(self.notifier, user.email, secret)
        except Exception as exc:
            self._rollback_undelivered(user, user_id)
            if isinstance(exc, DeliveryFailure):
                raise
            raise DeliveryFailure() from exc

        logger.info("Issued reset %s for user id=%s", self.strategy.label, user_id)

    def verify(self, identifier: Optional[str], secret: Optional[str]) -> User:
        """
        Check *secret* without consuming it.

        Raises NotFound, NoActiveSecret, SecretMismatch or SecretExpired, in
        that order of precedence.
        """
        return self._check(identifier, secret)

    def consume(self, identifier: Optional[str], secret: Optional[str],
                new_password: Optional[str]) -> User:
        """
        Check *secret* and, if valid, replace the password and clear the
        secret.  The password is validated before anything else so a weak
        password leaves both the password and the secret untouched.
        """
        if not new_password:
            raise InvalidInput("New password is required")
        self.store.check_password(new_password)

        user = self._check(identifier, secret)
        self.store.set_password(user, new_password)
        self._clear(user)
        self.store.save(user)

        logger.info("Password reset completed for user id=%s", user.id)
        return user

    # -- internals -----------------------------------------------------------

    def _check(self, identifier: Optional[str], secret: Optional[str]) -> User:
        label = self.strategy.label
        if not secret:
            raise InvalidInput(f"{_capitalize(label)} is required")

        user = self.strategy.locate(self.store, identifier, secret)
        if user is None:
            raise NotFound(self._not_found_message())

        if not user.reset_secret or user.reset_secret_expiry is None:
            raise NoActiveSecret(f"No {label} found. Please request a new password reset.")

        if not security.secrets_match(secret, user.reset_secret):
            raise SecretMismatch(f"Invalid {label}. Please check and try again.")

        if self.clock() >= _as_utc(user.reset_secret_expiry):
            self._clear(user)
            self.store.save(user)
            raise SecretExpired(f"{_capitalize(label)} has expired. Please request a new password reset.")

        return user

    def _not_found_message(self) -> str:
        if self.strategy.name == "token":
            return "Invalid or expired reset link."
        return "Invalid email address."

    def _rollback_undelivered(self, user: User, user_id: int) -> None:
        self._clear(user)
        try:
            self.store.save(user)
        except SQLAlchemyError:
            logger.exception("Could not clear undelivered reset %s for user id=%s",
                             self.strategy.label, user_id)
            return
        logger.warning("Reset %s for user id=%s rolled back after delivery failure",
                       self.strategy.label, user_id)

    @staticmethod
    def _clear(user: User) -> None:
        user.reset_secret = None
        user.reset_secret_expiry = None

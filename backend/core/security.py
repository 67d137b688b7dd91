# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives live here.  No other
module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (passlib pbkdf2_sha256)
2. Reset-secret generation                  (secrets – OS CSPRNG)
3. Constant-time secret comparison
"""

import secrets
from functools import lru_cache
from typing import Optional

from passlib.hash import pbkdf2_sha256 as _pbkdf2  # pure Python, no binary deps

from core.config import settings

# ---------------------------------------------------------------------------
# 1.  pbkdf2_sha256 – password hashing  (pure Python, no glibc constraint)
# ---------------------------------------------------------------------------
# passlib's pbkdf2_sha256 generates a fresh random salt per hash and embeds
# it, together with the round count, in the returned string.  The round count
# comes from PASSWORD_HASH_ROUNDS (600 000 by default).
# ---------------------------------------------------------------------------


# passlib refuses secrets over 4096 bytes (PasswordSizeError); 1024 characters
# stay under that even at four UTF-8 bytes each
MAX_PASSWORD_LENGTH = 1024


def hash_password(plain: str, rounds: Optional[int] = None) -> str:
    """
    Hash a plaintext password with PBKDF2-SHA256.

    Returns the full passlib hash string, e.g. ``"$pbkdf2-sha256$600000$..."``.
    """
    return _pbkdf2.using(rounds=rounds or settings.password_hash_rounds).hash(plain)


def verify_password(plain: str, stored_hash: str) -> bool:
    """
    Constant-time verification of a plaintext password against a
    pbkdf2_sha256 hash produced by :func:`hash_password`.

    A stored value that is not a pbkdf2_sha256 hash never matches.
    """
    try:
        return _pbkdf2.verify(plain, stored_hash)
    except ValueError:
        return False


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return hash_password(secrets.token_hex(16), rounds=rounds)


def dummy_hash(rounds: Optional[int] = None) -> str:
    """
    A throw-away hash with the configured cost, used to spend the same PBKDF2
    time on unknown emails as on real ones.  Computed once per round count.
    """
    return _dummy_hash(rounds or settings.password_hash_rounds)


# ---------------------------------------------------------------------------
# 2.  Reset secrets
# ---------------------------------------------------------------------------

OTP_LOW = 100_000
OTP_SPAN = 900_000  # "100000" .. "999999"


def generate_otp() -> str:
    """Uniformly random 6-digit code drawn from the OS CSPRNG."""
    return str(OTP_LOW + secrets.randbelow(OTP_SPAN))


def generate_token(nbytes: int = 32) -> str:
    """*nbytes* random bytes, hex-encoded (2 * nbytes characters)."""
    return secrets.token_hex(nbytes)


# ---------------------------------------------------------------------------
# 3.  Comparison
# ---------------------------------------------------------------------------


def secrets_match(provided: str, stored: str) -> bool:
    """Exact, constant-time string comparison."""
    return secrets.compare_digest(provided.encode("utf-8"), stored.encode("utf-8"))

# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""User ORM model."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from database import Base

# Width of reset_secret; hex tokens must fit (see reset.lifecycle.TokenStrategy)
MAX_SECRET_LENGTH = 128


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Always stored normalized (trimmed, lower-case) – see auth.store
    email = Column(String(255), unique=True, nullable=False, index=True)
    # passlib embeds the salt and round count in the hash string
    password_hash = Column(String(255), nullable=False)
    # OTP code or hex token; set and cleared together with the expiry
    reset_secret = Column(String(MAX_SECRET_LENGTH), nullable=True, index=True)
    reset_secret_expiry = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"

# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Bootstrap script – creates an account from the command line.

    python bin/create_user.py alice@example.com 's3cret!'

The account goes through the same credential store as POST
/api/user/register, so email normalization, the minimum password length and
the duplicate check all apply.  The database URL comes from etc/app.conf.
"""

import argparse
import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/create_user.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from auth.store import CredentialStore                            # noqa: E402
from core.config import settings                                  # noqa: E402
from core.errors import ServiceError                              # noqa: E402
from database import Base, create_db_engine, create_session_factory  # noqa: E402
import models.user                                                # noqa: F401, E402


def create_user(email: str, password: str, session_factory=None) -> int:
    """
    Register *email* and return a process exit code (0 on success).
    """
    engine = None
    if session_factory is None:
        engine = create_db_engine(settings.database_url)
        if settings.create_tables:
            Base.metadata.create_all(bind=engine)
        session_factory = create_session_factory(engine)

    db = session_factory()
    try:
        store = CredentialStore(db, min_password_length=settings.password_min_length)
        user = store.register(email, password)
        print(f"[create_user] User '{user.email}' created successfully.")
        return 0
    except ServiceError as exc:
        print(f"[create_user] {exc.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
        if engine is not None:
            engine.dispose()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create a password-reset service account.")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args(argv)
    return create_user(args.email, args.password)


if __name__ == "__main__":
    sys.exit(main())

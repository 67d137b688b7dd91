# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
FastAPI dependency providers.

Everything here reads objects that ``main.py`` puts on ``app.state`` at
start-up, so tests can swap any of them through ``app.dependency_overrides``.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from auth.store import CredentialStore
from database import get_db
from notify.mailer import Notifier
from reset.lifecycle import ResetLifecycle, ResetStrategy


def get_store(request: Request, db: Session = Depends(get_db)) -> CredentialStore:
    config = request.app.state.settings
    return CredentialStore(
        db,
        min_password_length=config.password_min_length,
        hash_rounds=config.password_hash_rounds,
    )


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_strategy(request: Request) -> ResetStrategy:
    return request.app.state.reset_strategy


def get_lifecycle(
    store: CredentialStore = Depends(get_store),
    notifier: Notifier = Depends(get_notifier),
    strategy: ResetStrategy = Depends(get_strategy),
) -> ResetLifecycle:
    return ResetLifecycle(store, notifier, strategy)

"""Tests for bin/create_user.py."""

import importlib.util
import unittest
from pathlib import Path

from auth.store import CredentialStore
from database import Base, create_db_engine, create_session_factory

_SCRIPT = Path(__file__).resolve().parents[2] / "bin" / "create_user.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("create_user_script", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestCreateUser(unittest.TestCase):
    def setUp(self):
        self.script = _load_script()
        self.engine = create_db_engine("sqlite://")
        Base.metadata.create_all(bind=self.engine)
        self.session_factory = create_session_factory(self.engine)

    def tearDown(self):
        self.engine.dispose()

    def test_creates_normalized_account(self):
        assert self.script.create_user(" Ops@Example.com ", "secret1", self.session_factory) == 0

        db = self.session_factory()
        try:
            store = CredentialStore(db)
            user = store.find_by_email("ops@example.com")
            assert user is not None
            assert store.verify_password(user, "secret1")
        finally:
            db.close()

    def test_duplicate_and_weak_password_fail(self):
        assert self.script.create_user("ops@example.com", "secret1", self.session_factory) == 0
        assert self.script.create_user("OPS@example.com", "secret1", self.session_factory) == 1
        assert self.script.create_user("new@example.com", "abc", self.session_factory) == 1

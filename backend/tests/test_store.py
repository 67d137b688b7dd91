"""Tests for auth.store.CredentialStore."""

import unittest
from unittest.mock import patch

from auth.store import CredentialStore, normalize_email
from core import security
from core.errors import DuplicateEmail, InvalidInput, WeakPassword
from fakes import make_session


class StoreTestCase(unittest.TestCase):
    def setUp(self):
        self.engine, self.db = make_session()
        self.store = CredentialStore(self.db, min_password_length=6)

    def tearDown(self):
        self.db.close()
        self.engine.dispose()


class TestNormalizeEmail(unittest.TestCase):
    def test_trims_and_lowercases(self):
        assert normalize_email("  Alice@Example.COM \n") == "alice@example.com"


class TestRegister(StoreTestCase):
    """Tests for CredentialStore.register()."""

    def test_register_normalizes_and_hashes(self):
        """Test that the stored record has a normalized email and a hash."""
        user = self.store.register(" A@B.com ", "secret1")

        assert user.id is not None
        assert user.email == "a@b.com"
        assert user.password_hash != "secret1"
        assert user.reset_secret is None
        assert user.reset_secret_expiry is None
        assert self.store.verify_password(user, "secret1")

    def test_duplicate_email_any_case(self):
        """Test that a case/whitespace variant of an existing email is rejected."""
        self.store.register("a@b.com", "secret1")
        with self.assertRaises(DuplicateEmail):
            self.store.register("  A@B.COM", "another1")

    def test_missing_fields(self):
        """Test InvalidInput for missing or blank fields."""
        for email, password in [(None, "secret1"), ("a@b.com", None), ("   ", "secret1"), ("a@b.com", "")]:
            with self.assertRaises(InvalidInput) as ctx:
                self.store.register(email, password)
            assert ctx.exception.message == "Email and password are required"

    def test_short_password(self):
        """Test that a 5-character password is refused and nothing is stored."""
        with self.assertRaises(WeakPassword) as ctx:
            self.store.register("a@b.com", "abcde")
        assert ctx.exception.message == "Password must be at least 6 characters long"
        assert self.store.find_by_email("a@b.com") is None

    def test_weak_password_is_invalid_input(self):
        """Test that WeakPassword is part of the InvalidInput family."""
        with self.assertRaises(InvalidInput):
            self.store.register("a@b.com", "abc")

    def test_exactly_minimum_length_is_accepted(self):
        user = self.store.register("a@b.com", "123456")
        assert user.email == "a@b.com"


class TestLookups(StoreTestCase):
    """Tests for find_by_email() / find_by_secret()."""

    def test_find_by_email_normalizes(self):
        self.store.register("a@b.com", "secret1")
        assert self.store.find_by_email("  A@b.COM ").email == "a@b.com"

    def test_find_by_email_absent(self):
        assert self.store.find_by_email("nobody@b.com") is None
        assert self.store.find_by_email(None) is None

    def test_find_by_secret(self):
        user = self.store.register("a@b.com", "secret1")
        user.reset_secret = "ab" * 32
        self.store.save(user)

        assert self.store.find_by_secret("ab" * 32).id == user.id
        assert self.store.find_by_secret("AB" * 32) is None

    def test_find_by_secret_empty_never_matches(self):
        self.store.register("a@b.com", "secret1")
        assert self.store.find_by_secret("") is None
        assert self.store.find_by_secret(None) is None


class TestPasswords(StoreTestCase):
    """Tests for set_password() / verify_password()."""

    def test_set_password_rehashes(self):
        user = self.store.register("a@b.com", "secret1")
        old_hash = user.password_hash

        self.store.set_password(user, "secret2")
        self.store.save(user)

        assert user.password_hash != old_hash
        assert self.store.verify_password(user, "secret2")
        assert not self.store.verify_password(user, "secret1")

    def test_set_password_rejects_short(self):
        user = self.store.register("a@b.com", "secret1")
        old_hash = user.password_hash

        with self.assertRaises(WeakPassword):
            self.store.set_password(user, "abc")
        assert user.password_hash == old_hash

    def test_custom_minimum_length(self):
        store = CredentialStore(self.db, min_password_length=10)
        with self.assertRaises(WeakPassword) as ctx:
            store.register("a@b.com", "secret12")
        assert "10 characters" in ctx.exception.message

    def test_overlong_password_rejected(self):
        """Test that a password the hasher would refuse is reported as bad input."""
        with self.assertRaises(InvalidInput) as ctx:
            self.store.register("a@b.com", "x" * (security.MAX_PASSWORD_LENGTH + 1))
        assert ctx.exception.message == "Password must be at most 1024 characters long"
        assert self.store.find_by_email("a@b.com") is None

        user = self.store.register("a@b.com", "é" * security.MAX_PASSWORD_LENGTH)
        assert self.store.verify_password(user, "é" * security.MAX_PASSWORD_LENGTH)

    def test_unknown_user_still_hashes(self):
        """Test that a missing account costs one PBKDF2 verification too."""
        with patch("core.security.verify_password", wraps=security.verify_password) as verify:
            assert self.store.verify_password(None, "secret1") is False
        verify.assert_called_once()
        assert verify.call_args.args[1].startswith("$pbkdf2-sha256$")

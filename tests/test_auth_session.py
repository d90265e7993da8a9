"""Tests for AuthSessionService: register, login, profile, password change and logout flows."""

import random
import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from pydantic import SecretStr

from mybank.core.errors import (
    AccountNotFoundError,
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    PasswordValidationError,
    StorageError,
    UnauthorizedError,
)
from mybank.core.security import PasswordHasher, TokenConfig, TokenIssuer, TokenVerifier
from mybank.models import Account, SessionToken
from mybank.repositories import AccountRepository, SessionTokenRepository
from mybank.schemas.auth import SessionClaims
from mybank.services.auth_session import (
    INITIAL_BALANCE_MAX,
    INITIAL_BALANCE_MIN,
    AuthSessionService,
)

from tests._db import make_session_factory

PASSWORD = "supersecret1"


class ServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine, factory = make_session_factory()
        self.db = factory()
        config = TokenConfig(secret=SecretStr("service-test-secret"), ttl=timedelta(hours=1))
        self.issuer = TokenIssuer(config)
        self.verifier = TokenVerifier(config)
        self.hasher = PasswordHasher(rounds=4)
        self.service = AuthSessionService(
            accounts=AccountRepository(self.db),
            token_audit=SessionTokenRepository(self.db),
            hasher=self.hasher,
            issuer=self.issuer,
            verifier=self.verifier,
            rng=random.Random(1234),
        )

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()

    def _register(self, email: str = "a@x.com", username: str = "alice") -> Account:
        return self.service.register(username, email, PASSWORD, "555")


class TestRegister(ServiceTestCase):
    def test_stores_hash_not_plaintext(self) -> None:
        account = self._register()
        self.assertNotEqual(account.password_hash, PASSWORD)
        self.assertTrue(self.hasher.verify(PASSWORD, account.password_hash))
        self.assertFalse(self.hasher.verify("supersecret2", account.password_hash))

    def test_balance_in_opening_range(self) -> None:
        for i in range(25):
            account = self._register(email=f"user{i}@x.com")
            self.assertGreaterEqual(account.balance, INITIAL_BALANCE_MIN)
            self.assertLess(account.balance, INITIAL_BALANCE_MAX)

    def test_balance_range_edges(self) -> None:
        rng = MagicMock()
        self.service._rng = rng
        rng.randrange.return_value = INITIAL_BALANCE_MAX - 1
        top = self._register(email="top@x.com")
        rng.randrange.return_value = INITIAL_BALANCE_MIN
        bottom = self._register(email="bottom@x.com")
        rng.randrange.assert_called_with(100_000, 1_000_000)
        self.assertEqual(top.balance, 999_999)
        self.assertEqual(bottom.balance, 100_000)

    def test_short_password_creates_nothing(self) -> None:
        with self.assertRaises(PasswordValidationError):
            self.service.register("alice", "a@x.com", "short1", "555")
        self.assertEqual(self.db.query(Account).count(), 0)

    def test_ten_characters_is_enough(self) -> None:
        account = self.service.register("alice", "a@x.com", "0123456789", None)
        self.assertIsNotNone(account.id)

    def test_duplicate_email_keeps_first_account(self) -> None:
        first = self._register()
        balance = first.balance
        with self.assertRaises(DuplicateEmailError):
            self.service.register("mallory", "a@x.com", "another-password", "666")
        self.db.expire_all()
        stored = self.db.query(Account).one()
        self.assertEqual(stored.username, "alice")
        self.assertEqual(stored.phone, "555")
        self.assertEqual(stored.balance, balance)
        self.assertTrue(self.hasher.verify(PASSWORD, stored.password_hash))

    def test_next_identifier_hint(self) -> None:
        self.assertEqual(self.service.next_identifier_hint(), 1)
        account = self._register()
        self.assertEqual(self.service.next_identifier_hint(), account.id + 1)


class TestLogin(ServiceTestCase):
    def test_success_issues_token_and_audit_row(self) -> None:
        account = self._register()
        issued = self.service.login("a@x.com", PASSWORD)
        self.assertEqual(issued.expires_at - issued.issued_at, timedelta(hours=1))
        claims = self.verifier.verify(issued.token_value)
        self.assertEqual(claims, SessionClaims(username="alice", role="Customer"))
        row = self.db.query(SessionToken).one()
        self.assertEqual(row.token_value, issued.token_value)
        self.assertEqual(row.account_id, account.id)

    def test_each_login_adds_a_row(self) -> None:
        self._register()
        self.service.login("a@x.com", PASSWORD)
        self.service.login("a@x.com", PASSWORD)
        self.assertEqual(self.db.query(SessionToken).count(), 2)

    def test_unknown_email_and_wrong_password_look_the_same(self) -> None:
        self._register()
        with self.assertRaises(InvalidCredentialsError) as unknown:
            self.service.login("nobody@x.com", PASSWORD)
        with self.assertRaises(InvalidCredentialsError) as wrong:
            self.service.login("a@x.com", "wrong-password")
        self.assertEqual(unknown.exception.message, wrong.exception.message)
        self.assertEqual(self.db.query(SessionToken).count(), 0)

    def test_audit_failure_still_returns_token(self) -> None:
        self._register()
        audit = MagicMock()
        audit.record.side_effect = StorageError("Database error.")
        self.service.token_audit = audit
        with self.assertLogs("mybank.services.auth_session", level="WARNING"):
            issued = self.service.login("a@x.com", PASSWORD)
        self.assertEqual(self.verifier.verify(issued.token_value).username, "alice")
        audit.record.assert_called_once()


class TestFetchProfile(ServiceTestCase):
    def test_valid_token_returns_account(self) -> None:
        account = self._register()
        issued = self.service.login("a@x.com", PASSWORD)
        profile = self.service.fetch_profile(issued.token_value)
        self.assertEqual(profile.id, account.id)

    def test_missing_token_is_unauthorized(self) -> None:
        for token in (None, ""):
            with self.assertRaises(UnauthorizedError):
                self.service.fetch_profile(token)

    def test_expired_token_is_unauthorized(self) -> None:
        self._register()
        claims = SessionClaims(username="alice", role="Customer")
        stale = self.issuer.issue(claims, now=datetime.now(UTC) - timedelta(hours=2))
        with self.assertRaises(UnauthorizedError):
            self.service.fetch_profile(stale.token_value)

    def test_corrupted_token_is_forbidden(self) -> None:
        self._register()
        issued = self.service.login("a@x.com", PASSWORD)
        with self.assertRaises(ForbiddenError):
            self.service.fetch_profile(issued.token_value[:-3] + "xyz")
        with self.assertRaises(ForbiddenError):
            self.service.fetch_profile("not-a-token")

    def test_deleted_account_is_not_found(self) -> None:
        claims = SessionClaims(username="ghost", role="Customer")
        issued = self.issuer.issue(claims)
        with self.assertRaises(AccountNotFoundError):
            self.service.fetch_profile(issued.token_value)


class TestChangePassword(ServiceTestCase):
    def test_new_password_replaces_old(self) -> None:
        account = self._register()
        before = (account.balance, account.email, account.username)
        issued = self.service.login("a@x.com", PASSWORD)

        self.service.change_password(issued.token_value, "brand-new-password")

        self.db.expire_all()
        stored = self.db.query(Account).one()
        self.assertFalse(self.hasher.verify(PASSWORD, stored.password_hash))
        self.assertTrue(self.hasher.verify("brand-new-password", stored.password_hash))
        self.assertEqual((stored.balance, stored.email, stored.username), before)
        with self.assertRaises(InvalidCredentialsError):
            self.service.login("a@x.com", PASSWORD)
        self.service.login("a@x.com", "brand-new-password")

    def test_old_token_stays_valid_after_change(self) -> None:
        self._register()
        issued = self.service.login("a@x.com", PASSWORD)
        self.service.change_password(issued.token_value, "brand-new-password")
        self.assertEqual(self.service.fetch_profile(issued.token_value).username, "alice")

    def test_short_new_password_leaves_hash(self) -> None:
        account = self._register()
        old_hash = account.password_hash
        issued = self.service.login("a@x.com", PASSWORD)
        with self.assertRaises(PasswordValidationError):
            self.service.change_password(issued.token_value, "short")
        self.db.expire_all()
        self.assertEqual(self.db.query(Account).one().password_hash, old_hash)

    def test_requires_valid_session(self) -> None:
        with self.assertRaises(UnauthorizedError):
            self.service.change_password(None, "brand-new-password")
        with self.assertRaises(ForbiddenError):
            self.service.change_password("bogus", "brand-new-password")


class TestLogout(ServiceTestCase):
    def test_returns_login_page_and_keeps_token_valid(self) -> None:
        self._register()
        issued = self.service.login("a@x.com", PASSWORD)
        self.assertEqual(self.service.logout(), "/index.html")
        self.assertEqual(self.service.fetch_profile(issued.token_value).username, "alice")


if __name__ == "__main__":
    unittest.main()

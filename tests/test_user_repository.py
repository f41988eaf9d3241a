"""Tests for user registration and the password reset token lifecycle."""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from addressbook.core.security import PASSWORD_TOO_LONG_MESSAGE, hash_password, verify_password
from addressbook.domain.exceptions import DuplicateRecordError, StoreError
from addressbook.domain.models import ErrorKind, User
from addressbook.infrastructure.repositories.user_repository import (
    INVALID_TOKEN_MESSAGE,
    UserRepository,
)


def make_user(email: str = "khantalvanshita@gmail.com") -> User:
    return User(name="Vanshita", email=email, password_hash=hash_password("s3cret!"), role="User")


class TestRegister:
    def test_register_returns_public_profile(self, user_repository):
        result = user_repository.register(make_user())

        assert result.success is True
        assert result.message == "User registered successfully"
        assert result.data.name == "Vanshita"
        assert result.data.email == "khantalvanshita@gmail.com"
        assert result.data.role == "User"
        assert not hasattr(result.data, "password_hash")

    def test_register_same_email_twice_is_duplicate(self, user_repository, persistence):
        first = user_repository.register(make_user())
        second = user_repository.register(make_user())

        assert first.success is True
        assert second.success is False
        assert second.error is ErrorKind.DUPLICATE_USER
        assert persistence.get_user_by_email("khantalvanshita@gmail.com").id is not None

    def test_unique_constraint_conflict_maps_to_duplicate(self):
        store = Mock()
        store.get_user_by_email.return_value = None
        store.insert_user.side_effect = DuplicateRecordError("UNIQUE constraint failed: users.email")
        repository = UserRepository(store)

        result = repository.register(make_user())

        assert result.error is ErrorKind.DUPLICATE_USER

    def test_store_fault_maps_to_internal_error(self):
        store = Mock()
        store.get_user_by_email.side_effect = StoreError("disk I/O error")
        repository = UserRepository(store)

        result = repository.register(make_user())

        assert result.success is False
        assert result.error is ErrorKind.INTERNAL_ERROR
        store.insert_user.assert_not_called()

    def test_constraint_other_than_unique_is_internal_error(self, user_repository):
        user = make_user()
        user.name = None

        result = user_repository.register(user)

        assert result.error is ErrorKind.INTERNAL_ERROR

    def test_get_by_email_returns_hash(self, user_repository):
        user_repository.register(make_user())

        user = user_repository.get_by_email("khantalvanshita@gmail.com")

        assert user is not None
        assert verify_password("s3cret!", user.password_hash)
        assert user_repository.get_by_email("nobody@example.com") is None


class TestPasswordResetToken:
    def test_unknown_email_is_not_found(self, user_repository):
        result = user_repository.generate_password_reset_token("ghost@example.com")

        assert result.success is False
        assert result.error is ErrorKind.NOT_FOUND

    def test_token_is_persisted_with_expiry(self, user_repository, persistence, clock):
        user_repository.register(make_user())

        result = user_repository.generate_password_reset_token("khantalvanshita@gmail.com")

        assert result.success is True
        token = result.data
        # token_urlsafe(32) encodes 256 bits in 43 characters
        assert len(token) >= 43
        stored = persistence.get_user_by_email("khantalvanshita@gmail.com")
        assert stored.reset_token == token
        assert stored.reset_token_expires_at == clock.now + timedelta(hours=1)

    def test_regenerating_replaces_token_and_extends_expiry(self, user_repository, persistence, clock):
        user_repository.register(make_user())
        first = user_repository.generate_password_reset_token("khantalvanshita@gmail.com").data
        clock.advance(timedelta(minutes=30))

        second = user_repository.generate_password_reset_token("khantalvanshita@gmail.com").data

        assert first != second
        stored = persistence.get_user_by_email("khantalvanshita@gmail.com")
        assert stored.reset_token == second
        assert stored.reset_token_expires_at == clock.now + timedelta(hours=1)
        assert user_repository.reset_password(first, "other").error is ErrorKind.INVALID_OR_EXPIRED_TOKEN

    def test_reset_password_succeeds_and_clears_token(self, user_repository, persistence):
        user_repository.register(make_user())
        token = user_repository.generate_password_reset_token("khantalvanshita@gmail.com").data

        result = user_repository.reset_password(token, "brand-new-pass")

        assert result.success is True
        stored = persistence.get_user_by_email("khantalvanshita@gmail.com")
        assert stored.reset_token is None
        assert stored.reset_token_expires_at is None
        assert verify_password("brand-new-pass", stored.password_hash)
        assert not verify_password("s3cret!", stored.password_hash)

    def test_token_cannot_be_reused(self, user_repository):
        user_repository.register(make_user())
        token = user_repository.generate_password_reset_token("khantalvanshita@gmail.com").data

        assert user_repository.reset_password(token, "first-change").success is True
        again = user_repository.reset_password(token, "second-change")

        assert again.success is False
        assert again.error is ErrorKind.INVALID_OR_EXPIRED_TOKEN

    def test_expired_token_fails_even_when_string_matches(self, user_repository, persistence, clock):
        user_repository.register(make_user())
        token = user_repository.generate_password_reset_token("khantalvanshita@gmail.com").data
        clock.advance(timedelta(hours=1))

        result = user_repository.reset_password(token, "too-late")

        assert result.error is ErrorKind.INVALID_OR_EXPIRED_TOKEN
        stored = persistence.get_user_by_email("khantalvanshita@gmail.com")
        # A failed attempt leaves the pending reset untouched.
        assert stored.reset_token == token
        assert verify_password("s3cret!", stored.password_hash)

    def test_overlong_new_password_is_validation_failure(self, user_repository, persistence):
        user_repository.register(make_user())
        token = user_repository.generate_password_reset_token("khantalvanshita@gmail.com").data

        result = user_repository.reset_password(token, "y" * 100)

        assert result.success is False
        assert result.error is ErrorKind.VALIDATION_FAILED
        assert result.message == PASSWORD_TOO_LONG_MESSAGE
        stored = persistence.get_user_by_email("khantalvanshita@gmail.com")
        assert stored.reset_token == token
        assert verify_password("s3cret!", stored.password_hash)
        assert user_repository.reset_password(token, "y" * 72).success is True

    def test_token_just_before_expiry_is_accepted(self, user_repository, clock):
        user_repository.register(make_user())
        token = user_repository.generate_password_reset_token("khantalvanshita@gmail.com").data
        clock.advance(timedelta(minutes=59, seconds=59))

        assert user_repository.reset_password(token, "just-in-time").success is True

    @pytest.mark.parametrize("token", ["wrong-token", ""])
    def test_wrong_and_expired_tokens_share_message(self, user_repository, clock, token):
        user_repository.register(make_user())
        valid = user_repository.generate_password_reset_token("khantalvanshita@gmail.com").data

        wrong = user_repository.reset_password(token, "nope")
        clock.advance(timedelta(hours=2))
        expired = user_repository.reset_password(valid, "nope")

        assert wrong.message == expired.message == INVALID_TOKEN_MESSAGE
        assert wrong.error is expired.error is ErrorKind.INVALID_OR_EXPIRED_TOKEN

    def test_tokens_are_independent_per_user(self, user_repository, persistence):
        user_repository.register(make_user("a@example.com"))
        user_repository.register(make_user("b@example.com"))
        token_a = user_repository.generate_password_reset_token("a@example.com").data
        token_b = user_repository.generate_password_reset_token("b@example.com").data

        assert token_a != token_b
        assert user_repository.reset_password(token_a, "new-a").success is True
        assert persistence.get_user_by_email("b@example.com").reset_token == token_b

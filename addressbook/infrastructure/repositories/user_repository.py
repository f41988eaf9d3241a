"""Repository for User persistence and the password reset lifecycle."""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ...core.security import hash_password
from ...domain.exceptions import DuplicateRecordError, StoreError
from ...domain.models import ErrorKind, OperationResult, User, UserProfile
from ...domain.ports.persistence import UserStore

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User already registered. Try with a different email."
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class UserRepository:
    """Repository for managing User entities on top of a user store."""

    def __init__(
        self,
        store: UserStore,
        reset_token_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.reset_token_ttl = reset_token_ttl
        self.clock = clock

    def register(self, user: User) -> OperationResult[UserProfile]:
        """
        Persist a new user whose password has already been hashed.

        Args:
            user: User entity carrying a password hash

        Returns:
            Result holding the public profile, or DUPLICATE_USER when the
            email is taken, or INTERNAL_ERROR on store failure
        """
        try:
            if self.store.get_user_by_email(user.email) is not None:
                return OperationResult.fail(ErrorKind.DUPLICATE_USER, DUPLICATE_USER_MESSAGE)
            created = self.store.insert_user(user)
        except DuplicateRecordError:
            # Lost a race with a concurrent registration; the unique constraint wins.
            return OperationResult.fail(ErrorKind.DUPLICATE_USER, DUPLICATE_USER_MESSAGE)
        except StoreError:
            logger.exception("Failed to register user %s", user.email)
            return OperationResult.fail(
                ErrorKind.INTERNAL_ERROR, "An error occurred while registering the user."
            )

        logger.info("Registered user id=%s", created.id)
        return OperationResult.ok("User registered successfully", created.to_profile())

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, including the password hash."""
        return self.store.get_user_by_email(email)

    def generate_password_reset_token(self, email: str) -> OperationResult[str]:
        """
        Issue a new password reset token for the user with this email.

        A pending token is replaced and its expiry extended.

        Args:
            email: User email

        Returns:
            Result holding the token, or NOT_FOUND if no user matches
        """
        try:
            user = self.store.get_user_by_email(email)
            if user is None:
                return OperationResult.fail(ErrorKind.NOT_FOUND, "User not found")

            token = secrets.token_urlsafe(32)
            user.set_reset_token(token, self.clock() + self.reset_token_ttl)
            self.store.update_user(user)
        except StoreError:
            logger.exception("Failed to issue password reset token")
            return OperationResult.fail(
                ErrorKind.INTERNAL_ERROR, "An error occurred while generating the reset token."
            )

        logger.info("Issued password reset token for user id=%s", user.id)
        return OperationResult.ok("Password reset token generated", token)

    def reset_password(self, token: str, new_password: str) -> OperationResult[None]:
        """
        Replace the password of the user holding a valid reset token.

        Args:
            token: Reset token previously issued
            new_password: Plain text password

        Returns:
            Success, INVALID_OR_EXPIRED_TOKEN for both unknown and expired
            tokens, or VALIDATION_FAILED if the password cannot be hashed
        """
        try:
            user = self.store.get_user_by_reset_token(token) if token else None
            if not self._is_token_valid(user, token):
                return OperationResult.fail(ErrorKind.INVALID_OR_EXPIRED_TOKEN, INVALID_TOKEN_MESSAGE)

            try:
                password_hash = hash_password(new_password)
            except ValueError as exc:
                # The token stays pending so the user can retry.
                return OperationResult.fail(ErrorKind.VALIDATION_FAILED, str(exc))

            user.password_hash = password_hash
            user.clear_reset_token()
            self.store.update_user(user)
        except StoreError:
            logger.exception("Failed to reset password")
            return OperationResult.fail(
                ErrorKind.INTERNAL_ERROR, "An error occurred while resetting the password."
            )

        logger.info("Password reset for user id=%s", user.id)
        return OperationResult.ok("Password has been reset successfully")

    def _is_token_valid(self, user: Optional[User], token: str) -> bool:
        if user is None or user.reset_token != token:
            return False
        if user.reset_token_expires_at is None:
            return False
        return user.reset_token_expires_at > self.clock()

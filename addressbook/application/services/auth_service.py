from __future__ import annotations

import logging
from typing import Optional

from ...core.security import hash_password, verify_password
from ...domain.models import USER_REGISTERED, ErrorKind, OperationResult, User, UserProfile
from ...domain.ports.notifications import Notifier
from ...infrastructure.repositories.user_repository import UserRepository
from ...services.email_service import EmailService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AuthService:
    """Coordinates registration, login and password reset on top of the user repository."""

    def __init__(
        self,
        user_repository: UserRepository,
        email_service: EmailService,
        *,
        frontend_base_url: str,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._users = user_repository
        self._email = email_service
        self._frontend_base_url = frontend_base_url
        self._notifier = notifier

    def register_user(
        self, name: str, email: str, password: str, role: str = "User"
    ) -> OperationResult[UserProfile]:
        try:
            password_hash = hash_password(password)
        except ValueError as exc:
            return OperationResult.fail(ErrorKind.VALIDATION_FAILED, str(exc))

        user = User(name=name, email=email, password_hash=password_hash, role=role)
        result = self._users.register(user)
        if result.success and self._notifier:
            self._notifier.publish(USER_REGISTERED, {"name": name, "email": email, "role": role})
        return result

    def login_user(self, email: str, password: str) -> OperationResult[UserProfile]:
        user = self._users.get_by_email(email)
        # Unknown email and wrong password are indistinguishable to the caller.
        if user is None or not verify_password(password, user.password_hash):
            return OperationResult.fail(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS_MESSAGE)
        return OperationResult.ok("Login successful", user.to_profile())

    def forgot_password(self, email: str) -> OperationResult[None]:
        issued = self._users.generate_password_reset_token(email)
        if not issued.success:
            return OperationResult.fail(issued.error, issued.message)

        ttl_minutes = int(self._users.reset_token_ttl.total_seconds() // 60)
        sent = self._email.send_password_reset_email(
            to_email=email,
            reset_token=issued.data,
            base_url=self._frontend_base_url,
            expires_in_minutes=ttl_minutes,
        )
        if not sent:
            logger.warning("Password reset email could not be delivered to %s", email)
            return OperationResult.fail(
                ErrorKind.INTERNAL_ERROR, "Unable to send the password reset email."
            )
        return OperationResult.ok("Password reset link has been sent to your email.")

    def reset_password(self, token: str, new_password: str) -> OperationResult[None]:
        return self._users.reset_password(token, new_password)

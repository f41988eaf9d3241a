"""Service for issuing JWT access tokens."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..domain.models import UserProfile


class TokenService:
    """Issues and decodes signed access tokens for authenticated users."""

    def __init__(
        self,
        jwt_secret: str,
        issuer: str,
        audience: str,
        jwt_algorithm: str = "HS256",
        jwt_expiration_minutes: int = 60,
    ):
        self.jwt_secret = jwt_secret
        self.issuer = issuer
        self.audience = audience
        self.jwt_algorithm = jwt_algorithm
        self.jwt_expiration_minutes = jwt_expiration_minutes

    def create_access_token(self, profile: UserProfile) -> str:
        """
        Create JWT token for a user profile.

        Args:
            profile: Public user profile

        Returns:
            JWT token string
        """
        now = datetime.now(tz=timezone.utc)
        payload = {
            "name": profile.name,
            "email": profile.email,
            "role": profile.role,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + timedelta(minutes=self.jwt_expiration_minutes),
        }

        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """
        Verify and decode JWT token.

        Args:
            token: JWT token string

        Returns:
            Decoded payload if valid, None otherwise
        """
        try:
            return jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
        except jwt.InvalidTokenError:
            return None

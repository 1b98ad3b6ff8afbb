"""
Token issuer — signs access tokens and mints refresh tokens.

Access tokens are HS256 JWTs with a fixed claim set. Refresh
tokens are opaque random strings; what makes them meaningful is
the RefreshToken row IdentityService stores for each one.
"""

import base64
import hashlib
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

import jwt

from finance_tracker.config import TokenConfig
from finance_tracker.errors import UnauthenticatedError

ALGORITHM = "HS256"

REFRESH_TOKEN_BYTES = 64

REQUIRED_CLAIMS = ["sub", "email", "iss", "aud", "iat", "exp"]


@dataclass(frozen=True)
class AccessTokenClaims:
    """The complete claim set of an access token. Nothing else is signed."""

    sub: uuid.UUID
    email: str
    iss: str
    aud: str
    iat: datetime
    exp: datetime

    def to_payload(self) -> dict:
        return {
            "sub": str(self.sub),
            "email": self.email,
            "iss": self.iss,
            "aud": self.aud,
            "iat": self.iat,
            "exp": self.exp,
        }

    @classmethod
    def from_payload(cls, payload: dict) -> "AccessTokenClaims":
        return cls(
            sub=uuid.UUID(payload["sub"]),
            email=payload["email"],
            iss=payload["iss"],
            aud=payload["aud"],
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    @property
    def account_id(self) -> uuid.UUID:
        return self.sub


class TokenIssuer:
    """
    Issues and verifies tokens with one immutable configuration.

    The configuration is validated when it is built, so an
    issuer that exists can always sign.
    """

    def __init__(self, config: TokenConfig):
        self.config = config

    @property
    def access_token_ttl_seconds(self) -> int:
        return int(self.config.access_token_ttl.total_seconds())

    def issue_access_token(self, account_id: uuid.UUID, email: str) -> str:
        """Sign an access token that expires access_token_ttl from now."""
        # Whole seconds, so the claims survive a round trip unchanged
        now = datetime.now(timezone.utc).replace(microsecond=0)
        claims = AccessTokenClaims(
            sub=account_id,
            email=email,
            iss=self.config.issuer,
            aud=self.config.audience,
            iat=now,
            exp=now + self.config.access_token_ttl,
        )
        return jwt.encode(
            claims.to_payload(), self.config.secret_key, algorithm=ALGORITHM
        )

    def decode_access_token(self, token: str) -> AccessTokenClaims:
        """
        Verify an access token and return its claims.

        Signature, issuer, audience and expiry are all checked with
        no clock-skew allowance. Any failure is UnauthenticatedError.
        """
        try:
            payload = jwt.decode(
                token,
                self.config.secret_key,
                algorithms=[ALGORITHM],
                audience=self.config.audience,
                issuer=self.config.issuer,
                leeway=0,
                options={"require": REQUIRED_CLAIMS},
            )
            return AccessTokenClaims.from_payload(payload)
        except jwt.ExpiredSignatureError as e:
            raise UnauthenticatedError("Token expired") from e
        except (jwt.InvalidTokenError, ValueError, TypeError, AttributeError) as e:
            raise UnauthenticatedError("Invalid token") from e

    @staticmethod
    def issue_refresh_token() -> str:
        """64 random bytes, base64 encoded. Carries no claims."""
        return base64.b64encode(
            secrets.token_bytes(REFRESH_TOKEN_BYTES)
        ).decode("ascii")

    @staticmethod
    def hash_refresh_token(token: str) -> str:
        """Storage key for a refresh token; the raw value is never persisted."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

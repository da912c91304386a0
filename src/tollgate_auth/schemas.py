"""Token schemas and data structures.

These are immutable data classes shared between the token engine and
its callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any

from tollgate_auth.exceptions import TokenConfigurationError, TokenError

MIN_SECRET_BYTES = 32

DEFAULT_ACCESS_TTL = timedelta(minutes=30)
DEFAULT_REFRESH_TTL = timedelta(days=7)
DEFAULT_HEADER_NAME = "Authorization"
DEFAULT_TOKEN_PREFIX = "Bearer "
DEFAULT_REFRESH_PATH = "/auth/refresh"

# Registered claims written by the engine, or checked by PyJWT on decode
RESERVED_CLAIMS = frozenset({"jti", "sub", "iat", "exp", "nbf", "aud", "iss"})

CLAIM_KEY_USERNAME = "username"
CLAIM_KEY_USER_ID = "id"


@dataclass(frozen=True)
class SigningKey:
    """HMAC key derived from the configured secret.

    Use ``SigningKey.from_secret`` to build one; it enforces the minimum
    key length required for HS256.
    """

    value: bytes = field(repr=False)

    @classmethod
    def from_secret(cls, secret: str | None) -> SigningKey:
        """Derive a signing key from a secret string.

        Raises
        ------
        TokenConfigurationError
            If the secret is missing, blank, or shorter than 32 UTF-8 bytes
        """
        if secret is None or not secret.strip():
            msg = "JWT secret key is not configured"
            raise TokenConfigurationError(msg)

        value = secret.encode("utf-8")
        if len(value) < MIN_SECRET_BYTES:
            msg = (
                f"JWT secret key must be at least {MIN_SECRET_BYTES} bytes "
                f"(UTF-8) for HS256, got {len(value)}"
            )
            raise TokenConfigurationError(msg)

        return cls(value=value)


@dataclass(frozen=True)
class TokenConfig:
    """Resolved token engine configuration.

    Attributes
    ----------
    secret
        Secret used to derive the signing key
    access_ttl
        Lifetime of access tokens
    refresh_ttl
        Lifetime of refresh tokens
    header_name
        HTTP header the request layer reads tokens from
    token_prefix
        Prefix stripped from raw tokens before verification
    refresh_path
        Path the request layer checks with refresh tokens instead of
        access tokens; the engine never branches on it
    """

    secret: str = field(repr=False)
    access_ttl: timedelta = DEFAULT_ACCESS_TTL
    refresh_ttl: timedelta = DEFAULT_REFRESH_TTL
    header_name: str = DEFAULT_HEADER_NAME
    token_prefix: str = DEFAULT_TOKEN_PREFIX
    refresh_path: str = DEFAULT_REFRESH_PATH

    def __post_init__(self) -> None:
        if self.access_ttl <= timedelta(0):
            msg = f"Access token TTL must be positive, got {self.access_ttl}"
            raise TokenConfigurationError(msg)
        if self.refresh_ttl <= timedelta(0):
            msg = f"Refresh token TTL must be positive, got {self.refresh_ttl}"
            raise TokenConfigurationError(msg)


@dataclass(frozen=True)
class ClaimSet:
    """Verified contents of a token.

    Attributes
    ----------
    token_id
        Unique identifier of the token (``jti``)
    subject
        Principal the token was issued for (``sub``)
    issued_at
        Issue timestamp, UTC
    expires_at
        Expiry timestamp, UTC
    claims
        Extra claims in issue order; empty for refresh tokens
    """

    token_id: str
    subject: str
    issued_at: datetime
    expires_at: datetime
    claims: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ClaimSet:
        """Build a claim set from a decoded JWT payload.

        Raises
        ------
        KeyError, TypeError, ValueError
            If registered claims are missing or have the wrong type
        """
        token_id = payload["jti"]
        subject = payload["sub"]
        if not isinstance(token_id, str) or not isinstance(subject, str):
            msg = "'jti' and 'sub' must be strings"
            raise TypeError(msg)

        return cls(
            token_id=token_id,
            subject=subject,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            claims={k: v for k, v in payload.items() if k not in RESERVED_CLAIMS},
        )

    @property
    def username(self) -> str | None:
        return self.claims.get(CLAIM_KEY_USERNAME)

    @property
    def user_id(self) -> Any:
        return self.claims.get(CLAIM_KEY_USER_ID)

    def get(self, key: str, default: Any = None) -> Any:
        """Return an extra claim, or ``default`` if it is absent."""
        return self.claims.get(key, default)

    def is_expired(self, leeway: timedelta = timedelta(0)) -> bool:
        """Check if the token has expired, allowing ``leeway`` of skew."""
        return datetime.now(tz=timezone.utc) > self.expires_at + leeway


@dataclass(frozen=True)
class TokenVerified:
    """Successful verification carrying the token's claims."""

    claims: ClaimSet
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class TokenRejected:
    """Failed verification carrying the classified error."""

    error: TokenError
    ok: bool = field(default=False, init=False)

    @property
    def reason(self) -> str:
        return self.error.reason


TokenResult = TokenVerified | TokenRejected

"""JWT token service.

Provides access/refresh token creation, verification and claim
extraction for stateless authentication.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar
from uuid import UUID, uuid4

import jwt

from tollgate_auth.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
)
from tollgate_auth.schemas import (
    CLAIM_KEY_USER_ID,
    CLAIM_KEY_USERNAME,
    RESERVED_CLAIMS,
    ClaimSet,
    SigningKey,
    TokenConfig,
    TokenRejected,
    TokenResult,
    TokenVerified,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived, carrying extra claims) and refresh
    tokens (long-lived, subject only). Holds nothing but immutable state,
    so a single instance can be shared across threads and requests.

    Examples
    --------
    >>> service = JWTService(TokenConfig(secret="a" * 32))
    >>> token = service.create_access_token("42", {"username": "alice"})
    >>> service.extract_subject("Bearer " + token)
    '42'
    """

    ALGORITHM = "HS256"
    CLOCK_SKEW = timedelta(seconds=60)

    def __init__(
        self,
        config: TokenConfig,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        config
            Resolved token configuration
        clock
            Source of the issue time (default: current UTC time).
            Verification always checks against the real current time.

        Raises
        ------
        TokenConfigurationError
            If the secret is missing, blank, or too short for HS256
        """
        self._config = config
        self._key = SigningKey.from_secret(config.secret)
        self._clock = clock or _utcnow

    @classmethod
    def from_secret(cls, secret: str, **overrides: Any) -> "JWTService":
        """Build a service from a secret and optional config overrides."""
        return cls(TokenConfig(secret=secret, **overrides))

    @property
    def config(self) -> TokenConfig:
        return self._config

    @property
    def header_name(self) -> str:
        return self._config.header_name

    @property
    def token_prefix(self) -> str:
        return self._config.token_prefix

    @property
    def refresh_path(self) -> str:
        return self._config.refresh_path

    @property
    def access_ttl(self) -> timedelta:
        return self._config.access_ttl

    @property
    def refresh_ttl(self) -> timedelta:
        return self._config.refresh_ttl

    # -- Issuing ---------------------------------------------------------

    def create_access_token(
        self,
        subject: Any,
        extra_claims: Mapping[str, Any] | None = None,
    ) -> str:
        """Create a short-lived access token.

        Parameters
        ----------
        subject
            Principal identifier; non-string ids are converted with ``str``
        extra_claims
            Additional claims to embed. Values must be JSON serialisable
            and keys must not collide with the registered claims
            ``jti``, ``sub``, ``iat``, ``exp``, ``nbf``, ``aud`` or ``iss``.

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(
            subject=subject,
            claims=extra_claims or {},
            expires_delta=self._config.access_ttl,
        )

    def create_user_access_token(
        self,
        user_id: Any,
        username: str,
        extra_claims: Mapping[str, Any] | None = None,
    ) -> str:
        """Create an access token for a user account.

        The subject is ``str(user_id)``; the token also carries the
        ``username`` and ``id`` claims.
        """
        if user_id is None:
            msg = "user_id cannot be None"
            raise ValueError(msg)

        extra = dict(extra_claims or {})
        clashing = {CLAIM_KEY_USERNAME, CLAIM_KEY_USER_ID}.intersection(extra)
        if clashing:
            msg = f"Claims set by the engine cannot be overridden: {sorted(clashing)}"
            raise ValueError(msg)

        claims = {
            CLAIM_KEY_USERNAME: username,
            CLAIM_KEY_USER_ID: str(user_id) if isinstance(user_id, UUID) else user_id,
            **extra,
        }
        return self.create_access_token(user_id, claims)

    def create_refresh_token(self, subject: Any) -> str:
        """Create a long-lived refresh token.

        Refresh tokens carry no extra claims and expire after the refresh
        TTL, not the access TTL.
        """
        return self._create_token(
            subject=subject,
            claims={},
            expires_delta=self._config.refresh_ttl,
        )

    # -- Verification ----------------------------------------------------

    def verify_token(self, raw: str | None) -> TokenResult:
        """Verify a token without raising.

        Strips the configured prefix when present, checks the signature and
        the expiry (with a 60 second clock-skew allowance) and classifies
        failures as expired or invalid. Expired tokens are logged at DEBUG,
        invalid ones at WARNING.
        """
        try:
            claims = self._decode(raw)
        except ExpiredTokenError as e:
            logger.debug("Token rejected as expired: %s", e.message)
            return TokenRejected(error=e)
        except InvalidTokenError as e:
            logger.warning("Token rejected as invalid: %s", e.message)
            return TokenRejected(error=e)

        return TokenVerified(claims=claims)

    def parse_token(self, raw: str | None) -> ClaimSet:
        """Verify and decode a token.

        Raises
        ------
        ExpiredTokenError
            If the signature is valid but the token has expired
        InvalidTokenError
            If the token is empty, malformed, or its signature is wrong
        """
        result = self.verify_token(raw)
        if isinstance(result, TokenRejected):
            raise result.error
        return result.claims

    def validate_token(
        self,
        raw: str | None,
        expected_subject: str | None = None,
    ) -> bool:
        """Check whether a token is valid.

        When ``expected_subject`` is given the token's subject must also
        equal it exactly. Never raises.
        """
        result = self.verify_token(raw)
        if isinstance(result, TokenRejected):
            return False

        if expected_subject is not None and result.claims.subject != expected_subject:
            logger.info(
                "Token subject mismatch: token_id=%s",
                result.claims.token_id,
            )
            return False

        return True

    # -- Claim extraction ------------------------------------------------

    def extract_claim(self, raw: str | None, selector: Callable[[ClaimSet], T]) -> T:
        """Verify a token and apply ``selector`` to its claims."""
        return selector(self.parse_token(raw))

    def extract_subject(self, raw: str | None) -> str:
        return self.extract_claim(raw, lambda c: c.subject)

    def extract_username(self, raw: str | None) -> str | None:
        return self.extract_claim(raw, lambda c: c.username)

    def extract_expiration(self, raw: str | None) -> datetime:
        return self.extract_claim(raw, lambda c: c.expires_at)

    def extract_token_id(self, raw: str | None) -> str:
        return self.extract_claim(raw, lambda c: c.token_id)

    # -- Internals -------------------------------------------------------

    def _create_token(
        self,
        subject: Any,
        claims: Mapping[str, Any],
        expires_delta: timedelta,
    ) -> str:
        """Create a signed token.

        Parameters
        ----------
        subject
            Principal identifier
        claims
            Extra claims, embedded in the given order
        expires_delta
            Time until token expires

        Returns
        -------
        The encoded JWT token string
        """
        if subject is None or not str(subject).strip():
            msg = "Token subject cannot be empty"
            raise ValueError(msg)

        reserved = RESERVED_CLAIMS.intersection(claims)
        if reserved:
            msg = f"Registered claims cannot be overridden: {sorted(reserved)}"
            raise ValueError(msg)

        # NumericDate has second resolution
        now = self._clock().replace(microsecond=0)

        payload: dict[str, Any] = {
            "jti": str(uuid4()),
            "sub": str(subject),
            "iat": now,
            "exp": now + expires_delta,
            **claims,
        }

        return jwt.encode(payload, self._key.value, algorithm=self.ALGORITHM)

    def _strip_prefix(self, raw: str) -> str:
        prefix = self._config.token_prefix
        if prefix and raw.startswith(prefix):
            return raw[len(prefix) :]
        return raw

    def _decode(self, raw: str | None) -> ClaimSet:
        if not isinstance(raw, str) or not raw:
            raise InvalidTokenError("Token is missing")

        token = self._strip_prefix(raw)
        if not token:
            raise InvalidTokenError("Token is missing")

        try:
            payload = jwt.decode(
                token,
                self._key.value,
                algorithms=[self.ALGORITHM],
                leeway=self.CLOCK_SKEW,
                options={"require": ["jti", "sub", "iat", "exp"]},
            )
            return ClaimSet.from_payload(payload)

        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e


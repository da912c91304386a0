"""Tollgate Auth - Stateless token authentication.

This package issues and verifies signed, time-bounded JWT access and
refresh tokens. It is independent of any configuration source or web
framework: callers hand it a resolved ``TokenConfig`` and use the
``JWTService`` operations per request.

Architecture:
    tollgate_auth/
    ├── services/           # Pure logic (JWT issue/verify)
    ├── schemas.py          # Data classes (config, key, claims, results)
    └── exceptions.py       # Auth exceptions

Usage:
    from tollgate_auth import JWTService, TokenConfig

    service = JWTService(TokenConfig(secret=secret))
    token = service.create_access_token("42", {"username": "alice"})
    if service.validate_token("Bearer " + token, "42"):
        ...
"""

from tollgate_auth.exceptions import (
    AuthError,
    ExpiredTokenError,
    InvalidTokenError,
    TokenConfigurationError,
    TokenError,
)
from tollgate_auth.schemas import (
    ClaimSet,
    SigningKey,
    TokenConfig,
    TokenRejected,
    TokenResult,
    TokenVerified,
)
from tollgate_auth.services import JWTService

__all__ = [
    # Services
    "JWTService",
    # Schemas
    "ClaimSet",
    "SigningKey",
    "TokenConfig",
    "TokenRejected",
    "TokenResult",
    "TokenVerified",
    # Exceptions
    "AuthError",
    "ExpiredTokenError",
    "InvalidTokenError",
    "TokenConfigurationError",
    "TokenError",
]

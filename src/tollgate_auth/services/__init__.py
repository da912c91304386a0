"""Authentication services.

Provides JWT token management.
"""

from tollgate_auth.services.jwt_service import JWTService

__all__ = [
    "JWTService",
]

"""Authentication exceptions.

These exceptions are raised by the tollgate_auth package and should be
caught and handled by the request layer (mapped to a startup failure or
a 401 response).
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class TokenConfigurationError(AuthError, ValueError):
    """Raised when the token engine is configured unsafely.

    Fatal: the engine refuses to be constructed, so a service with a
    missing or weak secret never starts serving traffic.
    """

    def __init__(self, message: str = "Invalid token configuration"):
        super().__init__(message)


class TokenError(AuthError):
    """Base exception for tokens that failed verification."""

    reason = "invalid"

    def __init__(self, message: str = "Token verification failed"):
        super().__init__(message)


class ExpiredTokenError(TokenError):
    """Raised when the signature is valid but the token has expired."""

    reason = "expired"

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class InvalidTokenError(TokenError):
    """Raised when a token is malformed, tampered with, or unusable."""

    reason = "invalid"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)

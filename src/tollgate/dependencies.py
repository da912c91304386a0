"""Dependency wiring for Tollgate entry points.

Builds the token engine from application settings so request handlers
and the CLI share one engine per process.
"""

import logging
from functools import lru_cache

from tollgate_auth import JWTService, TokenConfig
from tollgate_config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def token_config_from_settings(settings: Settings) -> TokenConfig:
    """
    Resolve the token engine configuration from application settings.

    Parameters
    ----------
    settings
        Loaded application settings

    Returns
    -------
    Immutable token configuration

    Raises
    ------
    TokenConfigurationError
        If a configured TTL is not positive
    """
    return TokenConfig(
        secret=settings.jwt_secret_key.get_secret_value(),
        access_ttl=settings.jwt_access_token_ttl,
        refresh_ttl=settings.jwt_refresh_token_ttl,
        header_name=settings.jwt_header,
        token_prefix=settings.jwt_token_prefix,
        refresh_path=settings.jwt_refresh_path,
    )


@lru_cache()
def get_jwt_service() -> JWTService:
    """
    Get the process-wide JWT service.

    Construction errors propagate so a misconfigured service fails to
    start instead of serving traffic with a weak key.

    Returns
    -------
    Configured JWTService instance
    """
    config = token_config_from_settings(get_settings())
    service = JWTService(config)

    logger.info(
        "JWT service initialised | prefix=%r | access_ttl=%s | refresh_ttl=%s",
        config.token_prefix,
        config.access_ttl,
        config.refresh_ttl,
    )
    return service


def clear_jwt_service_cache() -> None:
    """Clear the cached JWT service (useful for tests)."""
    get_jwt_service.cache_clear()

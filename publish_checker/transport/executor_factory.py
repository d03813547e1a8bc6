"""
Factory for creating GraphQL executors from configuration.
"""

import logging
import os

from publish_checker.config.checker_config import TransportSettings
from publish_checker.exceptions import ConfigError
from publish_checker.transport.http_executor import HttpQueryExecutor

logger = logging.getLogger(__name__)


def create_executor(
    settings: TransportSettings,
    endpoint: str | None = None,
    auth_token: str | None = None,
) -> HttpQueryExecutor:
    """
    Create an HTTP executor for the configured endpoint.

    Args:
        settings: Transport section of the checker configuration
        endpoint: Overrides the configured endpoint
        auth_token: Overrides the token read from the environment

    Returns:
        HttpQueryExecutor: Configured executor

    Raises:
        ConfigError: Endpoint or token missing
    """
    endpoint = endpoint or settings.endpoint
    if not endpoint:
        raise ConfigError("GraphQL endpoint not configured")

    token = auth_token or os.getenv(settings.auth_token_env)
    if not token:
        raise ConfigError(
            f"Auth token not found: {settings.auth_token_env}. "
            f"Set the environment variable or pass a token explicitly."
        )

    logger.info(f"Created HTTP executor for {endpoint} (timeout={settings.timeout_seconds}s)")
    return HttpQueryExecutor(endpoint=endpoint, auth_token=token, timeout=settings.timeout_seconds)

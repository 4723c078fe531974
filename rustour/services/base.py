"""
Base service classes and shared context.

The ServiceContext holds all shared state and dependencies that services need.
It is built once at process start and handed to every consumer explicitly,
so tests can swap in fakes without touching global state.
"""

import logging
from typing import Optional
from dataclasses import dataclass

import httpx

from ..config import Config, load_config
from ..transport import HttpTransport
from ..auth.token_store import TokenStore

logger = logging.getLogger(__name__)


def validate_base_url(base_url: str) -> str:
    """
    Check the configured API base URL.

    A malformed base URL is a configuration bug, not a runtime failure.

    Raises:
        ValueError: If the URL is not an absolute http(s) URL
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise ValueError(f"Invalid API base URL {base_url!r}: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"Invalid API base URL {base_url!r}: expected an absolute http(s) URL")
    return base_url


@dataclass
class ServiceContext:
    """
    Shared context for all services.

    Replaces a process-wide singleton with an explicit dependency container.
    """
    config: Config
    transport: HttpTransport
    token_store: TokenStore

    @classmethod
    def create(
        cls,
        config: Optional[Config] = None,
        transport: Optional[HttpTransport] = None,
        token_store: Optional[TokenStore] = None
    ) -> "ServiceContext":
        """
        Factory method to create a ServiceContext with all dependencies.

        Args:
            config: Optional config (loads from env if not provided)
            transport: Optional transport (built from config if not provided)
            token_store: Optional token store (built from config if not provided)

        Returns:
            Configured ServiceContext

        Raises:
            ValueError: If the configured base URL is malformed
        """
        cfg = config or load_config()
        validate_base_url(cfg.api_base_url)

        return cls(
            config=cfg,
            transport=transport or HttpTransport(cfg.transport),
            token_store=token_store or TokenStore.from_config(cfg.storage)
        )

    async def close(self):
        """Clean up resources."""
        await self.transport.close()


class BaseService:
    """
    Base class for all services.

    Each service receives the shared context and provides focused functionality.
    """

    def __init__(self, context: ServiceContext):
        self.context = context

    @property
    def config(self) -> Config:
        return self.context.config

    @property
    def transport(self) -> HttpTransport:
        return self.context.transport

    @property
    def token_store(self) -> TokenStore:
        return self.context.token_store

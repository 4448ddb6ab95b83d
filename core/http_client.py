"""
LivingApps HTTP Client Lifecycle.

One httpx.AsyncClient per process, opened in the FastAPI lifespan and
kept behind the LivingAppsService stored in app.state.
Routes reach it through core.dependencies, never through module globals.

Usage:
    # In main.py lifespan:
    async with create_http_client_context(app, context.config):
        yield

    # Outside a request (scripts, tests):
    async with HttpClientManager() as client:
        service = LivingAppsService(http_client=client)
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncGenerator, Optional

import httpx

from core.app_context import ConfigLoader
from core.livingapps import LivingAppsService

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

USER_AGENT = "kursverwaltung/1.0"


@dataclass(frozen=True)
class HttpClientSettings:
    """Timeouts and pool limits of the shared client."""

    timeout: float = 30.0
    max_connections: int = 20
    max_keepalive_connections: int = 10
    keepalive_expiry: float = 30.0

    @classmethod
    def from_config(cls, config: ConfigLoader) -> "HttpClientSettings":
        max_connections = config.get("livingapps.max_connections", 20)
        return cls(
            timeout=config.get("livingapps.timeout", 30.0),
            max_connections=max_connections,
            max_keepalive_connections=min(10, max_connections),
        )


class HttpClientManager:
    """
    Owns the shared httpx.AsyncClient.

    The dashboard fetches five collections at once, so the pool must allow
    at least five concurrent connections.

    Args:
        settings: Timeouts and pool limits; defaults if not provided.
    """

    def __init__(self, settings: Optional[HttpClientSettings] = None) -> None:
        self._settings = settings or HttpClientSettings()
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def settings(self) -> HttpClientSettings:
        return self._settings

    async def start(self) -> httpx.AsyncClient:
        """
        Create the client.

        Raises:
            RuntimeError: If the client is already started.
        """
        if self._client is not None:
            raise RuntimeError("HTTP client already started")

        settings = self._settings
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.timeout),
            limits=httpx.Limits(
                max_connections=settings.max_connections,
                max_keepalive_connections=settings.max_keepalive_connections,
                keepalive_expiry=settings.keepalive_expiry,
            ),
            headers={"User-Agent": USER_AGENT},
        )
        logger.info(
            f"HTTP client started (timeout={settings.timeout}s, "
            f"max_connections={settings.max_connections})"
        )
        return self._client

    async def stop(self) -> None:
        """Close the client; safe to call when not started."""
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("HTTP client closed")

    @property
    def client(self) -> httpx.AsyncClient:
        """
        The running client.

        Raises:
            RuntimeError: If the client is not started.
        """
        if self._client is None:
            raise RuntimeError(
                "HTTP client not started. Ensure lifespan context is properly configured."
            )
        return self._client

    @property
    def is_running(self) -> bool:
        return self._client is not None and not self._client.is_closed

    async def __aenter__(self) -> httpx.AsyncClient:
        return await self.start()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()


@asynccontextmanager
async def create_http_client_context(
    app: "FastAPI",
    config: ConfigLoader,
) -> AsyncGenerator[HttpClientManager, None]:
    """
    Lifespan helper: open the client and publish the LivingAppsService.

    Sets app.state.livingapps for the duration of the context and removes
    it afterwards.

    Args:
        app: FastAPI application instance.
        config: Loaded configuration (livingapps section).

    Yields:
        HttpClientManager instance.
    """
    manager = HttpClientManager(HttpClientSettings.from_config(config))

    try:
        client = await manager.start()
        app.state.livingapps = LivingAppsService(
            http_client=client,
            base_url=config.livingapps_base_url,
            timeout=manager.settings.timeout,
        )
        logger.info(f"LivingApps service bound to {config.livingapps_base_url}")
        yield manager
    finally:
        await manager.stop()
        if hasattr(app.state, "livingapps"):
            del app.state.livingapps


def get_livingapps_service_from_app(app: "FastAPI") -> LivingAppsService:
    """
    Shared LivingAppsService from app state.

    Raises:
        RuntimeError: If the lifespan has not opened a client.
    """
    if not hasattr(app.state, "livingapps"):
        raise RuntimeError(
            "LivingApps service not available. Ensure lifespan context is properly configured."
        )
    return app.state.livingapps

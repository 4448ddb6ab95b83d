"""
Shared fixtures for the framework tests.

Configuration fixtures run against a fixed set of environment variables;
the httpx fixtures replace the network with MagicMock/AsyncMock objects
shaped like httpx.Response and httpx.AsyncClient.
"""

import json
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.interface import IAppModule

TEST_ENV = {
    "SERVER_HOST": "127.0.0.1",
    "SERVER_PORT": "8000",
    "BASE_URL": "https://test.example.com",
    "APP_DEBUG": "true",
    "APP_LOG_LEVEL": "DEBUG",
    "LIVINGAPPS_BASE_URL": "https://la.test/rest",
    "LIVINGAPPS_TIMEOUT": "5",
}


# --- Configuration ---


@pytest.fixture
def mock_env_vars(monkeypatch) -> dict[str, str]:
    """TEST_ENV exported for the duration of the test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    return dict(TEST_ENV)


@pytest.fixture
def config_loader(mock_env_vars, tmp_path):
    """ConfigLoader over TEST_ENV, ignoring any .env in the checkout."""
    from core.app_context import ConfigLoader

    loader = ConfigLoader()
    loader.load(tmp_path / "none.env")
    return loader


@pytest.fixture
def app_context(mock_env_vars, tmp_path):
    from core.app_context import AppContext

    return AppContext(env_path=tmp_path / "none.env")


# --- Modules ---


class MockModule(IAppModule):
    """Records which lifecycle hooks were called."""

    def __init__(self, name: str = "mock_module"):
        self._name = name
        self._initialized = False
        self._shutdown = False

    def get_module_name(self) -> str:
        return self._name

    def on_entry(self, context) -> None:
        self._initialized = True

    def get_status(self) -> dict:
        return {"status": "active", "details": {"Name": self._name}}

    def on_shutdown(self) -> None:
        self._shutdown = True


@pytest.fixture
def mock_module() -> MockModule:
    return MockModule()


@pytest.fixture
def mock_module_factory() -> Callable[[str], MockModule]:
    """MockModule constructor, for tests needing several names."""
    return MockModule


# --- httpx ---


@pytest.fixture
def mock_httpx_response_factory() -> Callable[..., MagicMock]:
    """
    Build a response mock.

    json_data is also serialized into .text/.content unless text is given;
    raise_for_status_error makes raise_for_status() raise it.
    """
    def _build(
        status_code: int = 200,
        json_data: Any = None,
        text: str | None = None,
        raise_for_status_error: Exception | None = None,
    ) -> MagicMock:
        if text is None:
            text = "" if json_data is None else json.dumps(json_data)

        response = MagicMock(status_code=status_code, text=text, content=text.encode())
        response.json.return_value = json_data
        response.raise_for_status = MagicMock(side_effect=raise_for_status_error)
        return response

    return _build


@pytest.fixture
def mock_httpx_client_factory() -> Callable[..., MagicMock]:
    """
    Build an AsyncClient mock.

    LivingAppsService sends records traffic through client.request() and
    health checks through client.get().
    """
    def _build(
        response: MagicMock | None = None,
        get_response: MagicMock | None = None,
        side_effect: Any = None,
    ) -> MagicMock:
        client = MagicMock()
        client.request = AsyncMock(return_value=response, side_effect=side_effect)
        client.get = AsyncMock(return_value=get_response)
        client.aclose = AsyncMock()
        return client

    return _build


@pytest.fixture
def livingapps_record_factory() -> Callable[..., dict]:
    """Raw LivingApps record body as returned by the API."""
    def _build(fields: dict, created: str = "2024-01-01 10:00:00") -> dict:
        return {"createdat": created, "updatedat": created, "fields": fields}

    return _build

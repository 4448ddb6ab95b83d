"""
Unit Tests for Kursverwaltung Module.

Tests the KursverwaltungModule class that implements IAppModule interface.
"""

import pytest
from unittest.mock import MagicMock

from core.interface import IAppModule
from modules.kursverwaltung import KursverwaltungModule, create_module
from modules.kursverwaltung.routers import pages_router


@pytest.fixture
def kurs_module():
    """Create KursverwaltungModule instance for testing."""
    return KursverwaltungModule()


@pytest.fixture
def mock_context():
    """Create mock AppContext."""
    context = MagicMock()
    context.log_event = MagicMock()
    context.config.is_livingapps_configured.return_value = True
    return context


class TestKursverwaltungModuleInit:
    """Tests for KursverwaltungModule initialization."""

    def test_init_state(self, kurs_module):
        """Test initial state is correct."""
        assert kurs_module._context is None
        assert kurs_module.get_api_router() is None

    def test_get_module_name(self, kurs_module):
        """Test module name is returned correctly."""
        assert kurs_module.get_module_name() == "kursverwaltung"

    def test_create_module(self):
        """Test factory returns a module instance."""
        module = create_module()

        assert isinstance(module, KursverwaltungModule)
        assert isinstance(module, IAppModule)


class TestOnEntry:
    """Tests for on_entry method."""

    def test_on_entry_builds_api_router(self, kurs_module, mock_context):
        """Test on_entry sets context and prefixes the API router."""
        kurs_module.on_entry(mock_context)

        router = kurs_module.get_api_router()
        paths = {route.path for route in router.routes}
        assert kurs_module._context is mock_context
        assert "/kursverwaltung/dashboard" in paths
        assert "/kursverwaltung/{entity}" in paths

    def test_on_entry_logs_loaded_event(self, kurs_module, mock_context):
        """Test on_entry reports the module as loaded."""
        kurs_module.on_entry(mock_context)

        levels = [c.args[1] for c in mock_context.log_event.call_args_list]
        assert levels == ["KURSVERWALTUNG"]

    def test_on_entry_warns_without_base_url(self, kurs_module, mock_context):
        """Test on_entry warns when LIVINGAPPS_BASE_URL is not set."""
        mock_context.config.is_livingapps_configured.return_value = False

        kurs_module.on_entry(mock_context)

        first = mock_context.log_event.call_args_list[0]
        assert first.args == ("LIVINGAPPS_BASE_URL not set, using default", "WARNING")


class TestStatusAndShutdown:
    """Tests for status reporting and shutdown."""

    def test_page_router(self, kurs_module):
        """Test the page router is the dashboard router."""
        assert kurs_module.get_page_router() is pages_router

    def test_status_before_and_after_entry(self, kurs_module, mock_context):
        """Test status switches to active after on_entry."""
        assert kurs_module.get_status()["status"] == "initializing"

        kurs_module.on_entry(mock_context)
        status = kurs_module.get_status()

        assert status["status"] == "active"
        assert status["details"]["Apps"] == "5"
        assert status["details"]["Default Tab"] == "kurse"

    def test_on_shutdown(self, kurs_module, mock_context):
        """Test on_shutdown clears the context."""
        kurs_module.on_entry(mock_context)
        kurs_module.on_shutdown()

        assert kurs_module._context is None

"""
Unit Tests for core.interface module.

Tests the IAppModule contract: what is abstract and what the defaults do.
"""

import pytest
from fastapi import APIRouter

from core.interface import IAppModule


class MinimalModule(IAppModule):
    def get_module_name(self):
        return "minimal"

    def on_entry(self, context):
        self.context = context


class TestIAppModuleContract:
    """Tests for the abstract part of IAppModule."""

    def test_cannot_instantiate_directly(self):
        """Test IAppModule cannot be instantiated directly."""
        with pytest.raises(TypeError):
            IAppModule()

    def test_only_name_and_entry_are_abstract(self):
        """Test exactly get_module_name and on_entry must be implemented."""
        assert IAppModule.__abstractmethods__ == {"get_module_name", "on_entry"}

    def test_missing_on_entry_is_rejected(self):
        """Test a subclass without on_entry cannot be instantiated."""
        class NameOnly(IAppModule):
            def get_module_name(self):
                return "name-only"

        with pytest.raises(TypeError):
            NameOnly()


class TestIAppModuleDefaults:
    """Tests for the optional hooks."""

    def test_minimal_module_has_no_routers(self):
        """Test a module without routers mounts nothing."""
        module = MinimalModule()

        assert module.get_api_router() is None
        assert module.get_page_router() is None

    def test_default_status_is_active(self, app_context):
        """Test the default status report after on_entry."""
        module = MinimalModule()
        module.on_entry(app_context)

        assert module.context is app_context
        assert module.get_status() == {"status": "active", "details": {}}
        assert module.on_shutdown() is None

    def test_overridden_hooks(self):
        """Test routers and status reports supplied by a module are used."""
        api, pages = APIRouter(), APIRouter()

        class RoutedModule(MinimalModule):
            def get_api_router(self):
                return api

            def get_page_router(self):
                return pages

            def get_status(self):
                return {"status": "warning", "details": {"Reason": "offline"}}

        module = RoutedModule()

        assert module.get_api_router() is api
        assert module.get_page_router() is pages
        assert module.get_status()["details"] == {"Reason": "offline"}

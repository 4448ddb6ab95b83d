"""Framework kernel: configuration, module registry, HTTP client and app factory."""
from core.app_context import AppContext, ConfigLoader
from core.interface import IAppModule
from core.logging_config import setup_logging
from core.registry import ModuleLoader, ModuleRegistry
from core.server import create_base_app

__all__ = [
    "AppContext",
    "ConfigLoader",
    "IAppModule",
    "ModuleLoader",
    "ModuleRegistry",
    "create_base_app",
    "setup_logging",
]

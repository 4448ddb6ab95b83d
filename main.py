"""
Kursverwaltung - Entry Point.

ASGI application for uvicorn execution. Loads the configuration, sets up
logging, discovers the modules under modules/ and mounts their routers:
JSON APIs under /api, dashboard pages at the root.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000 --reload

Or run directly:
    python main.py
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

import uvicorn
from fastapi import FastAPI

from core.app_context import AppContext
from core.http_client import create_http_client_context
from core.logging_config import setup_logging
from core.registry import ModuleLoader, ModuleRegistry
from core.server import create_base_app

MODULES_DIR = Path(__file__).parent / "modules"

logger = logging.getLogger(__name__)


def create_registry(context: AppContext) -> ModuleRegistry:
    """Discover and register the modules under modules/."""
    registry = ModuleRegistry()
    registry.set_context(context)

    count = ModuleLoader(registry).load_from_directory(str(MODULES_DIR))
    context.log_event(f"Loaded {count} module(s) from {MODULES_DIR.name}/", "LOADER")

    return registry


def mount_module_routers(app: FastAPI, context: AppContext, registry: ModuleRegistry) -> None:
    """Include the API and page routers every registered module provides."""
    for module in registry.get_all_modules():
        name = module.get_module_name()

        api_router = module.get_api_router()
        if api_router is not None:
            app.include_router(api_router, prefix="/api")
            context.log_event(f"Mounted API of '{name}' under /api", "LOADER")

        page_router = module.get_page_router()
        if page_router is not None:
            app.include_router(page_router)
            context.log_event(f"Mounted pages of '{name}'", "LOADER")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the shared LivingApps client for the lifetime of the server and
    shut the modules down afterwards.
    """
    context: AppContext = app.state.context
    registry: ModuleRegistry | None = app.state.registry

    async with create_http_client_context(app, context.config):
        context.set_server_status(True)
        context.log_event("Kursverwaltung started", "SUCCESS")

        yield

        if registry:
            registry.shutdown_all()
        context.set_server_status(False)

    logger.info("Kursverwaltung stopped")


def build_app(context: AppContext) -> FastAPI:
    """Assemble the application for a loaded context."""
    registry = create_registry(context)
    app = create_base_app(context, registry)
    mount_module_routers(app, context, registry)
    app.router.lifespan_context = lifespan
    return app


# Module-level instance for uvicorn; logging is set up before any module loads
_context = AppContext()
setup_logging(_context.config.get("app.log_level", "INFO"))

app = build_app(_context)


def main() -> None:
    """Run the application directly with uvicorn."""
    server = _context.config.section("server")
    debug = _context.config.get("app.debug", False)

    options: dict[str, Any] = {
        "host": server.get("host", "127.0.0.1"),
        "port": server.get("port", 8000),
        "log_level": "warning",
        "access_log": False,
    }

    if debug:
        options["reload"] = True
        options["reload_excludes"] = ["logs/*", "**/__pycache__/*", "*.log"]
        uvicorn.run("main:app", **options)
    else:
        uvicorn.run(app, **options)


if __name__ == "__main__":
    main()

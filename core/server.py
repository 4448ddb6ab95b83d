"""
FastAPI Application Factory.

create_base_app() builds the bare application: CORS, security headers,
the LivingApps error handler and the framework routes (/, /health,
/api/status). Module routers are mounted afterwards by main.py.
"""

import logging
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from core.app_context import AppContext, ConfigLoader
from core.livingapps.exceptions import LivingAppsError

if TYPE_CHECKING:
    from core.registry import ModuleRegistry

_logger = logging.getLogger(__name__)

SERVICE_NAME = "Kursverwaltung"
HOME_PATH = "/kursverwaltung/"
STATUS_EVENT_LIMIT = 50

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}
HSTS_HEADER = "max-age=31536000; includeSubDomains"

DEBUG_ORIGINS = ("http://localhost:8000", "http://127.0.0.1:8000")


def allowed_origins(config: ConfigLoader) -> list[str]:
    """CORS origins: the public base URL plus localhost in debug mode."""
    origins = []
    base_url = config.get("server.base_url", "")
    if base_url:
        origins.append(base_url)
    if config.get("app.debug", False):
        origins.extend(DEBUG_ORIGINS)
    return origins


def create_base_app(
    context: AppContext,
    registry: "ModuleRegistry | None" = None,
    home_path: str = HOME_PATH,
) -> FastAPI:
    """
    Create the FastAPI application without module routes.

    Args:
        context: Application context; stored in app.state.context.
        registry: Module registry reported by /api/status.
        home_path: Redirect target of "/".

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title=SERVICE_NAME,
        description="Dashboard für Kurse, Dozenten, Teilnehmer, Räume und Anmeldungen",
        version="1.0.0",
    )
    app.state.context = context
    app.state.registry = registry

    origins = allowed_origins(context.config)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    if origins:
        _logger.info(f"CORS origins: {origins}")
    else:
        _logger.warning("No CORS origins configured, cross-origin requests are rejected")

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = HSTS_HEADER
        return response

    @app.exception_handler(LivingAppsError)
    async def livingapps_error_handler(request: Request, exc: LivingAppsError) -> JSONResponse:
        """Remote failures that no router handled surface as 502."""
        _logger.error(f"Unhandled LivingApps error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "LivingApps request failed"},
        )

    _register_core_routes(app, home_path)
    return app


def _status_report(context: AppContext, registry: "ModuleRegistry | None") -> dict[str, Any]:
    running, port = context.get_server_status()
    return {
        "server": {"running": running, "port": port, "uptime_seconds": context.uptime_seconds},
        "livingapps": {
            "base_url": context.config.livingapps_base_url,
            "configured": context.config.is_livingapps_configured(),
        },
        "modules": registry.get_statuses() if registry else {},
        "events": context.get_event_log(limit=STATUS_EVENT_LIMIT),
    }


def _register_core_routes(app: FastAPI, home_path: str) -> None:
    @app.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse(url=home_path)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok", "service": SERVICE_NAME}

    @app.get("/api/status")
    async def system_status(request: Request) -> dict[str, Any]:
        """Server state, module statuses and the recent event log."""
        return _status_report(request.app.state.context, request.app.state.registry)

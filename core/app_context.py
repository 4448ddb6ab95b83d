"""
Application Context.

Holds the configuration read from the environment (.env supported) and the
in-memory event log shown by /api/status. Every module receives the
context in on_entry().

Configuration sections:
    server:     host, port, base_url
    app:        debug, log_level
    livingapps: base_url, timeout, max_connections
"""
import logging
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_LIVINGAPPS_URL = "https://my.living-apps.de/rest"

# Event levels that map onto a logging level; anything else logs as INFO
_EVENT_LEVELS = {
    "DEBUG": logging.DEBUG,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _env_str(name: str, default: str) -> str:
    return os.getenv(name) or default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if not raw:
        return default
    return raw.strip().lower() in ("true", "1", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a number, using {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, using {default}")
        return default
    return value


@dataclass
class ConfigLoader:
    """Configuration loader from environment variables."""

    _config: Dict[str, Any] = field(default_factory=dict)

    def load(self, env_path: Optional[str] = None) -> None:
        """
        Load configuration, reading a .env file first if one exists.

        Variables already set in the environment win over the file.

        Args:
            env_path: Explicit .env path; defaults to the project root .env.
        """
        env_file = Path(env_path) if env_path else Path(__file__).parent.parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        self._config = {
            "server": {
                "host": _env_str("SERVER_HOST", "127.0.0.1"),
                "port": _env_int("SERVER_PORT", 8000),
                "base_url": os.getenv("BASE_URL", ""),
            },
            "app": {
                "debug": _env_bool("APP_DEBUG", False),
                "log_level": _env_str("APP_LOG_LEVEL", "INFO").upper(),
            },
            "livingapps": {
                "base_url": _env_str("LIVINGAPPS_BASE_URL", DEFAULT_LIVINGAPPS_URL).rstrip("/"),
                "timeout": _env_float("LIVINGAPPS_TIMEOUT", 30.0),
                "max_connections": _env_int("LIVINGAPPS_MAX_CONNECTIONS", 20),
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key (e.g. "livingapps.timeout")."""
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def section(self, name: str) -> Dict[str, Any]:
        """Copy of one configuration section (empty if unknown)."""
        return dict(self._config.get(name, {}))

    @property
    def livingapps_base_url(self) -> str:
        return self.get("livingapps.base_url", DEFAULT_LIVINGAPPS_URL)

    def is_livingapps_configured(self) -> bool:
        """Whether LIVINGAPPS_BASE_URL is set explicitly rather than defaulted."""
        return bool(os.getenv("LIVINGAPPS_BASE_URL"))


@dataclass(frozen=True)
class EventLogEntry:
    """One line of the status event log."""

    timestamp: datetime
    level: str
    message: str

    def format(self) -> str:
        return f"[{self.timestamp:%H:%M:%S}] [{self.level}] {self.message}"


class AppContext:
    """
    Shared state handed to every module.

    Args:
        env_path: Optional .env file to load instead of the project one.
        max_log_entries: Number of events kept for /api/status.
    """

    def __init__(self, env_path: Optional[str] = None, max_log_entries: int = 500) -> None:
        self._config_loader = ConfigLoader()
        self._config_loader.load(env_path)

        self._events: Deque[EventLogEntry] = deque(maxlen=max_log_entries)

        self._server_running = False
        self._server_port: int = self._config_loader.get("server.port", 8000)
        self._started_at: Optional[datetime] = None

    @property
    def config(self) -> ConfigLoader:
        """Access the configuration loader."""
        return self._config_loader

    def log_event(self, message: str, level: str = "INFO") -> None:
        """
        Record an event for the status page and forward it to logging.

        Args:
            message: Event text.
            level: Free-form tag such as "SUCCESS" or a module name;
                DEBUG/WARNING/ERROR also set the logging level.
        """
        level = level.upper()
        self._events.append(EventLogEntry(datetime.now(), level, message))
        logger.log(_EVENT_LEVELS.get(level, logging.INFO), f"[{level}] {message}")

    def get_event_log(self, limit: Optional[int] = None) -> List[str]:
        """Formatted events, oldest first; the last `limit` only if given."""
        entries = [entry.format() for entry in self._events]
        return entries[-limit:] if limit else entries

    def set_server_status(self, running: bool, port: Optional[int] = None) -> None:
        """Update server status; port defaults to the configured one."""
        self._server_running = running
        if port is not None:
            self._server_port = port
        self._started_at = datetime.now() if running else None

    def get_server_status(self) -> tuple[bool, int]:
        """Get (running, port)."""
        return (self._server_running, self._server_port)

    @property
    def uptime_seconds(self) -> Optional[float]:
        """Seconds since the server was marked running, or None."""
        if self._started_at is None:
            return None
        return (datetime.now() - self._started_at).total_seconds()

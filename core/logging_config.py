"""
Logging Configuration Module.

Root logger with a rotating file under logs/ and a console handler, both
formatted by SensitiveDataFormatter. LivingApps error bodies end up in the
log verbatim, so credentials and the personal data of Dozenten and
Teilnehmer (e-mail, phone, birth date) are masked before anything is written.
"""

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


# --- Constants ---
LOG_FILENAME = "kursverwaltung.log"
MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("watchfiles", "httpx", "httpcore", "uvicorn", "uvicorn.access", "uvicorn.error")

_CREDENTIAL_KEYS = (
    r"password|secret|token|access_token|api_key|apikey|"
    r"authorization|cookie|set-cookie|credential|session"
)
_PERSONAL_KEYS = r"telefon|phone|geburtsdatum"

# (pattern, replacement), applied in order
SENSITIVE_PATTERNS: list[tuple[re.Pattern, str]] = [
    # password=xxx, token: 'xxx'
    (
        re.compile(
            rf"({_CREDENTIAL_KEYS})\s*[:=]\s*['\"]?([^'\"\s&;]+)['\"]?",
            re.IGNORECASE,
        ),
        r"\1=***",
    ),
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-_\.]+)", re.IGNORECASE), r"\1***"),
    # ?token=xxx&...
    (
        re.compile(
            r"([?&])(token|key|secret|password|api_key|apikey|access_token|session)=([^&\s]+)",
            re.IGNORECASE,
        ),
        r"\1\2=***",
    ),
    # 'telefon': '+49 ...' in dict reprs and JSON bodies
    (
        re.compile(rf"(['\"]?(?:{_PERSONAL_KEYS})['\"]?\s*:\s*)(['\"])[^'\"]*\2", re.IGNORECASE),
        r"\1\2***\2",
    ),
    # telefon=+49123
    (re.compile(rf"\b({_PERSONAL_KEYS})=(\S+)", re.IGNORECASE), r"\1=***"),
    # first 2 chars + *** + @domain
    (
        re.compile(r"\b([a-zA-Z0-9._%+-]{2})([a-zA-Z0-9._%+-]*)(@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b"),
        r"\1***\3",
    ),
]


def mask_sensitive(text: str) -> str:
    """Apply every SENSITIVE_PATTERNS substitution to text."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SensitiveDataFormatter(logging.Formatter):
    """
    Log formatter that masks sensitive data in the final line.

    Masks:
    - Passwords, tokens, secrets, session cookies
    - Authorization headers (Bearer tokens)
    - Sensitive URL query parameters
    - Phone numbers and birth dates by key
    - E-mail addresses (partial masking)
    """

    def format(self, record: logging.LogRecord) -> str:
        return mask_sensitive(super().format(record))


def get_log_path() -> Path:
    """Path of the log file; creates the logs directory."""
    logs_dir = Path(__file__).resolve().parent.parent / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir / LOG_FILENAME


def _resolve_level(log_level: int | str) -> int:
    """Level number for an int or a level name; unknown names give INFO."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: int | str = logging.INFO) -> None:
    """
    Configure application logging with rotation.

    Replaces all handlers of the root logger, so calling it twice does not
    duplicate output.

    Args:
        log_level: Level as int or name, e.g. "DEBUG" (default: INFO).
    """
    level = _resolve_level(log_level)
    log_file_path = get_log_path()
    formatter = SensitiveDataFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = RotatingFileHandler(
        filename=str(log_file_path),
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler(sys.stdout)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in (file_handler, console_handler):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(f"Logging initialized. Log file: {log_file_path}")

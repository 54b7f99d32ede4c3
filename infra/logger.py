from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, List, MutableMapping, Tuple, Union

from infra.paths import DEFAULT_LOGFILE

# Centralized logging setup for the game server.
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"
JSON_FORMAT = (
    '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","line":%(lineno)d,"msg":"%(message)s"}'
)

# Third-party loggers that are too chatty at INFO.
QUIET_LOGGERS = ("uvicorn.access", "websockets")


def _build_handlers(formatter: logging.Formatter, logfile: str | Path | None) -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    handlers: List[logging.Handler] = [console]

    if logfile is not None:
        log_path = Path(logfile)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(
    level: Union[str, int] = "INFO",
    *,
    json: bool = False,
    logfile: str | Path | None = DEFAULT_LOGFILE,
) -> None:
    """
    Route every logger (ours, uvicorn's, fastapi's) through the root logger.

    Args:
        level: Logging level name or int (e.g., "DEBUG", logging.INFO).
        json: Emit JSON lines when True; otherwise a human-friendly format.
        logfile: File to append to; None keeps output on stdout only.
    """
    if isinstance(level, str):
        level = level.upper()
    formatter = logging.Formatter(JSON_FORMAT if json else DEFAULT_FORMAT)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in _build_handlers(formatter, logfile):
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger; configure_logging() should be called once on startup."""
    return logging.getLogger(name)


class RoomLogAdapter(logging.LoggerAdapter):
    """Prefix every record with the room code, e.g. "[ABCD] round 3 resolved"."""

    def __init__(self, logger: logging.Logger, room_code: str):
        super().__init__(logger, {"room_code": room_code})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['room_code']}] {msg}", kwargs


# Usage: from infra.logger import configure_logging, get_logger; configure_logging("DEBUG", logfile=None); log = get_logger(__name__); log.info("ready")

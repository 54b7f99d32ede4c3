"""Process settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from infra.paths import DEFAULT_LOGFILE, ENV_FILE

ENV_PREFIX = "STANDOFF_"

DEFAULT_RESOLUTION_DELAY_MS = 500


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """
    Server settings.

    Attributes:
        host: Interface to bind (all interfaces so LAN phones can connect)
        port: TCP port
        log_level: Root logging level name
        log_json: Emit JSON log lines
        logfile: Log file path, or None for stdout only
        resolution_delay_ms: Pause after a round resolves, for animations
    """
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    log_json: bool = False
    logfile: Optional[Path] = DEFAULT_LOGFILE
    resolution_delay_ms: int = DEFAULT_RESOLUTION_DELAY_MS


def load_settings(environ: Optional[Mapping[str, str]] = None, env_file: Optional[Path] = ENV_FILE) -> Settings:
    """
    Build Settings from STANDOFF_* variables.

    Args:
        environ: Mapping to read instead of os.environ (tests)
        env_file: .env file loaded into os.environ first; None to skip

    Raises:
        ValueError: If a numeric variable does not parse
    """
    if env_file is not None and environ is None:
        load_dotenv(env_file)
    env = os.environ if environ is None else environ

    def get(name: str) -> Optional[str]:
        return env.get(ENV_PREFIX + name)

    defaults = Settings()

    logfile: Optional[Path] = defaults.logfile
    raw_logfile = get("LOG_FILE")
    if raw_logfile is not None:
        logfile = Path(raw_logfile) if raw_logfile.strip() else None

    return Settings(
        host=get("HOST") or defaults.host,
        port=int(get("PORT") or defaults.port),
        log_level=(get("LOG_LEVEL") or defaults.log_level).upper(),
        log_json=_as_bool(get("LOG_JSON") or "false"),
        logfile=logfile,
        resolution_delay_ms=int(get("RESOLUTION_DELAY_MS") or defaults.resolution_delay_ms),
    )

from __future__ import annotations

from pathlib import Path

# Resolved project root (parent directory of this infra package).
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Runtime output (logs) lives under storage/, which is never committed.
STORAGE_DIR = PROJECT_ROOT / "storage"
LOG_DIR = STORAGE_DIR / "logs"
DEFAULT_LOGFILE = LOG_DIR / "server.log"
ENV_FILE = PROJECT_ROOT / ".env"

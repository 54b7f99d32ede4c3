from .paths import PROJECT_ROOT, STORAGE_DIR, LOG_DIR, DEFAULT_LOGFILE, ENV_FILE
from .logger import configure_logging, get_logger, RoomLogAdapter
from .settings import Settings, load_settings

__all__ = [
    "PROJECT_ROOT",
    "STORAGE_DIR",
    "LOG_DIR",
    "DEFAULT_LOGFILE",
    "ENV_FILE",
    "configure_logging",
    "get_logger",
    "RoomLogAdapter",
    "Settings",
    "load_settings",
]

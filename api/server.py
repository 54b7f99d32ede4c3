"""Run the game server with uvicorn."""

from __future__ import annotations

import uvicorn

from infra.logger import configure_logging, get_logger
from infra.settings import load_settings

from .app import create_app

log = get_logger(__name__)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level, json=settings.log_json, logfile=settings.logfile)

    app = create_app(settings)
    log.info("Server running on http://%s:%d (LAN: use your machine's IP)", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()

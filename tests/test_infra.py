import logging
from pathlib import Path

import pytest

from infra.logger import RoomLogAdapter, configure_logging, QUIET_LOGGERS
from infra.settings import DEFAULT_RESOLUTION_DELAY_MS, Settings, load_settings


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_settings_defaults_from_empty_environment():
    settings = load_settings(environ={})

    assert settings == Settings()
    assert settings.port == 3001
    assert settings.resolution_delay_ms == DEFAULT_RESOLUTION_DELAY_MS


def test_settings_read_prefixed_variables():
    settings = load_settings(environ={
        "STANDOFF_HOST": "127.0.0.1",
        "STANDOFF_PORT": "8080",
        "STANDOFF_LOG_LEVEL": "debug",
        "STANDOFF_LOG_JSON": "yes",
        "STANDOFF_LOG_FILE": "",
        "STANDOFF_RESOLUTION_DELAY_MS": "250",
        "PORT": "9999",
    })

    assert settings.host == "127.0.0.1"
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True
    assert settings.logfile is None
    assert settings.resolution_delay_ms == 250


def test_settings_reject_non_numeric_port():
    with pytest.raises(ValueError):
        load_settings(environ={"STANDOFF_PORT": "eighty"})


def test_configure_logging_writes_to_file(tmp_path: Path, restore_root_logger):
    logfile = tmp_path / "logs" / "server.log"

    configure_logging("info", logfile=logfile)
    logging.getLogger("standoff.test").info("hello")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello" in logfile.read_text(encoding="utf-8")
    assert logging.getLogger().level == logging.INFO
    assert all(logging.getLogger(name).level == logging.WARNING for name in QUIET_LOGGERS)


def test_room_adapter_prefixes_room_code(caplog):
    log = RoomLogAdapter(logging.getLogger("standoff.rooms"), "ABCD")

    with caplog.at_level(logging.INFO, logger="standoff.rooms"):
        log.info("round %d resolved", 3)

    assert caplog.records[-1].getMessage() == "[ABCD] round 3 resolved"

# File: tests/test_logger.py
import json
import logging
import sys

from pageripper.logger import LOGGER_NAME, JsonFormatter, configure, get_logger


def test_json_lines_carry_extra_fields(tmp_path):
    log_file = tmp_path / "rip.log"
    configure(level="DEBUG", log_file=log_file, log_format="json")

    get_logger("engine").debug("Rip finished: %s", "https://a.com", extra={"target": "https://a.com", "links": 3})

    entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert entry["level"] == "debug"
    assert entry["logger"] == f"{LOGGER_NAME}.engine"
    assert entry["msg"] == "Rip finished: https://a.com"
    assert entry["target"] == "https://a.com"
    assert entry["links"] == 3
    assert "time" in entry


def test_json_formatter_reports_exceptions():
    try:
        raise ValueError("bad href")
    except ValueError:
        record = logging.getLogger("x").makeRecord(
            "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )
    entry = json.loads(JsonFormatter().format(record))
    assert entry["msg"] == "failed"
    assert "ValueError: bad href" in entry["error"]


def test_text_format_and_level(tmp_path):
    log_file = tmp_path / "rip.log"
    lg = configure(level="WARNING", log_file=log_file, log_format="%(levelname)s:%(message)s")

    get_logger("parser").info("hidden")
    get_logger("parser").warning("shown %d", 1)

    assert lg.level == logging.WARNING
    assert log_file.read_text(encoding="utf-8").splitlines() == ["WARNING:shown 1"]
    assert not lg.propagate
    assert len(lg.handlers) == 2

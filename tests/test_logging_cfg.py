"""
Tests for logging configuration.
"""

import json
import logging

from src.infra.logging_cfg import JsonFormatter, ThrottledFilter, build_logger, log_event


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord("t", logging.WARNING, __file__, 1, msg, None, None)


def test_json_formatter():
    out = json.loads(JsonFormatter().format(_record("hello")))
    assert out["msg"] == "hello"
    assert out["level"] == "WARNING"


def test_throttled_filter_suppresses_repeats():
    f = ThrottledFilter(cooldown_sec=60.0)
    msg = json.dumps({"event": "account_empty_seed"})
    assert f.filter(_record(msg)) is True
    assert f.filter(_record(msg)) is False
    assert f.filter(_record(json.dumps({"event": "settings_resolved"}))) is True
    assert f.filter(_record("plain text")) is True


def test_build_logger_idempotent(tmp_path):
    path = tmp_path / "account.log"
    logger = build_logger("account-test", file_path=str(path), rich_console=False)
    again = build_logger("account-test", file_path=str(path), rich_console=False)
    assert logger is again
    assert len(logger.handlers) == 2
    assert logger.propagate is False

    log_event(logger, "settings_resolved", mwm=14)
    for h in logger.handlers:
        h.flush()
    line = path.read_text().strip().splitlines()[-1]
    assert json.loads(json.loads(line)["msg"]) == {"event": "settings_resolved", "mwm": 14}

    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)

"""Unit tests for log output formats."""

import json
import logging
import sys

from bolobey.logging_setup import JsonFormatter, build_formatter


def _record(msg, *args, exc_info=None):
    return logging.LogRecord(
        name="bolobey.services.bracket_service",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


def test_json_escapes_quotes_and_backslashes():
    record = _record('Rejected result for %s: "%s"', "t1", r"C:\brackets\final")

    line = JsonFormatter().format(record)
    payload = json.loads(line)

    assert payload["message"] == r'Rejected result for t1: "C:\brackets\final"'
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "bolobey.services.bracket_service"
    assert "\n" not in line


def test_json_includes_exception():
    try:
        raise ValueError("bad score")
    except ValueError:
        record = _record("scoring failed", exc_info=sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))

    assert "ValueError: bad score" in payload["exception"]


def test_build_formatter():
    assert isinstance(build_formatter("json"), JsonFormatter)
    console = build_formatter("console")
    assert not isinstance(console, JsonFormatter)
    assert "t1 started" in console.format(_record("%s started", "t1"))

import json
import logging

from casebook.log_setup import JsonFormatter, setup_logging


def test_json_formatter_merges_extra_fields():
    record = logging.LogRecord("casebook.ui", logging.WARNING, __file__, 1, "image unavailable: %s", ("x.png",), None)
    record.url = "x.png"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["msg"] == "image unavailable: x.png"
    assert payload["url"] == "x.png"


def test_setup_logging_replaces_handlers():
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        setup_logging("debug")
        setup_logging("debug")
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])

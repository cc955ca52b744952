import json
import logging

from loanquote.logging_utils import JsonLogFormatter, get_logger


def test_json_formatter_includes_context():
    record = logging.LogRecord("loanquote.engine", logging.INFO, __file__, 1, "scenario calculated", None, None)
    record.context = {"scenario": "A", "payment": 1234.5}
    payload = json.loads(JsonLogFormatter().format(record))
    assert payload["message"] == "scenario calculated"
    assert payload["level"] == "INFO"
    assert payload["scenario"] == "A"
    assert payload["payment"] == 1234.5


def test_get_logger_configures_once():
    logger = get_logger("loanquote.test")
    again = get_logger("loanquote.test")
    assert logger is again
    assert len(logger.handlers) == 1
    assert not logger.propagate


def test_context_cannot_replace_envelope_fields():
    record = logging.LogRecord("loanquote.engine", logging.INFO, __file__, 1, "done", None, None)
    record.context = {"message": "spoofed", "loan_type": "FHA"}
    payload = json.loads(JsonLogFormatter().format(record))
    assert payload["message"] == "done"
    assert payload["loan_type"] == "FHA"
    assert "env" in payload


def test_exception_is_serialized():
    try:
        raise OSError("disk full")
    except OSError:
        import sys

        record = logging.LogRecord("core.state", logging.WARNING, __file__, 1, "write failed", None, sys.exc_info())
    payload = json.loads(JsonLogFormatter().format(record))
    assert "OSError: disk full" in payload["exc"]

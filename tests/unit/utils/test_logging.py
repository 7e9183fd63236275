"""Unit tests for JSON logging in logging.py

Test coverage includes:

1. JsonFormatter output
   - Standard fields, `extra` fields and exception info are serialized.

2. initialize_logging()
   - Root logger level follows the argument, then LOG_LEVEL, then INFO.
   - Chatty third-party loggers are capped at WARNING.
"""

import json
import logging
import sys

from urlshortener.utils.logging import JsonFormatter, initialize_logging


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name='urlshortener.shortener',
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='Created short URL %s.',
        args=('abc1234',),
        exc_info=None,
    )
    record.created = 0.0
    record.__dict__.update(extra)
    return record


# -------------------------------
# 1. JsonFormatter output
# -------------------------------


def test_json_formatter_standard_fields():
    log = json.loads(JsonFormatter().format(make_record()))

    assert log['timestamp'] == '1970-01-01T00:00:00.000Z'
    assert log['level'] == 'INFO'
    assert log['logger'] == 'urlshortener.shortener'
    assert log['message'] == 'Created short URL abc1234.'
    assert 'msg' not in log
    assert 'args' not in log


def test_json_formatter_extra_fields():
    log = json.loads(JsonFormatter().format(make_record(shortcode='abc1234', candidates=['abc1234', 'abc12345'])))

    assert log['shortcode'] == 'abc1234'
    assert log['candidates'] == ['abc1234', 'abc12345']


def test_json_formatter_non_serializable_extra():
    log = json.loads(JsonFormatter().format(make_record(error=ValueError('boom'))))
    assert log['error'] == 'boom'


def test_json_formatter_exception_info():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record()
        record.exc_info = sys.exc_info()

    log = json.loads(JsonFormatter().format(record))
    assert 'RuntimeError: boom' in log['exception']


# -------------------------------
# 2. initialize_logging()
# -------------------------------


def test_initialize_logging_uses_log_level(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    initialize_logging()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)


def test_initialize_logging_explicit_level_wins(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'DEBUG')
    initialize_logging('warning')
    assert logging.getLogger().level == logging.WARNING


def test_initialize_logging_defaults_to_info(monkeypatch):
    monkeypatch.delenv('LOG_LEVEL', raising=False)
    initialize_logging()
    assert logging.getLogger().level == logging.INFO


def test_initialize_logging_quiets_third_party_loggers(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'DEBUG')
    initialize_logging()
    assert logging.getLogger('botocore').level == logging.WARNING
    assert logging.getLogger('urlshortener').getEffectiveLevel() == logging.DEBUG

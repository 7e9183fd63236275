"""Structured JSON logging for the Lambda functions

Every record is rendered as a single JSON line on stdout, which CloudWatch
Logs Insights can query field by field:

    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO",
     "logger": "urlshortener.shortener", "message": "Created short URL.",
     "shortcode": "Gh71TCN"}

Context is attached through the standard `extra` argument:

    >>> logger.info('Created short URL.', extra={'shortcode': shortcode})

NOTE: each Lambda package calls initialize_logging() from its __init__.py,
      so configuration happens once per cold start.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from urlshortener.constants import ENV


# Attributes every LogRecord carries; anything else came in through `extra`
RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime', 'taskName'}

# Third-party loggers that are too chatty at DEBUG
QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3', 'sqlalchemy.engine')


class JsonFormatter(logging.Formatter):
    """Render a LogRecord (and its extras) as one JSON object"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created, tz=UTC)
        return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        extras = {k: v for k, v in vars(record).items() if k not in RECORD_ATTRS}
        for key, value in extras.items():
            payload.setdefault(key, value)

        return json.dumps(payload, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Send all logs as JSON to stdout

    Args:
        level (str | None):
            Root log level. Defaults to $LOG_LEVEL, or INFO if unset.
    """
    level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )

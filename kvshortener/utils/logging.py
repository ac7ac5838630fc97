"""JSON line logging for the kvshortener lambdas

Each lambda package calls `initialize_logging()` from its `__init__.py`, so
the root logger is configured before the handler module logs anything.
Handlers attach outcome codes via `extra`, which end up as top-level keys:

    logger.info('Redirecting client to target URL.', extra={'shortcode': 'abc123', 'event': 'REDIRECT_SUCCESS'})

    {"timestamp": "2026-10-19T12:00:00.000Z", "level": "INFO",
     "logger": "kvshortener.lambdas.redirect_url.app",
     "message": "Redirecting client to target URL.",
     "shortcode": "abc123", "event": "REDIRECT_SUCCESS"}

AWS SDK and HTTP client loggers are held at WARNING: at DEBUG they dump
request signatures and full preview page bodies.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from kvshortener.constants import ENV


DEFAULT_LOG_LEVEL = 'INFO'
QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3', 'httpx', 'httpcore')

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRS = frozenset(logging.LogRecord('', logging.INFO, '', 0, '', None, None).__dict__) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object, `extra` fields included"""

    @staticmethod
    def _timestamp(record: logging.LogRecord) -> str:
        moment = datetime.fromtimestamp(record.created, tz=UTC)
        return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': self._timestamp(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS)

        if record.exc_info:
            log['exc_info'] = self.formatException(record.exc_info)

        # Extras such as datetimes or exceptions are logged by their str()
        return json.dumps(log, default=str)


def _log_level() -> str:
    level = os.getenv(ENV.App.LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()
    return level if level in logging.getLevelNamesMapping() else DEFAULT_LOG_LEVEL


def initialize_logging() -> None:
    """Send every record to stdout as a JSON line, at `LOG_LEVEL` (default INFO)"""
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
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': _log_level(), 'handlers': ['stdout']},
        }
    )

"""
Logging utilities for keeping tokens and secret values out of logs.

Example:
    from keyenv.utils.logging_utils import redact_sensitive_data
    safe = redact_sensitive_data({'key': 'API_KEY', 'value': 'sk_live_123'})
    # safe == {'key': 'API_KEY', 'value': '***REDACTED***'}
"""

import json
import logging
from datetime import datetime, timezone

from keyenv.utils.config import Settings

# Secret names ("key") are not sensitive; their values are.
SENSITIVE_KEYS = {'authorization', 'token', 'value', 'secret', 'password', 'api_key', 'access_token'}

REDACTED = '***REDACTED***'

# Attributes present on every LogRecord; anything else came in through ``extra``.
_RESERVED_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime'}


def redact_sensitive_data(obj):
    """
    Recursively redacts sensitive fields in dicts/lists.
    Keys matched (case-insensitive): authorization, token, value, secret, password, api_key, access_token
    """
    if isinstance(obj, dict):
        return {
            k: (REDACTED if str(k).lower() in SENSITIVE_KEYS else redact_sensitive_data(v))
            for k, v in obj.items()
        }
    elif isinstance(obj, list):
        return [redact_sensitive_data(i) for i in obj]
    else:
        return obj


class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON with standard fields.
    """
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        # Fields passed via ``extra=`` land directly on the record
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and key not in log_record:
                log_record[key] = value
        return json.dumps(log_record, default=str)


def setup_json_logging(level=None, output='stdout', file_path=None, logger_name='keyenv'):
    """
    Set up structured JSON logging for the client.

    Args:
        level: Logging level name or number (default: KEYENV_LOG_LEVEL, else INFO)
        output: 'stdout' or 'file'
        file_path: Path to log file if output is 'file'
        logger_name: Logger to configure; pass '' for the root logger
    """
    if level is None:
        level = Settings().log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    # Remove existing handlers (the package NullHandler included)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    if output == 'file' and file_path:
        handler = logging.FileHandler(file_path)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    return logger

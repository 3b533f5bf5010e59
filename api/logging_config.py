"""
Context Bridge Structured Logging Configuration

Provides:
- JSON log lines for production, coloured console lines for development
- Request logging with X-Request-ID propagation
- Engine fields on API request logs: how many context ids a generate or
  analyze call named, and how many records the response carried

Usage:
    from api.logging_config import setup_logging, setup_request_logging

    setup_logging(app, level='INFO', json_format=True)
    setup_request_logging(app)
"""

import json
import logging
import sys
import time
import traceback
import uuid
from datetime import datetime, timezone

from flask import g, request

SERVICE_NAME = 'context_bridge'

# LogRecord attributes that are not user-supplied ``extra`` fields
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'exc_info', 'exc_text',
    'thread', 'threadName', 'message', 'taskName',
))

# Extra fields shown inline by the console formatter, in this order
_CONSOLE_FIELDS = (
    ('context_count', 'ids'),
    ('record_count', 'records'),
    ('error_type', 'error'),
)


# =============================================================================
# Formatters
# =============================================================================

class JSONFormatter(logging.Formatter):
    """One JSON object per record, extra fields inlined."""

    def format(self, record):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'service': SERVICE_NAME,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith('_'):
                continue
            log_entry[key] = value

        if record.exc_info and record.exc_info[0]:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        return json.dumps(log_entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter for development."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname, '')
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')

        parts = [f'{color}{timestamp} {record.levelname:7}{self.RESET}']
        if getattr(record, 'request_id', None):
            parts.append(f'[{record.request_id[:8]}]')
        parts.append(f'{record.name.replace(SERVICE_NAME + ".", "")}: {record.getMessage()}')

        fields = [
            f'{label}={getattr(record, attr)}'
            for attr, label in _CONSOLE_FIELDS
            if getattr(record, attr, None) is not None
        ]
        if getattr(record, 'duration_ms', None) is not None:
            fields.append(f'{record.duration_ms}ms')
        if fields:
            parts.append(f'({", ".join(fields)})')

        message = ' '.join(parts)
        if record.exc_info:
            message += '\n' + ''.join(traceback.format_exception(*record.exc_info))
        return message


# =============================================================================
# Logger Setup
# =============================================================================

def setup_logging(app, level='INFO', json_format=False):
    """
    Route all loggers to a single stdout handler.

    Args:
        app: Flask application instance
        level: Logging level name
        json_format: JSON lines instead of coloured console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter() if json_format else ColoredFormatter())
    root_logger.addHandler(console_handler)

    # Flask's logger propagates to the root handler
    app.logger.handlers = []
    app.logger.setLevel(log_level)

    # werkzeug repeats every request line we already log
    logging.getLogger('werkzeug').setLevel(max(log_level, logging.WARNING))

    return root_logger


# =============================================================================
# Request Logging
# =============================================================================

def request_engine_fields(body, payload) -> dict:
    """
    Engine fields for one API request log line.

    Args:
        body: Parsed JSON request body, or None
        payload: Parsed JSON response envelope, or None

    Returns:
        Dict with context_count when the request named contextIds and
        record_count when the response data is a list
    """
    fields = {}
    if isinstance(body, dict) and isinstance(body.get('contextIds'), list):
        fields['context_count'] = len(body['contextIds'])

    if isinstance(payload, dict):
        data = payload.get('data')
        if isinstance(data, list):
            fields['record_count'] = len(data)
        elif isinstance(data, dict) and isinstance(data.get('insights'), list):
            # analysis result
            fields['record_count'] = len(data['insights']) + len(data.get('connections') or [])
        if payload.get('errorType'):
            fields['error_type'] = payload['errorType']
    return fields


def setup_request_logging(app):
    """
    Log every request on completion with status, duration and engine fields.

    Echoes the caller's X-Request-ID or assigns one.
    """
    logger = logging.getLogger(f'{SERVICE_NAME}.requests')

    @app.before_request
    def before_request():
        g.request_id = request.headers.get('X-Request-ID') or uuid.uuid4().hex
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        start_time = getattr(g, 'start_time', None)
        duration_ms = int((time.time() - start_time) * 1000) if start_time else 0
        request_id = getattr(g, 'request_id', None) or uuid.uuid4().hex

        extra = {
            'request_id': request_id,
            'method': request.method,
            'path': request.path,
            'endpoint': request.endpoint,
            'status_code': response.status_code,
            'duration_ms': duration_ms,
        }
        if request.path.startswith('/api/') and response.is_json:
            body = request.get_json(silent=True) if request.method == 'POST' else None
            extra.update(request_engine_fields(body, response.get_json(silent=True)))

        if response.status_code >= 500:
            log_method = logger.error
        elif response.status_code >= 400:
            log_method = logger.warning
        else:
            log_method = logger.info

        log_method(f'{request.method} {request.path} -> {response.status_code}', extra=extra)

        response.headers['X-Request-ID'] = request_id
        return response

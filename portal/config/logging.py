"""
Logging configuration for the communications portal.

Console output is colourised in development; when ``LOG_TO_FILE`` is set
the same records also go to a rotating text log and a rotating JSON log
for ingestion. Every handler runs ``RequestContextFilter`` so records
carry the request id and the acting staff member.
"""

import logging
import logging.config
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from portal.config.settings import Settings, settings

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 10

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


class PortalJsonFormatter(jsonlogger.JsonFormatter):
    """JSON lines with timestamp, level, environment and request context."""

    def __init__(self, *args, environment: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.environment = environment or settings.ENVIRONMENT

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = self.environment

        for key in ('request_id', 'user_id'):
            value = getattr(record, key, None)
            if value:
                log_record[key] = value

        if record.exc_info:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info),
            }


def _file_handler(config: Settings, filename: str, formatter: str) -> Dict[str, Any]:
    return {
        'level': 'INFO',
        'class': 'logging.handlers.RotatingFileHandler',
        'filename': os.path.join(config.LOG_DIR, filename),
        'maxBytes': LOG_FILE_MAX_BYTES,
        'backupCount': LOG_FILE_BACKUPS,
        'formatter': formatter,
        'filters': ['request_context'],
        'encoding': 'utf8',
    }


def build_logging_config(config: Settings) -> Dict[str, Any]:
    """Create the ``dictConfig`` dictionary for the given settings."""
    handlers: Dict[str, Dict[str, Any]] = {
        'console': {
            'level': 'DEBUG' if config.DEBUG else 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'colored' if config.is_development() else 'standard',
            'filters': ['request_context'],
        },
    }
    if config.LOG_TO_FILE:
        os.makedirs(config.LOG_DIR, exist_ok=True)
        handlers['file'] = _file_handler(config, 'portal.log', 'standard')
        handlers['json_file'] = _file_handler(config, 'portal.json.log', 'json')

    app_handlers = list(handlers)

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'filters': {
            'request_context': {'()': 'portal.core.logging.RequestContextFilter'},
        },
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s',
            },
            'json': {
                '()': PortalJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s',
                'environment': config.ENVIRONMENT,
            },
            'colored': {
                '()': 'colorlog.ColoredFormatter',
                'format': '%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'log_colors': LOG_COLORS,
            },
        },
        'handlers': handlers,
        'loggers': {
            '': {'handlers': app_handlers, 'level': config.LOG_LEVEL},
            # Portal records are handled here only, not again by the root logger
            'portal': {'handlers': app_handlers, 'level': config.LOG_LEVEL, 'propagate': False},
            'sqlalchemy.engine': {
                'handlers': ['console'],
                'level': 'INFO' if config.DB_ECHO else 'WARNING',
                'propagate': False,
            },
            'uvicorn.access': {'handlers': ['console'], 'level': 'INFO', 'propagate': False},
        },
    }


def init_sentry(config: Settings) -> bool:
    """Initialise Sentry error reporting when a DSN is configured."""
    if not config.SENTRY_DSN:
        return False

    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration

    sentry_logging = LoggingIntegration(
        level=logging.INFO,  # Breadcrumbs
        event_level=logging.ERROR  # Send errors as events
    )

    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        environment=config.ENVIRONMENT,
        integrations=[sentry_logging],
        traces_sample_rate=0.2,
        send_default_pii=False
    )
    return True


def setup_logging(config: Settings = settings) -> logging.Logger:
    """Configure application logging"""
    logging.config.dictConfig(build_logging_config(config))
    logger = logging.getLogger("portal")
    if init_sentry(config):
        logger.info("Sentry error reporting enabled")
    logger.info(f"Logging initialized with level: {config.LOG_LEVEL}")
    return logger

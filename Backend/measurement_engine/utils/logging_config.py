"""
Logging Configuration for Measurement Engine
Console logging with optional rotating log files
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .config import Settings, get_settings

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024


def _rotating_file_handler(path: Path, level: str, backups: int) -> Dict[str, Any]:
    return {
        'level': level,
        'class': 'logging.handlers.RotatingFileHandler',
        'formatter': 'detailed',
        'filename': str(path),
        'maxBytes': LOG_FILE_MAX_BYTES,
        'backupCount': backups,
        'encoding': 'utf-8'
    }


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    """Build the dictConfig for the given settings"""
    handlers = ['console']
    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'detailed': {
                'format': '%(asctime)s %(levelname)-8s %(name)s:%(lineno)d - %(message)s',
                'datefmt': '%H:%M:%S'
            },
            'simple': {
                'format': '%(levelname)-8s %(message)s'
            }
        },
        'handlers': {
            'console': {
                'level': settings.LOG_LEVEL,
                'class': 'logging.StreamHandler',
                'formatter': 'detailed' if settings.DEBUG else 'simple',
                'stream': sys.stdout
            }
        },
        'loggers': {
            'measurement_engine': {
                'level': settings.LOG_LEVEL,
                'handlers': handlers,
                'propagate': False
            }
        }
    }

    if settings.LOG_DIR:
        logs_dir = Path(settings.LOG_DIR)
        config['handlers']['file'] = _rotating_file_handler(logs_dir / 'measurement_engine.log', 'INFO', backups=5)
        config['handlers']['error_file'] = _rotating_file_handler(logs_dir / 'errors.log', 'ERROR', backups=3)
        handlers.extend(['file', 'error_file'])

    return config


def setup_logging(settings: Optional[Settings] = None):
    """Setup measurement engine logging configuration"""
    settings = settings or get_settings()

    if settings.LOG_DIR:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(settings))

    logger = logging.getLogger(__name__)
    logger.info(f"🚀 Measurement engine logging initialized - Level: {settings.LOG_LEVEL}, Environment: {settings.ENVIRONMENT}")

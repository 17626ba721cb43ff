"""
Logging utilities for the BFF gateway

Configures stdlib logging and the structlog processor chain used by every module.
"""

import logging
import logging.config
import os
import sys
from typing import Any, Dict, Optional

import structlog
import yaml


DEFAULT_LOGGING_CONFIG: Dict[str, Any] = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'plain': {
            'format': '%(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'plain',
            'stream': 'ext://sys.stdout',
        },
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console'],
    },
}


def _load_config_file(config_path: str) -> Optional[Dict[str, Any]]:
    """Load a YAML dictConfig file, returning None when it cannot be read"""
    try:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Failed to load logging config from {config_path}: {e}", file=sys.stderr)
        return None


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    config_path: Optional[str] = None,
) -> None:
    """
    Setup stdlib logging and structlog

    Args:
        log_level: Root log level name
        log_format: 'console' for human readable lines, 'json' for one JSON object per line
        config_path: Optional YAML dictConfig file replacing the default handlers
    """
    level = log_level.upper()

    config = None
    if config_path and os.path.exists(config_path):
        config = _load_config_file(config_path)

    if not config:
        config = {
            **DEFAULT_LOGGING_CONFIG,
            'handlers': {
                name: {**handler, 'level': level}
                for name, handler in DEFAULT_LOGGING_CONFIG['handlers'].items()
            },
            'root': {**DEFAULT_LOGGING_CONFIG['root'], 'level': level},
        }

    logging.config.dictConfig(config)

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

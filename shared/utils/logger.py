"""
Logging utilities for the account service

Centralised logging configuration built on logging.config.dictConfig.
The shipped configuration lives in shared/configs/logging.yml; the
built-in default is used when no YAML file can be read.
"""

import copy
import os
import logging
import logging.config
from typing import Optional, Dict, Any
from pathlib import Path

import yaml

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

FORMATS = {
    'default': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'detailed': '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s',
    'json': (
        '{"timestamp": "%(asctime)s", "logger": "%(name)s", "level": "%(levelname)s", '
        '"location": "%(module)s:%(funcName)s:%(lineno)d", "message": "%(message)s"}'
    ),
}

# Loggers owned by this project; everything else goes through root
PROJECT_LOGGERS = ('account_service', 'shared')

ENVIRONMENT_SECTIONS = ('development', 'staging', 'production', 'test')

SHARED_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "logging.yml"


def default_logging_config(level: str = 'INFO', formatter: str = 'default') -> Dict[str, Any]:
    """
    Build the built-in dictConfig used when no YAML config is available

    Args:
        level: Level for the project loggers and the console handler
        formatter: One of FORMATS

    Returns:
        dict: dictConfig-compatible configuration
    """
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            name: {'format': fmt, 'datefmt': DATE_FORMAT}
            for name, fmt in FORMATS.items()
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': level,
                'formatter': formatter,
                'stream': 'ext://sys.stdout',
            },
        },
        'loggers': {
            name: {'level': level, 'handlers': ['console'], 'propagate': False}
            for name in PROJECT_LOGGERS
        },
        'root': {'level': 'WARNING', 'handlers': ['console']},
    }


def load_logging_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a logging configuration dictionary

    Looks at the explicit path first, then the shared YAML config, and falls
    back to default_logging_config().
    """
    for candidate in (config_path, SHARED_CONFIG_PATH):
        if not candidate or not os.path.exists(candidate):
            continue
        try:
            with open(candidate, 'r') as f:
                config = yaml.safe_load(f)
            if config:
                return config
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(__name__).warning(f"Failed to load logging config from {candidate}: {e}")

    return default_logging_config()


def apply_overrides(
    config: Dict[str, Any],
    environment: str,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None
) -> Dict[str, Any]:
    """
    Merge the section for the environment and apply level/format overrides

    Every environment section is removed so dictConfig never sees them.
    Returns a new dictionary; the input is left untouched.
    """
    config = copy.deepcopy(config)
    sections = {name: config.pop(name) for name in ENVIRONMENT_SECTIONS if name in config}

    env_config = sections.get(environment)
    if isinstance(env_config, dict):
        for key in ('handlers', 'loggers'):
            config.setdefault(key, {}).update(env_config.get(key, {}))

    if log_level:
        level = log_level.upper()
        for entry in list(config.get('loggers', {}).values()) + list(config.get('handlers', {}).values()):
            entry['level'] = level

    if log_format and log_format in config.get('formatters', {}):
        for handler in config.get('handlers', {}).values():
            handler['formatter'] = log_format

    return config


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    environment: Optional[str] = None
) -> Dict[str, Any]:
    """
    Configure logging for the process

    Args:
        config_path: YAML logging configuration, overrides the shared one
        log_level: Level applied to every logger and handler
        log_format: Formatter name ('default', 'detailed', 'json')
        environment: Selects the environment section; defaults to $ENVIRONMENT

    Returns:
        dict: The configuration that was applied
    """
    environment = environment or os.getenv('ENVIRONMENT', 'development')
    config = apply_overrides(load_logging_config(config_path), environment, log_level, log_format)

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        level = getattr(logging, (log_level or 'INFO').upper(), logging.INFO)
        logging.basicConfig(level=level, format=FORMATS['default'], datefmt=DATE_FORMAT)
        logging.getLogger(__name__).error(f"Failed to configure logging, using basicConfig: {e}")
    else:
        logging.getLogger(__name__).debug(f"Logging configured for environment: {environment}")

    return config

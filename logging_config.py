"""Centralized logging configuration for gyb.

Every module logs through the ``"gyb"`` logger. ``setup_logging`` attaches a
DEBUG file handler and a console handler to it once per process, using the
``logging:`` section of config.yaml.
"""

import logging
import sys
from pathlib import Path

import yaml


DEFAULT_LOGGING_SETTINGS = {
    'log_file': 'gyb.log',
    'console_level': 'WARNING',
    'file_mode': 'w',
    'suppress_root_logger': True,
    'third_party_log_level': 'WARNING',
}

FILE_LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s %(module)s:%(lineno)d | %(message)s'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
CONSOLE_LOG_FORMAT = '%(levelname)s: %(message)s'

# Libraries that log chatty DEBUG/INFO messages while rendering.
_THIRD_PARTY_LOGGER_NAMES = (
    'matplotlib',
    'matplotlib.font_manager',
    'PIL',
)


def _level_name(settings: dict, key: str) -> str:
    """Return the upper-cased level name stored under ``key`` or raise ValueError."""
    name = str(settings[key]).upper()
    if not isinstance(getattr(logging, name, None), int):
        raise ValueError(f"Invalid logging.{key} '{settings[key]}'")
    return name


def _load_logging_settings(config_path: Path) -> dict:
    """Merge the ``logging:`` section of ``config_path`` onto the defaults and validate it."""
    with open(config_path, 'r') as f:
        document = yaml.safe_load(f) or {}

    section = document.get('logging') or {}
    if not isinstance(section, dict):
        raise ValueError(f"Invalid logging section in {config_path}; expected mapping.")

    unknown = sorted(set(section) - set(DEFAULT_LOGGING_SETTINGS))
    if unknown:
        raise ValueError(f"Unknown logging setting(s) in {config_path}: {', '.join(unknown)}")

    settings = {**DEFAULT_LOGGING_SETTINGS, **section}
    for key in ('console_level', 'third_party_log_level'):
        settings[key] = _level_name(settings, key)

    if settings['file_mode'] not in ('w', 'a'):
        raise ValueError("logging.file_mode must be 'w' (overwrite) or 'a' (append)")
    if not isinstance(settings['suppress_root_logger'], bool):
        raise ValueError("logging.suppress_root_logger must be true or false")
    log_file = settings['log_file']
    if not isinstance(log_file, str) or not log_file.strip():
        raise ValueError("logging.log_file must be a non-empty string")
    settings['log_file'] = log_file.strip()
    return settings


def _quieten_third_party(level: int, include_root: bool) -> None:
    for name in _THIRD_PARTY_LOGGER_NAMES:
        logging.getLogger(name).setLevel(level)
    if include_root:
        logging.getLogger().setLevel(level)


def setup_logging(config_path: Path = Path("config.yaml")) -> logging.Logger:
    """
    Attach file and console handlers to the ``"gyb"`` logger.

    The file handler records everything at DEBUG. The console handler prints
    at ``logging.console_level`` to stdout, and the CLI may later lower it
    for ``--verbose`` or raise it for ``--quiet``. Calling this again keeps the
    handlers installed by the first call.

    Args:
        config_path: Path to the configuration YAML file.

    Returns:
        logging.Logger: The configured ``"gyb"`` logger.

    Raises:
        ValueError: If the logging section has unknown keys or invalid values.
    """
    settings = _load_logging_settings(config_path)

    logger = logging.getLogger("gyb")
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    file_handler = logging.FileHandler(settings['log_file'], mode=settings['file_mode'], encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, settings['console_level']))
    console_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT))

    for handler in (file_handler, console_handler):
        logger.addHandler(handler)

    _quieten_third_party(
        getattr(logging, settings['third_party_log_level']),
        include_root=settings['suppress_root_logger'],
    )
    logger.debug(f"Logging to {settings['log_file']} (console level {settings['console_level']})")
    return logger


def get_logger(name: str = "gyb") -> logging.Logger:
    """Return the named logger (the project logger by default)."""
    return logging.getLogger(name)

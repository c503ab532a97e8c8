from __future__ import annotations

"""Central logging configuration for Officify.

Import and call :func:`setup_logging` at application start-up.
"""

import copy
import logging
import logging.config
import os
from typing import Optional

from officify.config import ConfigManager

__all__ = ["setup_logging"]


def setup_logging(config_manager: Optional[ConfigManager] = None, log_to_file: bool = True) -> None:
    """Configure logging for the application using configuration from YAML files.

    With *log_to_file* False the ``file`` handler is dropped from the
    configuration and no log directory is created.
    """
    log_dir = os.environ.get("OFFICIFY_LOG_DIR", "logs")
    log_file = os.path.join(log_dir, "officify.log")

    try:
        config_manager = config_manager or ConfigManager()
        logging_config = copy.deepcopy(config_manager.get_logging_config())

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            if not log_to_file:
                _drop_handler(logging_config, "file")
            elif "handlers" in logging_config and "file" in logging_config["handlers"]:
                os.makedirs(log_dir, exist_ok=True)
                logging_config["handlers"]["file"]["filename"] = log_file

            logging.config.dictConfig(logging_config)
            logging.getLogger("officify").debug("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (OSError, ValueError, TypeError, AttributeError, ImportError) as exc:
        # dictConfig reports bad handler/formatter definitions as ValueError
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging()

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'WARNING',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.warning("===== Logging initialised with minimal fallback =====")


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    ``OFFICIFY_DEBUG_MODULES=comma,separated,logger,names`` -> DEBUG for listed loggers.
    """
    extra_modules = os.environ.get('OFFICIFY_DEBUG_MODULES', '').strip()
    targets = [m.strip() for m in extra_modules.split(',') if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)


def _drop_handler(logging_config: dict, name: str) -> None:
    """Remove handler *name* and every logger's reference to it."""
    logging_config.get("handlers", {}).pop(name, None)
    targets = list(logging_config.get("loggers", {}).values())
    if "root" in logging_config:
        targets.append(logging_config["root"])
    for target in targets:
        if isinstance(target, dict) and name in target.get("handlers", []):
            target["handlers"] = [h for h in target["handlers"] if h != name]

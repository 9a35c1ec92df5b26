from __future__ import annotations

"""Central logging configuration for the QZH preview.

Import and call :func:`setup_logging` at application start-up. The library
modules only create loggers; they never configure handlers themselves.
"""

import logging
import logging.config
import os

from qzh_preview.config import ConfigManager

__all__ = ["setup_logging"]


def setup_logging() -> None:
    """Configure logging from the YAML configuration with a console fallback."""
    log_dir = os.environ.get("QZH_PREVIEW_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    logging_config = ConfigManager().get_logging_config()

    if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
        # Update the filename dynamically
        if "handlers" in logging_config and "file" in logging_config["handlers"]:
            logging_config["handlers"]["file"]["filename"] = log_file
        try:
            logging.config.dictConfig(logging_config)
            logging.getLogger(__name__).info("===== Logging initialised from config files =====")
        except (ValueError, TypeError, AttributeError, ImportError) as exc:
            _setup_minimal_logging()
            logging.getLogger(__name__).error("Invalid logging config, using fallback: %s", exc)
    else:
        _setup_minimal_logging()
        logging.getLogger(__name__).warning("No logging config found, using fallback")

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
            'level': 'INFO',
            'handlers': ['console'],
        },
    }
    logging.config.dictConfig(minimal_config)


def _apply_debug_overrides() -> None:
    """Raise listed loggers to DEBUG.

    ``QZH_PREVIEW_DEBUG_MODULES=qzh_preview.core.transformer,qzh_preview.core.loader``
    """
    extra_modules = os.environ.get('QZH_PREVIEW_DEBUG_MODULES', '').strip()
    targets = [m.strip() for m in extra_modules.split(',') if m.strip()]
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            h = logging.StreamHandler()
            h.setLevel(logging.DEBUG)
            h.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(h)
        logger.info("Debug override active for logger '%s'", name)

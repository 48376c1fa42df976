# src/objectstore/logging_config.py
"""
Logging configuration helpers for objectstore.

The library itself only creates module loggers (``logging.getLogger(__name__)``)
and never installs handlers on import. Applications that want the store's
tier traffic on their console or in a log file can call
:func:`configure_logging` once at start-up.

Key concepts:

    **Display filter**: When ``console_enabled=False`` (the default), the
    console handler still exists but only passes log records that carry
    ``extra={"display": True}``. This lets operational messages reach the
    user while debug chatter about tier reads and writes stays out of the
    console.

    **File logging**: disabled by default. When enabled, records go to a
    ``RotatingFileHandler`` with configurable max size and backup count.

Usage:
    from objectstore.logging_config import configure_logging, log_display

    configure_logging(config={"console_enabled": True, "console_level": "DEBUG"})

    import logging
    logger = logging.getLogger("myapp")
    log_display(logger, logging.INFO, "Loaded %d properties", count)
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

# ---------------------------------------------------------------------------
# Default logging configuration
# ---------------------------------------------------------------------------

DEFAULT_LOGGING_CONFIG: dict[str, Any] = {
    "console_enabled": False,
    "console_level": "WARNING",
    "console_format": "%(levelname)s - %(message)s",
    "file_enabled": False,
    "file_level": "DEBUG",
    "file_path": "~/.local/share/objectstore/logs/objectstore.log",
    "file_format": "%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)",
    "rotation_max_bytes": 10 * 1024 * 1024,  # 10 MB
    "rotation_backup_count": 5,
    "display_min_level": "INFO",
    "components": {
        "objectstore": "INFO",
        "objectstore.tiers": "WARNING",
    },
}


def _resolve_level(level: str | int, default: int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else default


# ---------------------------------------------------------------------------
# DisplayFilter
# ---------------------------------------------------------------------------


class DisplayFilter(logging.Filter):
    """Controls which log records pass through to the console handler.

    Behavior matrix::

        +------------------------+--------------+-----------------+
        | console_global         | display=True | display=False/  |
        |                        |              | absent          |
        +------------------------+--------------+-----------------+
        | True  (verbose)        | PASS         | PASS            |
        | False (default/quiet)  | PASS*        | BLOCK           |
        +------------------------+--------------+-----------------+

        * subject to display_min_level
    """

    def __init__(
        self,
        console_globally_enabled: bool = False,
        display_min_level: int = logging.INFO,
    ) -> None:
        super().__init__()
        self.console_globally_enabled = console_globally_enabled
        self.display_min_level = display_min_level

    def filter(self, record: logging.LogRecord) -> bool:
        """Determine if the record should pass to console."""
        if self.console_globally_enabled:
            return True

        if getattr(record, "display", False):
            return record.levelno >= self.display_min_level

        return False


# ---------------------------------------------------------------------------
# LoggingManager
# ---------------------------------------------------------------------------


class LoggingManager:
    """
    Singleton manager for objectstore logging configuration.

    Ensures logging is only configured once and keeps track of the handlers
    it installed so they can be replaced on reconfiguration.
    """

    _instance: Optional["LoggingManager"] = None
    _configured: bool = False
    _log_file_path: Path | None = None
    _console_handler: logging.Handler | None = None
    _file_handler: logging.Handler | None = None

    def __new__(cls) -> "LoggingManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "LoggingManager":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    def configure(
        self,
        config: dict[str, Any] | None = None,
        force_reconfigure: bool = False,
    ) -> Path | None:
        """
        Install console (and optionally file) handlers on the root logger.

        Args:
            config: Overrides merged over ``DEFAULT_LOGGING_CONFIG``.
            force_reconfigure: If True, reconfigure even if already configured.

        Returns:
            Path to the log file, or None if file logging is disabled.
        """
        if self._configured and not force_reconfigure:
            return LoggingManager._log_file_path

        log_config = {**DEFAULT_LOGGING_CONFIG, **(config or {})}
        root_logger = logging.getLogger()
        self._remove_handlers(root_logger)
        root_logger.setLevel(logging.DEBUG)

        console_globally_enabled = bool(log_config.get("console_enabled", False))
        console_handler = logging.StreamHandler(sys.stderr)
        if console_globally_enabled:
            console_handler.setLevel(_resolve_level(log_config["console_level"], logging.WARNING))
        else:
            # the filter is the only gate when the console is "off"
            console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(log_config["console_format"]))
        console_handler.addFilter(
            DisplayFilter(
                console_globally_enabled=console_globally_enabled,
                display_min_level=_resolve_level(log_config["display_min_level"], logging.INFO),
            )
        )
        root_logger.addHandler(console_handler)
        LoggingManager._console_handler = console_handler

        LoggingManager._log_file_path = None
        if log_config.get("file_enabled", False):
            file_handler, log_file_path = self._create_file_handler(log_config)
            if file_handler is not None:
                root_logger.addHandler(file_handler)
                LoggingManager._file_handler = file_handler
                LoggingManager._log_file_path = log_file_path

        for component_name, level in log_config.get("components", {}).items():
            set_component_level(component_name, level)

        LoggingManager._configured = True
        logging.getLogger(__name__).debug(
            f"Logging configured (console_enabled={console_globally_enabled}, "
            f"log_file={LoggingManager._log_file_path})"
        )
        return LoggingManager._log_file_path

    def _remove_handlers(self, root_logger: logging.Logger) -> None:
        for handler in (LoggingManager._console_handler, LoggingManager._file_handler):
            if handler is not None:
                root_logger.removeHandler(handler)
                handler.close()
        LoggingManager._console_handler = None
        LoggingManager._file_handler = None

    def _create_file_handler(
        self, config: dict[str, Any]
    ) -> tuple[logging.Handler | None, Path | None]:
        """Create the rotating file handler, or (None, None) if the file cannot be opened."""
        log_file_path = Path(os.path.expanduser(config["file_path"]))
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                log_file_path,
                maxBytes=config.get("rotation_max_bytes", 10 * 1024 * 1024),
                backupCount=config.get("rotation_backup_count", 5),
                encoding="utf-8",
            )
        except OSError as e:
            sys.stderr.write(f"Warning: Cannot create log file {log_file_path}: {e}\n")
            return None, None

        handler.setLevel(_resolve_level(config.get("file_level", "DEBUG"), logging.DEBUG))
        handler.setFormatter(logging.Formatter(config["file_format"]))
        return handler, log_file_path


# ---------------------------------------------------------------------------
# Public module-level functions
# ---------------------------------------------------------------------------


def configure_logging(
    config: dict[str, Any] | None = None,
    force_reconfigure: bool = False,
) -> Path | None:
    """
    Configure logging for an application using objectstore.

    Args:
        config: Logging configuration overrides.
        force_reconfigure: If True, reconfigure even if already configured.

    Returns:
        Path to the log file (if file logging enabled).

    Example:
        configure_logging(
            config={
                "console_enabled": True,
                "console_level": "DEBUG",
                "components": {"objectstore": "DEBUG"},
            }
        )
    """
    return LoggingManager.get_instance().configure(
        config=config, force_reconfigure=force_reconfigure
    )


def get_log_file_path() -> Path | None:
    """Return the current log file path, if file logging is configured."""
    return LoggingManager._log_file_path


def set_component_level(component: str, level: str | int) -> None:
    """Change a specific component's log level at runtime."""
    logger = logging.getLogger(component)
    resolved = _resolve_level(level, logger.level)
    logger.setLevel(resolved)


def log_display(
    logger: logging.Logger,
    level: int,
    msg: str,
    *args: Any,
    **kwargs: Any,
) -> None:
    """Log a message that also appears on console even in silent mode.

    Convenience wrapper around ``logger.log()`` that sets
    ``extra={"display": True}``. The caller's own ``extra`` is merged, not
    replaced.
    """
    extra = dict(kwargs.pop("extra", None) or {})
    extra["display"] = True
    logger.log(level, msg, *args, extra=extra, **kwargs)


__all__ = [
    "DEFAULT_LOGGING_CONFIG",
    "DisplayFilter",
    "LoggingManager",
    "configure_logging",
    "get_log_file_path",
    "log_display",
    "set_component_level",
]

"""
Logging Setup

Configures the root logger from ``LoggingConfig``: plain or JSON records,
optionally mirrored to a rotating file.
"""

import logging
import logging.handlers
from pathlib import Path

from pythonjsonlogger import jsonlogger

from .client_config import LoggingConfig

JSON_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.json_format:
        return jsonlogger.JsonFormatter(JSON_LOG_FORMAT)
    return logging.Formatter(config.format)


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """
    Configure the root logger.

    Existing handlers installed by a previous call are replaced, so calling
    this twice does not duplicate output.

    Args:
        config: Logging settings, defaults to ``LoggingConfig()``

    Returns:
        The configured root logger
    """
    config = config or LoggingConfig()
    root = logging.getLogger()
    root.setLevel(config.level.upper())

    for handler in list(root.handlers):
        if getattr(handler, "_krishi_sahayak", False):
            root.removeHandler(handler)
            handler.close()

    formatter = _build_formatter(config)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                config.file_path,
                maxBytes=config.max_file_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._krishi_sahayak = True
        root.addHandler(handler)

    return root

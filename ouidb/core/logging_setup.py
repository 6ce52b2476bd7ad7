"""Root logger configuration shared by the command line and the web server."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LoggingConfig


def setup_logging(config: Optional[LoggingConfig] = None, verbose: bool = False):
    """
    Configure the root logger from a LoggingConfig.

    Args:
        config: Logging settings (defaults when None)
        verbose: Force DEBUG level regardless of the configured level
    """
    config = config or LoggingConfig()
    level = logging.DEBUG if verbose else getattr(logging, str(config.level).upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                config.file_path,
                maxBytes=config.max_file_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
            )
        )

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
        force=True,
    )

import logging
import os
import sys
from typing import Optional


class RootPathFilter(logging.Filter):
    """Filter to mask the absolute root directory in log records."""

    MASK = "<root>"

    def __init__(self, root_path: str):
        super().__init__()
        self.root_path = root_path.rstrip(os.sep) or os.sep

    def filter(self, record: logging.LogRecord) -> bool:
        """Replace the root directory prefix in the log message."""
        if self.root_path == os.sep:
            return True

        if isinstance(record.msg, str):
            record.msg = self._mask_value(record.msg)

        if hasattr(record, 'args') and record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._mask_value(v) for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(self._mask_value(arg) for arg in record.args)

        return True

    def _mask_value(self, value):
        if isinstance(value, str):
            return value.replace(self.root_path, self.MASK)
        return value


def setup_logging(
    component_name: str,
    log_level: Optional[str] = None,
    root_path: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration for a component.

    Args:
        component_name: Name of the top-level logger (e.g., 'explorer')
        log_level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env var or INFO
        root_path: Absolute root directory to mask in log output

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()

    level = getattr(logging, log_level, logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    handler.setFormatter(formatter)
    if root_path:
        handler.addFilter(RootPathFilter(root_path))

    logger.addHandler(handler)
    logger.propagate = False

    return logger

import logging
import os
import sys
from typing import Optional


def setup_logging(
    component_name: str = "registry",
    log_level: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for a component.

    Records still propagate to the root logger, so an application's own
    handlers keep seeing them.

    Args:
        component_name: Logger name to configure (e.g., 'registry', 'accounts')
        log_level: DEBUG, INFO, WARNING or ERROR. Defaults to LOG_LEVEL env var or INFO

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv('LOG_LEVEL', 'INFO')

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(component_name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    logger.addHandler(handler)

    return logger

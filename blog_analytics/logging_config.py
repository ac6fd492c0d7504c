"""Logging configuration for blog_analytics.

All records go to stderr: stdout carries the MCP stdio transport.
"""

import logging
import sys
from typing import Optional

from blog_analytics.config import ServerConfig, get_config


logger = logging.getLogger("blog_analytics")


def setup_logging(config: Optional[ServerConfig] = None) -> logging.Logger:
    """Configure the blog_analytics logger.

    Args:
        config: Server configuration (uses the global config if not provided)

    Returns:
        The package logger
    """
    if config is None:
        config = get_config()

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logger.setLevel(level)

    # Remove existing handlers (avoid duplicates when the server is rebuilt)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    logger.propagate = False

    return logger

"""Storage layer for blog_analytics."""

from .database import (
    STORAGE_KEY,
    BlogRepository,
    close_database,
    get_database,
    init_database,
)

__all__ = [
    "STORAGE_KEY",
    "BlogRepository",
    "close_database",
    "get_database",
    "init_database",
]

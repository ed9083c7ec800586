"""Data access for ZUQ collections."""

from zuq.repositories.base import EXPORT_TABLES, Repositories, Repository, Row
from zuq.repositories.memory import MemoryRepository, get_memory_repositories

__all__ = [
    "EXPORT_TABLES",
    "MemoryRepository",
    "Repositories",
    "Repository",
    "Row",
    "get_memory_repositories",
]

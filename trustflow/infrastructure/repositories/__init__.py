"""Repository implementations."""

from .memory_repository import InMemoryHistoryRepository
from .sql_repository import SqlHistoryRepository

__all__ = [
    "InMemoryHistoryRepository",
    "SqlHistoryRepository",
]

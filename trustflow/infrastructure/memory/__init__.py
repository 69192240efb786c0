"""In-memory storage infrastructure."""

from .store import InMemoryHistoryStore

__all__ = [
    "InMemoryHistoryStore",
]

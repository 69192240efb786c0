"""
Domain Interfaces (Ports)
"""

from .repositories import HistoryRepository

__all__ = [
    "HistoryRepository",
]

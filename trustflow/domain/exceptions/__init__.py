"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .history import (
    BackingStoreUnavailableException,
    InvalidInputException,
)
from .score import ScoreRecordNotFoundException

__all__ = [
    "DomainException",
    "BackingStoreUnavailableException",
    "InvalidInputException",
    "ScoreRecordNotFoundException",
]

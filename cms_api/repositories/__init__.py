"""
Repositories: typed data access for the collection services.
"""

from .base import BaseRepository, OrderedRepository

__all__ = [
    "BaseRepository",
    "OrderedRepository",
]

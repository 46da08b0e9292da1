"""
CRUD building blocks shared by every catalog service.
"""

from .repository import BaseRepository

__all__ = ["BaseRepository"]

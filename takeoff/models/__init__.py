"""Database models for the Takeoff service."""

from .stored_text import StoredValue

__all__ = ["StoredValue"]

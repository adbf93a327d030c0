"""Access log store implementations."""

from .repositories_memory import InMemoryAccessLogStore
from .repositories_sqlalchemy import SQLAlchemyAccessLogStore

__all__ = ["InMemoryAccessLogStore", "SQLAlchemyAccessLogStore"]

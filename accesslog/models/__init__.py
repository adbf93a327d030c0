"""SQLAlchemy models for the MVC architecture."""

from .access_log import AccessLog  # noqa: F401
from .base import Base

__all__ = [
    "Base",
    "AccessLog",
]

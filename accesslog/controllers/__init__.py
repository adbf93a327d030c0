"""FastAPI routers acting as controllers in the MVC architecture."""

from . import logs

__all__ = ["logs"]

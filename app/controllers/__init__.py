"""FastAPI routers acting as controllers in the MVC architecture."""

from . import tasks

__all__ = ["tasks"]

"""Store layer for woodshop application."""

from woodshop.database.base import Database
from woodshop.database.factories import create_memory_database

__all__ = ["Database", "create_memory_database"]

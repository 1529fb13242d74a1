"""Database layer for familyhub application."""

from familyhub.database.base import Database
from familyhub.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]

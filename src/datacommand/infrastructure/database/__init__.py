"""Database infrastructure."""

from .connection import SqlAlchemyConnection, SqlAlchemyConnectionFactory

__all__ = ["SqlAlchemyConnection", "SqlAlchemyConnectionFactory"]

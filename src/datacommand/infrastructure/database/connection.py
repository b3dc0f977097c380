"""SQLAlchemy-backed connection handles.

This module provides the default connection collaborator for commands: a
factory that lazily creates one pooled engine per connection string and hands
out unopened handles, and the handle itself, which checks a connection out of
the engine on ``open()`` and returns it on ``close()``.
"""

import threading
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Union

import structlog
from sqlalchemy import Connection, Engine, Result, RootTransaction, create_engine, text
from sqlalchemy.sql.expression import Executable

from datacommand.domain.exceptions import InvalidConnectionError

if TYPE_CHECKING:
    from datacommand.domain.value_objects.options import CommandOptions

logger = structlog.get_logger(__name__)


class SqlAlchemyConnection:
    """Connection handle over a SQLAlchemy engine.

    The handle is created closed. Opening may be retried after a failure,
    closing is idempotent.
    """

    def __init__(self, engine: Engine):
        self._engine = engine
        self._connection: Optional[Connection] = None

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def is_open(self) -> bool:
        """Check if a connection is currently checked out."""
        return self._connection is not None

    @property
    def connection(self) -> Connection:
        """Get the underlying SQLAlchemy connection.

        Raises:
            InvalidConnectionError: If the handle is not open
        """
        if self._connection is None:
            raise InvalidConnectionError(
                "Connection is not open",
                context={"url": self._engine.url.render_as_string(hide_password=True)},
            )
        return self._connection

    def open(self) -> None:
        """Check a connection out of the engine's pool."""
        if self._connection is not None:
            return
        self._connection = self._engine.connect()

    def close(self) -> None:
        """Return the connection to the pool."""
        if self._connection is None:
            return
        try:
            self._connection.close()
        finally:
            self._connection = None

    def execute(
        self,
        statement: Union[str, Executable],
        parameters: Optional[Mapping[str, Any]] = None,
    ) -> Result:
        """Execute a statement on the open connection.

        Args:
            statement: Raw SQL (wrapped in ``text()``) or a SQLAlchemy executable
            parameters: Bound parameters for the statement

        Returns:
            Result: SQLAlchemy result
        """
        if isinstance(statement, str):
            statement = text(statement)
        return self.connection.execute(statement, parameters or {})

    def begin(self) -> RootTransaction:
        """Begin a transaction; usable as a context manager."""
        return self.connection.begin()

    def commit(self) -> None:
        self.connection.commit()

    def rollback(self) -> None:
        self.connection.rollback()


class SqlAlchemyConnectionFactory:
    """Connection factory caching one engine per connection string.

    Instances are callable with command options, so they can be passed
    directly as ``CommandOptions.connection_factory``.
    """

    def __init__(self, **engine_kwargs: Any):
        """Initialize the factory.

        Args:
            **engine_kwargs: Keyword arguments forwarded to ``create_engine``
        """
        self._engine_kwargs = engine_kwargs
        self._engines: Dict[str, Engine] = {}
        self._lock = threading.Lock()

    def __call__(self, options: "CommandOptions") -> SqlAlchemyConnection:
        return SqlAlchemyConnection(self.get_engine(options.connection_string))

    def get_engine(self, url: str) -> Engine:
        """Get or create the engine for ``url``."""
        with self._lock:
            engine = self._engines.get(url)
            if engine is None:
                engine = create_engine(url, **self._engine_kwargs)
                self._engines[url] = engine
                logger.info(
                    "Created database engine",
                    url=engine.url.render_as_string(hide_password=True),
                )
            return engine

    def dispose(self) -> None:
        """Dispose every cached engine and its pool."""
        with self._lock:
            engines = list(self._engines.values())
            self._engines.clear()

        for engine in engines:
            engine.dispose()
        logger.info("Disposed database engines", count=len(engines))

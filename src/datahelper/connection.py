"""
Database connection handle created by provider factories.

A DbConnection is created closed by `DbProviderFactory.create_connection()`,
receives its connection string, and opens a SQLAlchemy connection on the
engine its factory keeps for that connection string.
"""
import logging
from typing import TYPE_CHECKING, Any, Self

import sqlalchemy as sa
from datahelper.command import DbCommand
from datahelper.command_text import CommandText
from datahelper.exceptions import InvalidArgumentError
from datahelper.types import ConnectionState

if TYPE_CHECKING:
    from datahelper.providers import SqlAlchemyProviderFactory

__all__ = ['DbConnection']

logger = logging.getLogger(__name__)


class DbConnection:
    """Openable connection bound to a provider factory and connection string.

    Tracks query count like the connection wrappers it is modeled on and
    supports the context manager protocol, closing on exit.
    """

    def __init__(self, factory: 'SqlAlchemyProviderFactory',
                 connection_string: str | None = None) -> None:
        self.factory = factory
        self.connection_string = connection_string
        self.sa_connection: sa.engine.Connection | None = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        self.close()

    @property
    def state(self) -> ConnectionState:
        if self.sa_connection is None or self.sa_connection.closed:
            return ConnectionState.CLOSED
        return ConnectionState.OPEN

    @property
    def dialect(self) -> str | None:
        """Dialect name of the open connection ('sqlite', 'postgresql')."""
        if self.sa_connection is None:
            return None
        return self.sa_connection.dialect.name

    @property
    def dbapi_connection(self) -> Any:
        """The raw DB-API connection, None when closed."""
        if self.state is ConnectionState.CLOSED:
            return None
        return self.sa_connection.connection.driver_connection

    def open(self) -> None:
        if self.state is ConnectionState.OPEN:
            return
        if not self.connection_string:
            raise InvalidArgumentError('Connection string is not set')
        engine = self.factory.get_engine(self.connection_string)
        self.sa_connection = engine.connect()
        logger.debug(f'Connection opened ({self.dialect})')

    def close(self) -> None:
        if self.state is ConnectionState.CLOSED:
            return
        self.sa_connection.close()
        logger.debug('Connection closed')

    def create_command(self, command_text: str | CommandText = '') -> DbCommand:
        return DbCommand(self, command_text)

    def __repr__(self) -> str:
        return f'DbConnection({type(self.factory).__name__}, state={self.state.name})'

"""
Base class for data access objects.
"""
import logging
from collections.abc import Callable

from datahelper.builder import DbConnectionBuilder
from datahelper.connection import DbConnection
from datahelper.exceptions import InvalidArgumentError

__all__ = ['DataObject']

logger = logging.getLogger(__name__)

LogHandler = Callable[['DataObject', str], None]


class DataObject:
    """Holds the connection builder used by a data access object.

    Messages passed to `log()` go to the module logger and to every handler
    added with `add_log_handler()`.
    """

    def __init__(self, connection_builder: DbConnectionBuilder | None = None) -> None:
        self.connection_builder = connection_builder
        self._log_handlers: list[LogHandler] = []

    def add_log_handler(self, handler: LogHandler) -> None:
        self._log_handlers.append(handler)

    def remove_log_handler(self, handler: LogHandler) -> None:
        self._log_handlers.remove(handler)

    def log(self, message: str) -> None:
        logger.info(f'{type(self).__name__}: {message}')
        for handler in list(self._log_handlers):
            handler(self, message)

    def new_connection(self) -> DbConnection:
        if self.connection_builder is None:
            raise InvalidArgumentError(f'{type(self).__name__} has no connection builder')
        return self.connection_builder.new_connection()

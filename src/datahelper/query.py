"""
Query execution helpers.

Each helper opens the connection if it is not open, runs the command and,
when `close_connection=True`, closes the connection afterwards whether the
command succeeded or not. A connection that was already open is left open
unless closing is requested.
"""
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import pandas as pd
from datahelper.command import DbCommand
from datahelper.command_text import CommandText
from datahelper.connection import DbConnection
from datahelper.exceptions import InvalidArgumentError, NotFoundError
from datahelper.types import ConnectionState

from libb import attrdict

__all__ = [
    'select_scalar',
    'select_column',
    'select',
    'select_rows',
    'ddl',
    'execute',
]

logger = logging.getLogger(__name__)


@contextmanager
def _opened(cn: DbConnection, close_connection: bool) -> Iterator[DbConnection]:
    """Open `cn` if needed and optionally close it on exit."""
    if cn is None:
        raise InvalidArgumentError('Connection is required')
    try:
        if cn.state is not ConnectionState.OPEN:
            cn.open()
        yield cn
    finally:
        if close_connection and cn.state is not ConnectionState.CLOSED:
            cn.close()


def select_scalar(cn: DbConnection, command: str | CommandText,
                  close_connection: bool = False) -> Any:
    """Execute a query and return the first column of the first row.

    Database nulls are returned as None.
    """
    with _opened(cn, close_connection):
        return cn.create_command(command).execute_scalar()


def select(cn: DbConnection, command: str | CommandText,
           close_connection: bool = False) -> pd.DataFrame:
    """Execute a query and return the result as a DataFrame.

    Columns are preserved for empty results.
    """
    with _opened(cn, close_connection):
        with cn.create_command(command).execute_reader() as reader:
            columns = reader.names
            data = [tuple(reader.get_value(i) for i in range(reader.field_count))
                    for _ in reader]
    return pd.DataFrame.from_records(data, columns=columns)


def select_rows(cn: DbConnection, command: str | CommandText,
                close_connection: bool = False) -> list[attrdict]:
    """Execute a query and return rows as dicts in column order."""
    with _opened(cn, close_connection):
        with cn.create_command(command).execute_reader() as reader:
            return [attrdict(zip(reader.names, (reader.get_value(i) for i in range(reader.field_count))))
                    for _ in reader]


def select_column(cn: DbConnection, command: str | CommandText, column_name: str,
                  close_connection: bool = False) -> list[Any]:
    """Execute a query and return the values of one named column."""
    rows = select_rows(cn, command, close_connection)
    if rows and column_name not in rows[0]:
        raise NotFoundError(f'Column {column_name} not found in result')
    return [row[column_name] for row in rows]


def ddl(cn: DbConnection, command: str | CommandText,
        close_connection: bool = False) -> int:
    """Execute a statement that returns no rows; return the affected row count."""
    with _opened(cn, close_connection):
        rowcount = cn.create_command(command).execute_non_query()
    logger.debug(f'Executed statement, {rowcount} rows affected')
    return rowcount


def execute(cmd: DbCommand, close_connection: bool = False) -> int:
    """Execute a prepared command on its connection; return the affected row count."""
    if cmd is None:
        raise InvalidArgumentError('Command is required')
    with _opened(cmd.connection, close_connection):
        return cmd.execute_non_query()

"""
Commands, parameters and readers executed through a DbConnection.

DbCommand carries command text (a string or a CommandText rendered at
execution time) and a ParameterCollection. Input parameters are bound by name
to `@name` placeholders through SQLAlchemy bind parameters; text with no
bound parameters is passed to the driver as is.
"""
import logging
import re
import time
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from datahelper.command_text import CommandText
from datahelper.exceptions import InvalidArgumentError, NotFoundError
from datahelper.types import DbType, ParameterDirection, is_null
from datahelper.types import to_sqlalchemy_type

if TYPE_CHECKING:
    from datahelper.connection import DbConnection

__all__ = ['DbParameter', 'ParameterCollection', 'DbCommand', 'DataReader']

logger = logging.getLogger(__name__)

_BOUND_DIRECTIONS = (ParameterDirection.INPUT, ParameterDirection.INPUT_OUTPUT)

_BIND_COLON = re.compile(r'(?<![:\w\\]):(?=\w)')


@dataclass
class DbParameter:
    """A named command parameter."""
    parameter_name: str = ''
    direction: ParameterDirection = ParameterDirection.INPUT
    db_type: DbType = DbType.OBJECT
    size: int = 0
    value: Any = None

    @property
    def bind_name(self) -> str:
        """Parameter name without its `@` or `:` prefix."""
        return self.parameter_name.lstrip('@:')


class ParameterCollection(list):
    """List of DbParameter, also indexable by parameter name."""

    def __getitem__(self, key):
        if isinstance(key, str):
            for parameter in self:
                if parameter.parameter_name == key:
                    return parameter
            raise NotFoundError(f'Parameter {key} not found')
        return super().__getitem__(key)

    def __contains__(self, item) -> bool:
        if isinstance(item, str):
            return any(p.parameter_name == item for p in self)
        return super().__contains__(item)

    def names(self) -> list[str]:
        return [p.parameter_name for p in self]


class DataReader:
    """Forward-only reader over a SQLAlchemy result.

    Call `read()` to advance to the next row before accessing values.
    """

    def __init__(self, result: sa.CursorResult) -> None:
        self._result = result
        self._names = list(result.keys()) if result.returns_rows else []
        self._row: tuple | None = None

    @property
    def field_count(self) -> int:
        return len(self._names)

    @property
    def names(self) -> list[str]:
        return list(self._names)

    @property
    def rowcount(self) -> int:
        return self._result.rowcount

    def read(self) -> bool:
        """Advance to the next row. Returns False when exhausted."""
        if not self._names:
            return False
        row = self._result.fetchone()
        self._row = tuple(row) if row is not None else None
        return self._row is not None

    def get_name(self, ordinal: int) -> str:
        return self._names[ordinal]

    def get_ordinal(self, name: str) -> int:
        try:
            return self._names.index(name)
        except ValueError:
            raise NotFoundError(f'Column {name} not found in result') from None

    def get_value(self, ordinal: int) -> Any:
        if self._row is None:
            raise InvalidArgumentError('No current row, call read() first')
        return self._row[ordinal]

    def get(self, column: str | int) -> Any:
        """Value of a column of the current row by name or ordinal."""
        if isinstance(column, str):
            column = self.get_ordinal(column)
        return self.get_value(column)

    __getitem__ = get

    def __iter__(self) -> Iterator['DataReader']:
        while self.read():
            yield self

    def close(self) -> None:
        self._result.close()

    def __enter__(self) -> 'DataReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class DbCommand:
    """Command text plus parameters bound to a connection.
    """

    def __init__(self, connection: 'DbConnection | None' = None,
                 command_text: str | CommandText = '') -> None:
        self.connection = connection
        self.command_text = command_text
        self.parameters = ParameterCollection()

    def create_parameter(self) -> DbParameter:
        return DbParameter()

    @property
    def text(self) -> str:
        """Command text as sent to the driver."""
        if isinstance(self.command_text, CommandText):
            return self.command_text.render()
        return self.command_text

    def _statement(self) -> tuple[str, list[sa.BindParameter]]:
        text = self.text
        bound = {p.bind_name: p for p in self.parameters
                 if p.direction in _BOUND_DIRECTIONS}
        if not bound:
            return text, []

        used = []

        def to_bind(match: re.Match) -> str:
            name = match.group(1)
            if name not in bound:
                return match.group(0)
            if name not in used:
                used.append(name)
            return f':{name}'

        # colons already in the text are literal, not SQLAlchemy binds
        text = _BIND_COLON.sub(r'\\:', text)
        text = re.sub(r'(?<![\w@])@(\w+)', to_bind, text)
        binds = [sa.bindparam(name, bound[name].value,
                              type_=to_sqlalchemy_type(bound[name].db_type, bound[name].size))
                 for name in used]
        return text, binds

    def _execute(self) -> sa.CursorResult:
        if self.connection is None:
            raise InvalidArgumentError('Command has no connection')
        sa_connection = self.connection.sa_connection
        if sa_connection is None:
            raise InvalidArgumentError('Command connection is not open')

        text, binds = self._statement()
        logger.debug(f'SQL:\n{text}\nparams: {[b.key for b in binds]}')
        start = time.time()
        try:
            if binds:
                return sa_connection.execute(sa.text(text).bindparams(*binds))
            return sa_connection.exec_driver_sql(text)
        finally:
            logger.debug(f'Query time: {time.time() - start:.4f}s')

    def execute_scalar(self) -> Any:
        """Execute and return the first column of the first row, None for null."""
        result = self._execute()
        if not result.returns_rows:
            result.close()
            return None
        value = result.scalar()
        return None if is_null(value) else value

    def execute_reader(self) -> DataReader:
        return DataReader(self._execute())

    def execute_non_query(self) -> int:
        """Execute and return the number of affected rows."""
        result = self._execute()
        rowcount = result.rowcount
        result.close()
        return rowcount

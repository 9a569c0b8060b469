"""
Parameter helpers for DbCommand.

Each add_* function creates a parameter on the command, appends it and
returns the command so calls can be chained:

    cmd = cn.create_command('UPDATE t SET flag=@flag WHERE id=@id')
    add_input_parameter(cmd, '@flag', DbType.BOOLEAN, True)
    add_input_parameter(cmd, '@id', DbType.INT32, 42)

Booleans are bound as -1/0.
"""
import logging
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from datahelper.command import DbCommand, DbParameter
from datahelper.exceptions import InvalidArgumentError, NotFoundError
from datahelper.types import DbType, ParameterDirection

__all__ = [
    'CustomParameterConstructor',
    'CustomParameters',
    'add_parameter',
    'add_input_parameter',
    'add_output_parameter',
    'add_input_output_parameter',
    'add_custom_parameter',
    'get_parameter',
    'get_parameter_value',
]

logger = logging.getLogger(__name__)

CustomParameterConstructor = Callable[[DbCommand], DbParameter]


def get_parameter(cmd: DbCommand, key: str | int) -> DbParameter:
    """Get a parameter by name or index."""
    return cmd.parameters[key]


def get_parameter_value(cmd: DbCommand, key: str | int) -> Any:
    return cmd.parameters[key].value


def add_parameter(cmd: DbCommand, direction: ParameterDirection, name: str,
                  db_type: DbType, value: Any, size: int = -1) -> DbCommand:
    """Create and append a parameter.

    A None value leaves the parameter value unset; size is applied only
    when greater than -1.
    """
    prm = cmd.create_parameter()
    prm.parameter_name = name
    prm.direction = direction
    prm.db_type = db_type

    if value is not None:
        if isinstance(value, bool):
            prm.value = -1 if value else 0
        else:
            prm.value = value

    if size > -1:
        prm.size = size

    cmd.parameters.append(prm)
    return cmd


def add_input_parameter(cmd: DbCommand, name: str, db_type: DbType, value: Any,
                        size: int = -1) -> DbCommand:
    return add_parameter(cmd, ParameterDirection.INPUT, name, db_type, value, size)


def add_output_parameter(cmd: DbCommand, name: str, db_type: DbType,
                         size: int = -1) -> DbCommand:
    return add_parameter(cmd, ParameterDirection.OUTPUT, name, db_type, None, size)


def add_input_output_parameter(cmd: DbCommand, name: str, db_type: DbType, value: Any,
                               size: int = -1) -> DbCommand:
    return add_parameter(cmd, ParameterDirection.INPUT_OUTPUT, name, db_type, value, size)


def add_custom_parameter(cmd: DbCommand, name: str, direction: ParameterDirection,
                         constructor: CustomParameterConstructor | str) -> DbCommand:
    """Append a parameter built by a custom constructor.

    `constructor` is either a callable taking the command, or the name of a
    constructor registered in CustomParameters.
    """
    if isinstance(constructor, str):
        constructor = CustomParameters.instance()[constructor]
    prm = constructor(cmd)
    prm.parameter_name = name
    prm.direction = direction
    cmd.parameters.append(prm)
    return cmd


class CustomParameters:
    """Process-wide table of named custom parameter constructors.

    Populated once at startup; the first call to `instance()` with a mapping
    wins and the table is read-only afterwards.
    """

    _instance: 'CustomParameters | None' = None
    _lock = threading.RLock()

    def __init__(self, parameters: Mapping[str, CustomParameterConstructor]) -> None:
        if parameters is None:
            raise InvalidArgumentError('parameters is required')
        self._parameters = MappingProxyType(dict(parameters))

    def __getitem__(self, name: str) -> CustomParameterConstructor:
        try:
            return self._parameters[name]
        except KeyError:
            raise NotFoundError(f'Custom parameter {name} is not registered') from None

    def __contains__(self, name: str) -> bool:
        return name in self._parameters

    def names(self) -> list[str]:
        return list(self._parameters)

    @classmethod
    def instance(cls, parameters: Mapping[str, CustomParameterConstructor] | None = None
                 ) -> 'CustomParameters':
        """Get the table, creating it from `parameters` on first call."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls(parameters)
                logger.debug(f'Custom parameters installed: {cls._instance.names()}')
            return cls._instance

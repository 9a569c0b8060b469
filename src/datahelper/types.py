"""
Shared types for commands, parameters and connections.

This module provides:
- ParameterDirection, DbType, ConnectionState enums
- is_null: database-null detection for driver and pandas values
- to_sqlalchemy_type: DbType -> SQLAlchemy bind type
"""
import math
from enum import Enum, auto
from typing import Any

import numpy as np
import pandas as pd
import sqlalchemy as sa

DEFAULT_INSTANCE_ID = '__DEFAULT__'


class ParameterDirection(Enum):
    """Direction of a command parameter."""
    INPUT = 1
    OUTPUT = 2
    INPUT_OUTPUT = 3
    RETURN_VALUE = 6


class ConnectionState(Enum):
    """Open state of a DbConnection."""
    CLOSED = 0
    OPEN = 1


class DbType(Enum):
    """Logical database type of a command parameter."""
    ANSI_STRING = auto()
    ANSI_STRING_FIXED_LENGTH = auto()
    BINARY = auto()
    BOOLEAN = auto()
    BYTE = auto()
    CURRENCY = auto()
    DATE = auto()
    DATETIME = auto()
    DATETIME_OFFSET = auto()
    DECIMAL = auto()
    DOUBLE = auto()
    GUID = auto()
    INT16 = auto()
    INT32 = auto()
    INT64 = auto()
    OBJECT = auto()
    SINGLE = auto()
    STRING = auto()
    STRING_FIXED_LENGTH = auto()
    TIME = auto()
    XML = auto()


def is_null(value: Any) -> bool:
    """Check if a value is None or a database-null sentinel.

    pandas.NA, pandas.NaT and NaN floats (Python or NumPy) are the nulls
    produced when result sets pass through pandas.
    """
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, np.floating) and np.isnan(value):
        return True
    return isinstance(value, np.datetime64 | np.timedelta64) and np.isnat(value)


def to_sqlalchemy_type(db_type: DbType, size: int = 0) -> sa.types.TypeEngine | None:
    """Map a DbType to the SQLAlchemy type used to bind the parameter.

    Booleans bind as small integers since they are passed as -1/0. Returns
    None for DbType.OBJECT so SQLAlchemy infers the type from the value.
    """
    length = size if size and size > 0 else None
    match db_type:
        case (DbType.ANSI_STRING | DbType.ANSI_STRING_FIXED_LENGTH | DbType.STRING
              | DbType.STRING_FIXED_LENGTH | DbType.XML):
            return sa.String(length)
        case DbType.BINARY:
            return sa.LargeBinary(length)
        case DbType.BOOLEAN | DbType.BYTE | DbType.INT16:
            return sa.SmallInteger()
        case DbType.INT32:
            return sa.Integer()
        case DbType.INT64:
            return sa.BigInteger()
        case DbType.CURRENCY | DbType.DECIMAL:
            return sa.Numeric()
        case DbType.DOUBLE | DbType.SINGLE:
            return sa.Float()
        case DbType.DATE:
            return sa.Date()
        case DbType.DATETIME:
            return sa.DateTime()
        case DbType.DATETIME_OFFSET:
            return sa.DateTime(timezone=True)
        case DbType.TIME:
            return sa.Time()
        case DbType.GUID:
            return sa.Uuid()
    return None

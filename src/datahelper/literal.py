"""
SQL literal formatting for values substituted into command text.
"""
import datetime
import decimal
from typing import Any

import numpy as np
import pandas as pd
from datahelper.types import is_null

__all__ = ['sql_value', 'to_sql_value']


def _format_timestamp(value: datetime.datetime) -> str:
    return f"TIMESTAMP '{value:%Y-%m-%d %H:%M:%S}.{value.microsecond // 1000:03d}'"


def _format_interval(value: datetime.timedelta) -> str:
    # sign is dropped: components come from the absolute value
    value = abs(value)
    hours, remainder = divmod(value.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    millis = value.microseconds // 1000
    return f"INTERVAL '{value.days:02d} {hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}'"


def _format_number(value: Any) -> str:
    """Fixed-point, culture-invariant text: no grouping, no exponent."""
    if isinstance(value, decimal.Decimal):
        number = value
    else:
        number = decimal.Decimal(str(value))
        if number.is_finite() and number == number.to_integral_value():
            number = number.to_integral_value()
    if not number.is_finite():
        return str(value)
    return format(number, 'f')


def sql_value(value: Any) -> str:
    """Format a value as a SQL literal.

    Strings are single quoted without escaping embedded quotes. Booleans
    format as -1/0, timestamps as TIMESTAMP '...' and intervals as
    INTERVAL '...'. Unrecognized types use str().
    """
    if is_null(value):
        return 'NULL'
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, bool | np.bool_):
        return '-1' if value else '0'
    if isinstance(value, np.datetime64):
        value = pd.Timestamp(value).to_pydatetime()
    if isinstance(value, datetime.datetime):
        return _format_timestamp(value)
    if isinstance(value, datetime.date):
        return _format_timestamp(datetime.datetime.combine(value, datetime.time()))
    if isinstance(value, np.timedelta64):
        value = pd.Timedelta(value).to_pytimedelta()
    if isinstance(value, datetime.timedelta):
        return _format_interval(value)
    if isinstance(value, float | np.floating | decimal.Decimal):
        return _format_number(value)
    return f'{value}'


to_sql_value = sql_value

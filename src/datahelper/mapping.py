"""
Conversion of result rows into dicts and typed objects.

PropertyMappings pairs the attributes of a class with result columns of the
same name; `to_list` uses it to build one object per DataFrame row.
"""
import dataclasses
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

import pandas as pd
from datahelper.command import DataReader
from datahelper.types import is_null

__all__ = [
    'PropertyMapping',
    'PropertyMappings',
    'get_mappings',
    'to_list',
    'row_to_dict',
    'reader_to_dict',
    'reader_to_list',
]

T = TypeVar('T')


@dataclass(frozen=True)
class PropertyMapping:
    """Object attribute <-> result column."""
    attribute: str
    column: str

    def __str__(self) -> str:
        return f'{self.attribute} => (Db) {self.column}'


def _attribute_names(cls: type) -> list[str]:
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls) if f.init]
    names = []
    for klass in reversed(cls.__mro__):
        for name in getattr(klass, '__annotations__', {}):
            if not name.startswith('_') and name not in names:
                names.append(name)
    return names


def get_mappings(cls: type, excluding: Iterable[str] | None = None,
                 including: Iterable[str] | None = None) -> list[PropertyMapping]:
    """Map the public attributes of `cls` to columns of the same name.

    `excluding` drops attributes; `including`, when given, keeps only the
    listed attributes.
    """
    excluding = set(excluding or ())
    including = set(including) if including is not None else None
    return [PropertyMapping(name, name) for name in _attribute_names(cls)
            if name not in excluding and (including is None or name in including)]


class PropertyMappings:
    """Iterable of PropertyMapping for a class."""

    def __init__(self, cls: type, excluding: Iterable[str] | None = None,
                 including: Iterable[str] | None = None) -> None:
        self.cls = cls
        self._mappings = get_mappings(cls, excluding, including)

    def __iter__(self) -> Iterator[PropertyMapping]:
        return iter(self._mappings)

    def __len__(self) -> int:
        return len(self._mappings)


def _native(value: Any) -> Any:
    if is_null(value):
        return None
    if hasattr(value, 'item') and callable(value.item):
        return value.item()
    return value


def to_list(frame: pd.DataFrame, cls: type[T],
            mappings: Iterable[PropertyMapping] | None = None) -> list[T]:
    """Build one `cls` instance per row, nulls mapped to None.

    Dataclasses are constructed with keyword arguments; other classes are
    created with no arguments and have attributes set.
    """
    mappings = list(mappings if mappings is not None else PropertyMappings(cls))
    items = []
    for record in frame.to_dict('records'):
        values = {m.attribute: _native(record[m.column]) for m in mappings}
        if dataclasses.is_dataclass(cls):
            item = cls(**values)
        else:
            item = cls()
            for name, value in values.items():
                setattr(item, name, value)
        items.append(item)
    return items


def row_to_dict(row: pd.Series) -> dict[str, Any]:
    """Convert a DataFrame row to a dict in column order."""
    return {column: row[column] for column in row.index}


def reader_to_dict(reader: DataReader) -> dict[str, Any]:
    """Convert the reader's current row to a dict in column order."""
    return {reader.get_name(i): reader.get_value(i) for i in range(reader.field_count)}


def reader_to_list(reader: DataReader) -> list[dict[str, Any]]:
    """Read all remaining rows as dicts."""
    return [reader_to_dict(reader) for _ in reader]

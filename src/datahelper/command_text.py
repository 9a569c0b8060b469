"""
Command text templates with `@name` placeholders.

A CommandText is a dict of placeholder -> value bound to a template string.
Rendering substitutes the SQL literal of each bound value:

    >>> text = CommandText('SELECT * FROM t WHERE id=@id AND name=@name')
    >>> text.add('@id', 5)
    >>> text.add('@name', 'bob')
    >>> text.render()
    "SELECT * FROM t WHERE id=5 AND name='bob'"

Placeholder matching runs under a time budget so a caller supplied pattern
cannot hang rendering.
"""
import logging
from typing import TYPE_CHECKING, Any

import regex
from datahelper.exceptions import InvalidArgumentError, PatternTimeoutError
from datahelper.literal import sql_value

if TYPE_CHECKING:
    from datahelper.command import DataReader

__all__ = ['CommandText', 'PLACEHOLDER_PATTERN', 'PATTERN_TIMEOUT']

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = r'\@[a-zA-Z0-9_]+'
PATTERN_TIMEOUT = 0.1


class CommandText(dict):
    """Template string plus placeholder bindings.

    Keys are the placeholder text including its prefix (e.g. `@id`). A
    placeholder with no binding is left as is; a binding with no matching
    placeholder has no effect.
    """

    def __init__(self, value: str, pattern: str = PLACEHOLDER_PATTERN,
                 timeout: float = PATTERN_TIMEOUT) -> None:
        super().__init__()
        self.value = value
        self.timeout = timeout
        self._pattern = regex.compile(pattern)

    @property
    def value(self) -> str:
        """The unrendered template."""
        return self._value

    @value.setter
    def value(self, value: str) -> None:
        if value is None:
            raise InvalidArgumentError('Command text value cannot be None')
        self._value = value

    @property
    def pattern(self) -> str:
        return self._pattern.pattern

    def add(self, key: str, value: Any) -> None:
        """Bind (or rebind) a placeholder to a value."""
        self[key] = value

    def add_from_reader(self, key: str, reader: 'DataReader', column: str | int) -> None:
        """Bind a placeholder to a column of the reader's current row.

        `column` is either a column name or an ordinal.
        """
        if isinstance(column, str):
            column = reader.get_ordinal(column)
        self[key] = reader.get_value(column)

    def _substitute(self, match: 'regex.Match') -> str:
        placeholder = match.group()
        if placeholder not in self:
            return placeholder
        bound = self[placeholder]
        return '' if bound is None else sql_value(bound)

    def render(self) -> str:
        """Return the template with bound placeholders substituted.

        The template and bindings are left unchanged, so rendering can be
        repeated after bindings change. Do not render the output again.
        """
        try:
            rendered = self._pattern.sub(self._substitute, self._value, timeout=self.timeout)
        except TimeoutError as err:
            raise PatternTimeoutError(
                f'Placeholder pattern {self.pattern!r} exceeded {self.timeout}s') from err
        logger.debug(f'Rendered command text with {len(self)} bindings')
        return rendered

    @property
    def command_text(self) -> str:
        return self.render()

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f'CommandText({self._value!r}, bindings={dict.__repr__(self)})'

"""
Library of delimiter patterns. A delimiter is any object with a `find` method that returns the
`streamsplit.lib.types.Span` of the first match in a given buffer; the `streamsplit.lib.patterns.pattern`
class implements this for binary regular expressions.
"""
from __future__ import annotations

import enum
import functools
import re

from typing import Optional, Union

from streamsplit.lib.types import Delimiter, Span, buf, typename


class pattern:
    """
    A delimiter backed by a binary regular expression. The expression can be given as a string,
    which is encoded as latin-1, as a bytes-like object, or as a compiled pattern. Only matches
    of nonzero length are reported: a zero length match carries no delimiter bytes that could
    be consumed, so it can never separate two records.
    """
    bin_pattern: bytes

    def __init__(self, expression: Union[str, buf, re.Pattern], flags: int = 0):
        if isinstance(expression, re.Pattern):
            if isinstance(expression.pattern, str):
                raise TypeError('delimiter patterns must be compiled from a binary expression')
            self.bin_pattern = expression.pattern
            self.flags = expression.flags
            self.__dict__['bin'] = expression
            return
        if isinstance(expression, str):
            expression = expression.encode('latin-1')
        self.bin_pattern = bytes(expression)
        self.flags = flags

    def __bytes__(self):
        return self.bin_pattern

    def __str__(self):
        return self.bin_pattern.decode('latin-1')

    def __repr__(self):
        return F'<{self.__class__.__name__} {self.bin_pattern!r}>'

    @functools.cached_property
    def bin(self) -> re.Pattern[bytes]:
        return re.compile(self.bin_pattern, flags=self.flags)

    def __hash__(self):
        return hash((self.bin_pattern, self.flags))

    def __eq__(self, other):
        if isinstance(other, pattern):
            return self.bin_pattern == other.bin_pattern and self.flags == other.flags
        return NotImplemented

    def find(self, data: buf) -> Optional[Span]:
        """
        Return the span of the first nonempty match of this pattern within `data`, or `None` if
        there is no such match.
        """
        for match in self.bin.finditer(data):
            start, end = match.span()
            if end > start:
                return Span(start, end)
        return None


class literal(pattern):
    """
    A delimiter that matches a fixed byte string.
    """
    def __init__(self, separator: Union[str, buf]):
        if isinstance(separator, str):
            separator = separator.encode('latin-1')
        separator = bytes(separator)
        if not separator:
            raise ValueError('the literal delimiter must not be empty')
        self.separator = separator
        super().__init__(re.escape(separator))


class _PatternEnum(enum.Enum):
    @classmethod
    def get(cls, name, default=None):
        try:
            return cls[name]
        except KeyError:
            return default

    def __str__(self):
        return str(self.value)

    def __bytes__(self):
        return bytes(self.value)

    def __repr__(self):
        return F'<pattern {self.name}: {self.value}>'

    def find(self, data: buf) -> Optional[Span]:
        return self.value.find(data)


class separators(_PatternEnum):
    """
    An enumeration of common record separators. Each of them can be used directly as a delimiter
    or referenced as `(??name)` within a delimiter expression.
    """
    whitespace = pattern(R'\s+')
    "A run of whitespace characters"
    newline = pattern(R'\r?\n')
    "A single line break"
    line = pattern(R'[\r\n]+')
    "A run of line breaks, so that blank lines do not produce empty records"
    paragraph = pattern(R'(?:\r?\n){2,}')
    "Two or more line breaks"
    comma = pattern(R'\s*,\s*')
    "A comma with optional surrounding whitespace"
    tab = pattern(R'\t')
    "A single tab character"
    nul = pattern(R'\x00')
    "A single null byte"
    words = pattern(R'[\s"\.,!\?:;/]+')
    "Whitespace and punctuation that separates words in prose"


def expand_named_separators(expression: str) -> str:
    """
    Replaces every reference of the form `(??name)` within `expression` by a non-capturing group
    containing the expression of the separator with that name. Raises a `ValueError` for unknown
    names.
    """
    if '(??' not in expression:
        return expression

    def replace(match: re.Match[str]):
        name = match[1]
        separator = separators.get(name)
        if separator is None:
            names = ', '.join(s.name for s in separators)
            raise ValueError(F'unknown separator name {name!r}; pick from: {names}')
        return F'(?:{separator})'

    return re.sub(R'\(\?\?(\w+)\)', replace, expression)


def compile_delimiter(
    expression: Union[str, buf],
    multiline: bool = False,
    ignorecase: bool = False,
) -> pattern:
    """
    Compile a delimiter from user input. By default, a dot also matches line breaks; with the
    `multiline` option, caret and dollar match at line boundaries instead. Named separators can
    be referenced as `(??name)` in string expressions.
    """
    flags = re.MULTILINE if multiline else re.DOTALL
    if ignorecase:
        flags |= re.IGNORECASE
    if isinstance(expression, str):
        expression = expand_named_separators(expression)
        expression = expression.encode('latin-1')
    return pattern(re.compile(bytes(expression), flags))


def as_delimiter(obj) -> Delimiter:
    """
    Convert `obj` into a delimiter. Objects that already have a `find` method returning spans
    are used as they are, compiled binary regular expressions are wrapped, and strings or bytes
    are compiled as regular expressions.
    """
    if isinstance(obj, (pattern, separators)):
        return obj
    if isinstance(obj, re.Pattern):
        return pattern(obj)
    if isinstance(obj, (str, bytes, bytearray, memoryview)):
        return compile_delimiter(obj)
    if callable(getattr(obj, 'find', None)):
        return obj
    raise TypeError(F'cannot use an object of type {typename(obj)} as a delimiter')

"""
This module is used as a unified resource for the types that are primarily used for type hints,
and for the two capabilities that the splitter consumes: a readable byte source and a delimiter.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import Union
    buf = Union[bytes, bytearray, memoryview]
else:
    buf = Any


__all__ = [
    'buf',
    'Delimiter',
    'isbuffer',
    'isstream',
    'Source',
    'Span',
    'typename',
]


class Span(NamedTuple):
    """
    The offsets of a delimiter match, relative to the start of the searched data. The match covers
    the bytes from `start` up to but not including `end`.
    """
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


@runtime_checkable
class Source(Protocol):
    """
    A readable byte source following the blocking `io.RawIOBase.readinto` contract: the method
    fills a prefix of the given buffer and returns the number of bytes written. A return value of
    zero means that the source is exhausted, `None` means that a non-blocking source has no data
    available right now.
    """
    def readinto(self, buffer: memoryview) -> Optional[int]:
        ...


@runtime_checkable
class Delimiter(Protocol):
    """
    A pattern matcher which locates the first delimiter in a byte buffer. Implementations must not
    depend on state carried over between calls.
    """
    def find(self, data: buf) -> Optional[Span]:
        ...


def isstream(obj) -> bool:
    """
    Tests whether `obj` is a stream. This is currently done by simply testing whether the object
    has an attribute called `read`.
    """
    return hasattr(obj, 'read')


def isbuffer(obj) -> bool:
    """
    Test whether `obj` is an object that supports the buffer API, like a bytes or bytearray object.
    """
    try:
        with memoryview(obj):
            return True
    except TypeError:
        return False


def typename(thing):
    """
    Determines the name of the type of an object.
    """
    if not isinstance(thing, type):
        thing = type(thing)
    mro = [c for c in thing.__mro__ if c is not object]
    if mro:
        thing = mro[~0]
    try:
        return thing.__name__
    except AttributeError:
        return repr(thing)

"""
Adapters that give various kinds of input the `readinto` interface of a
`streamsplit.lib.types.Source`.
"""
from __future__ import annotations

import io

from typing import Iterable, Iterator, Optional

from streamsplit.lib.types import Source, buf, isbuffer, isstream, typename


class ChunkedSource:
    """
    Serves the byte chunks produced by an iterable as a readable source. A chunk that is larger
    than the requested region is handed out over several reads. Empty chunks are skipped, since
    a read of zero bytes would signal the end of the data.
    """

    _chunks: Iterator[buf]
    _pending: memoryview

    def __init__(self, chunks: Iterable[buf]):
        self._chunks = iter(chunks)
        self._pending = memoryview(B'')

    def readinto(self, b) -> int:
        while not self._pending:
            try:
                chunk = next(self._chunks)
            except StopIteration:
                return 0
            self._pending = memoryview(chunk).cast('B')
        size = min(len(b), len(self._pending))
        b[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


class StreamReader:
    """
    Wraps a stream that only offers a `read` method.
    """

    def __init__(self, stream):
        self.stream = stream

    def readinto(self, b) -> Optional[int]:
        data = self.stream.read(len(b))
        if data is None:
            return None
        size = len(data)
        b[:size] = data
        return size


class SocketReader:
    """
    Wraps a socket-like object that offers a `recv_into` method.
    """

    def __init__(self, sock):
        self.sock = sock

    def readinto(self, b) -> int:
        return self.sock.recv_into(b)


def as_source(obj) -> Source:
    """
    Convert `obj` into a readable source. Objects with a `readinto` method are used directly;
    sockets, streams with only a `read` method, bytes-like objects and iterables of chunks are
    wrapped in the appropriate adapter.
    """
    if callable(getattr(obj, 'readinto', None)):
        return obj
    if callable(getattr(obj, 'recv_into', None)):
        return SocketReader(obj)
    if isstream(obj):
        return StreamReader(obj)
    if isbuffer(obj):
        return io.BytesIO(obj)
    if isinstance(obj, str):
        raise TypeError('a string cannot be used as a byte source; encode it first')
    try:
        chunks = iter(obj)
    except TypeError:
        raise TypeError(F'cannot read from an object of type {typename(obj)}') from None
    return ChunkedSource(chunks)

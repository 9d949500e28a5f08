"""
The splitter engine. A `streamsplit.splitter.StreamSplitter` reads from a byte source into one
growable buffer and yields the records between the matches of a delimiter pattern, one record
per pull, without reading the entire input into memory:

    from streamsplit import StreamSplitter, separators

    with open('words.txt', 'rb') as stream:
        for record in StreamSplitter(stream, separators.whitespace):
            process(record)

Records are lent: each one is a `memoryview` into the internal buffer, which the splitter
releases when the next record is requested. Any access to a released record raises a
`ValueError`. To keep the data of a record beyond that point, copy it with `bytes(record)`,
pass `copy=True` to the splitter, or use `streamsplit.splitter.split`, which yields copies.

A delimiter match that extends up to the end of the buffered data is not acted upon while the
source may still provide more data, because the next read could extend the match. For example,
with the delimiter `\\s+`, a run of spaces that spans two reads must be consumed as a whole.
The splitter therefore only separates a record once the buffer holds at least one byte beyond
the match, or once the source is exhausted.
"""
from __future__ import annotations

import errno

from typing import Generator, Optional

from streamsplit.lib.environment import environment, logger
from streamsplit.lib.patterns import as_delimiter
from streamsplit.lib.sources import as_source
from streamsplit.lib.types import Delimiter, Source

__all__ = [
    'DEFAULT_CAPACITY',
    'StreamSplitter',
    'split',
]

DEFAULT_CAPACITY = 64 * 1024
"""
The default initial size of the buffer; it can be overridden by `STREAMSPLIT_CAPACITY`.
"""

log = logger(__name__)


class StreamSplitter:
    """
    An iterator over the records of a byte `source`, separated by matches of `delimiter`. The
    source can be anything with a `readinto` method; see `streamsplit.lib.sources.as_source` for
    the other accepted kinds of input. The delimiter can be a pattern from
    `streamsplit.lib.patterns`, a compiled binary regular expression or an expression string.

    The internal buffer is pre-allocated to `capacity` bytes and doubles in size whenever it
    fills up before a record could be separated, so it grows proportional to the largest
    record. With `copy` enabled, records are returned as `bytes` rather than lent views.

    The delimiter must not change while the splitter is in use, and the splitter must not be
    driven from more than one thread at a time. The source is never closed by the splitter.
    """

    _source: Source
    _delimiter: Delimiter
    _buffer: bytearray
    _start: int
    _end: int
    _eof: bool
    _copy: bool
    _lent: Optional[memoryview]

    def __init__(self, source, delimiter, capacity: Optional[int] = None, copy: Optional[bool] = None):
        if capacity is None:
            capacity = environment.capacity.value
            if not capacity or capacity < 0:
                capacity = DEFAULT_CAPACITY
        if capacity < 0:
            raise ValueError(F'invalid buffer capacity {capacity}')
        if copy is None:
            copy = bool(environment.copy_records.value)
        self._source = as_source(source)
        self._delimiter = as_delimiter(delimiter)
        self._buffer = bytearray(capacity)
        self._start = 0
        self._end = 0
        self._eof = False
        self._copy = copy
        self._lent = None

    @classmethod
    def with_capacity(cls, source, delimiter, capacity: int, copy: Optional[bool] = None):
        """
        Create a splitter whose buffer is pre-allocated with `capacity` bytes.
        """
        return cls(source, delimiter, capacity, copy)

    @property
    def capacity(self) -> int:
        """
        The current size of the internal buffer.
        """
        return len(self._buffer)

    @property
    def exhausted(self) -> bool:
        """
        Whether the source has signaled the end of its data.
        """
        return self._eof

    @property
    def window(self) -> tuple[int, int]:
        """
        The buffer offsets of the data that has been read but not yet consumed.
        """
        return self._start, self._end

    def __iter__(self):
        return self

    def __next__(self):
        self._release()
        while True:
            self._fill()
            start = self._start
            end = self._end
            if start == end and self._eof:
                raise StopIteration
            window = memoryview(self._buffer)[start:end]
            match = self._delimiter.find(window)
            if match is None:
                if not self._eof:
                    window.release()
                    continue
                log.debug('yielding final record of %d bytes', end - start)
                self._start = end
                return self._lend(window)
            if start + match.end == end and not self._eof:
                log.debug('delimiter match at offset %d reaches the end of the buffered data', start + match.start)
                window.release()
                continue
            self._start = start + match.end
            record = window[:match.start]
            window.release()
            return self._lend(record)

    def _lend(self, record: memoryview):
        if self._copy:
            with record:
                return bytes(record)
        self._lent = record
        return record

    def _release(self):
        lent, self._lent = self._lent, None
        if lent is None:
            return
        try:
            lent.release()
        except BufferError:
            log.debug('the previous record is still exported and cannot be released')

    def _fill(self):
        """
        Read more data from the source into the buffer, making room first if the buffer is full.
        When the read fails, the window offsets and the exhaustion state remain as they were.
        """
        if self._eof:
            return
        start, end = self._start, self._end
        capacity = len(self._buffer)
        if end == capacity:
            if start == end and capacity > 0:
                log.debug('reusing fully consumed buffer of %d bytes', capacity)
                self._start = self._end = 0
            elif start > 0:
                self._compact()
            else:
                self._grow()
        try:
            with memoryview(self._buffer) as view:
                count = self._source.readinto(view[self._end:])
            if count is None:
                raise BlockingIOError(errno.EAGAIN, 'the source has no data available')
        except Exception:
            if self._start != start:
                self._restore(start, end)
            raise
        if count > 0:
            self._end += count
        else:
            log.debug('source exhausted after %d buffered bytes', self._end)
            self._eof = True

    def _compact(self):
        start, end = self._start, self._end
        size = end - start
        log.debug('moving %d unconsumed bytes from offset %d to the start of the buffer', size, start)
        self._buffer[:size] = self._buffer[start:end]
        self._start = 0
        self._end = size

    def _restore(self, start: int, end: int):
        log.debug('moving %d unconsumed bytes back to offset %d after a failed read', end - start, start)
        self._buffer[start:end] = self._buffer[self._start:self._end]
        self._start = start
        self._end = end

    def _grow(self):
        capacity = len(self._buffer)
        grown = max(2 * capacity, 1)
        log.debug('growing buffer from %d to %d bytes', capacity, grown)
        try:
            self._buffer.extend(bytes(grown - capacity))
        except BufferError:
            buffer = bytearray(grown)
            buffer[:self._end] = self._buffer[:self._end]
            self._buffer = buffer


def split(source, delimiter, capacity: Optional[int] = None) -> Generator[bytes, None, None]:
    """
    Generate the records of `source` separated by `delimiter` as `bytes` objects that remain
    valid after the next record has been produced.
    """
    yield from StreamSplitter(source, delimiter, capacity, copy=True)

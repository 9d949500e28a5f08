R"""
The streamsplit package splits a byte stream into records at the matches of a delimiter pattern.
It reads the stream incrementally into a single reusable buffer and hands out each record as a
view into that buffer, so neither the whole input nor the individual records are copied.

1. `streamsplit.splitter`: the `streamsplit.splitter.StreamSplitter` engine and the `split`
   convenience generator.
2. `streamsplit.lib.patterns`: delimiter patterns and the named `separators`.
3. `streamsplit.lib.sources`: adapters that turn streams, sockets, buffers and iterables of
   chunks into readable sources.
4. `streamsplit.lib.environment`: configuration via `STREAMSPLIT_*` environment variables and
   the logging setup.

The `streamsplit` command line program is documented in `streamsplit.shell`.
"""
from __future__ import annotations

__version__ = '0.1.0'
__distribution__ = 'stream-splitter'

from streamsplit.lib.patterns import compile_delimiter, literal, pattern, separators
from streamsplit.lib.types import Span
from streamsplit.splitter import DEFAULT_CAPACITY, StreamSplitter, split

__all__ = [
    'compile_delimiter',
    'DEFAULT_CAPACITY',
    'literal',
    'pattern',
    'separators',
    'Span',
    'split',
    'StreamSplitter',
]

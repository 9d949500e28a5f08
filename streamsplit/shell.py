"""
The `streamsplit` command line program. It splits its input files, or standard input, at the
matches of a delimiter expression and writes the records to standard output, each followed by
a separator. With the `--count` option, it instead prints how often each record occurs, which
turns it into a simple word counter:

    streamsplit --count < book.txt
"""
from __future__ import annotations

import argparse
import codecs
import collections
import os
import re
import sys

from typing import Iterable, Optional

import streamsplit

from streamsplit.lib.environment import LogLevel, logger
from streamsplit.lib.patterns import compile_delimiter, separators
from streamsplit.splitter import StreamSplitter

log = logger(__name__)


def unescape(text: str) -> bytes:
    """
    Decode backslash escape sequences in the given text and return the result as bytes.
    """
    return codecs.decode(text, 'unicode_escape').encode('latin-1')


class OutputError(Exception):
    """
    Raised when writing to standard output fails; the underlying `OSError` is the cause.
    """


def _write(stream, *chunks: bytes, flush: bool = False):
    try:
        for chunk in chunks:
            stream.write(chunk)
        if flush:
            stream.flush()
    except OSError as error:
        raise OutputError(str(error)) from error


def records(inputs: Iterable[str], delimiter, capacity: Optional[int], skip_empty: bool):
    """
    Generate the records of all input files in order. The name `-` refers to standard input.
    """
    for path in inputs:
        if path == '-':
            yield from _records(sys.stdin.buffer, delimiter, capacity, skip_empty)
            continue
        with open(path, 'rb') as stream:
            yield from _records(stream, delimiter, capacity, skip_empty)


def _records(stream, delimiter, capacity, skip_empty):
    for record in StreamSplitter(stream, delimiter, capacity):
        if skip_empty and not record:
            continue
        yield record


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main routine of the streamsplit command line program.
    """
    argp = argparse.ArgumentParser(
        prog='streamsplit',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=(
            'Split the input at every match of a binary regular expression and write the records '
            'to standard output. Named separators can be used as (??name) within the expression; '
            'the available names are: {}.'
        ).format(', '.join(s.name for s in separators)),
    )
    argp.add_argument(
        'regex',
        nargs='?',
        default=None,
        help=(
            'The delimiter expression. The default is (??newline), or (??words) with --count. '
            'The first positional argument is always the expression, so give it explicitly when '
            'naming input files.'
        )
    )
    argp.add_argument(
        'files',
        metavar='file',
        nargs='*',
        help='Input files to split; use - or omit to read from standard input.'
    )
    argp.add_argument(
        '-c', '--capacity',
        type=lambda s: int(s, 0),
        default=None,
        help='Initial size of the read buffer in bytes.'
    )
    argp.add_argument(
        '-j', '--join',
        type=unescape,
        default=B'\n',
        help='Separator written after each record; escape sequences are decoded. Default: \\n'
    )
    argp.add_argument(
        '-s', '--skip-empty',
        action='store_true',
        help='Do not output empty records.'
    )
    argp.add_argument(
        '-n', '--count',
        action='store_true',
        help='Print how often each lower-cased record occurs rather than the records themselves.'
    )
    argp.add_argument(
        '-M', '--multiline',
        action='store_true',
        help='Caret and dollar match the beginning and end of a line, a dot does not match line breaks.'
    )
    argp.add_argument(
        '-I', '--ignorecase',
        action='store_true',
        help='Ignore capitalization for alphabetic characters in the expression.'
    )
    argp.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity; can be specified twice.'
    )
    argp.add_argument(
        '-V', '--version',
        action='store_true',
        help='Only show the installed version of streamsplit and exit.'
    )

    args = argp.parse_args(argv)

    if args.version:
        print(streamsplit.__version__)
        return 0

    if args.verbose:
        level = LogLevel.FromVerbosity(args.verbose)
        for name in (__name__, 'streamsplit.splitter'):
            logger(name).setLevel(level)

    if args.capacity is not None and args.capacity < 0:
        argp.error(F'invalid capacity: {args.capacity}')

    if args.regex is None:
        delimiter = separators.words if args.count else separators.newline
    else:
        try:
            delimiter = compile_delimiter(args.regex, args.multiline, args.ignorecase)
        except (re.error, ValueError) as error:
            argp.error(F'invalid delimiter expression {args.regex!r}: {error!s}')

    if args.regex is not None and not args.files and os.path.isfile(args.regex):
        log.warning(
            F'the delimiter expression {args.regex!r} is the name of an existing file; '
            F'reading from standard input because no input files were given')

    stdout = sys.stdout.buffer
    inputs = args.files or ['-']
    tally: collections.Counter[str] = collections.Counter()

    try:
        for record in records(inputs, delimiter, args.capacity, args.skip_empty):
            if args.count:
                tally[codecs.decode(record, 'utf8', errors='replace').lower()] += 1
            else:
                _write(stdout, record, args.join)
        if args.count:
            for word, count in sorted(tally.items()):
                _write(stdout, F'{count}\t{word}\n'.encode('utf8'))
        _write(stdout, flush=True)
    except OutputError as error:
        if isinstance(error.__cause__, BrokenPipeError):
            log.debug(F'standard output was closed: {error!s}')
            return 0
        log.error(F'failed to write output: {error!s}')
        return 1
    except OSError as error:
        log.error(F'failed to read input: {error!s}')
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())

import io

from streamsplit import separators, split
from streamsplit.lib.sources import ChunkedSource, SocketReader, StreamReader, as_source

from .. import TestBase


class TestSources(TestBase):

    def test_chunked_source_splits_large_chunks(self):
        source = ChunkedSource([B'abcdef'])
        buffer = bytearray(4)
        self.assertEqual(source.readinto(memoryview(buffer)), 4)
        self.assertEqual(buffer, B'abcd')
        self.assertEqual(source.readinto(memoryview(buffer)), 2)
        self.assertEqual(buffer[:2], B'ef')
        self.assertEqual(source.readinto(memoryview(buffer)), 0)

    def test_chunked_source_skips_empty_chunks(self):
        source = ChunkedSource([B'', B'ab', bytearray(), B'c'])
        buffer = bytearray(8)
        self.assertEqual(source.readinto(memoryview(buffer)), 2)
        self.assertEqual(source.readinto(memoryview(buffer)), 1)
        self.assertEqual(source.readinto(memoryview(buffer)), 0)

    def test_stream_reader(self):
        class ReadOnly:
            def __init__(self, data):
                self.data = io.BytesIO(data)

            def read(self, size):
                return self.data.read(size)

        source = as_source(ReadOnly(B'stream splitter'))
        self.assertIsInstance(source, StreamReader)
        buffer = bytearray(6)
        self.assertEqual(source.readinto(memoryview(buffer)), 6)
        self.assertEqual(buffer, B'stream')

    def test_stream_reader_without_data(self):
        class Starved:
            def read(self, size):
                return None

        self.assertIsNone(StreamReader(Starved()).readinto(memoryview(bytearray(4))))

    def test_socket_reader(self):
        class Socket:
            def __init__(self, data):
                self.data = io.BytesIO(data)

            def recv_into(self, b):
                return self.data.readinto(b)

        source = as_source(Socket(B'foo bar'))
        self.assertIsInstance(source, SocketReader)
        self.assertEqual(list(split(source, separators.whitespace)), [B'foo', B'bar'])

    def test_as_source(self):
        stream = io.BytesIO(B'data')
        self.assertIs(as_source(stream), stream)
        self.assertIsInstance(as_source(B'data'), io.BytesIO)
        self.assertIsInstance(as_source(bytearray(B'data')), io.BytesIO)
        self.assertIsInstance(as_source([B'da', B'ta']), ChunkedSource)
        with self.assertRaises(TypeError):
            as_source('data')
        with self.assertRaises(TypeError):
            as_source(42)

    def test_split_generated_chunks(self):
        chunks = (chunk for chunk in [B'he', B'llo wo', B'', B'rld'])
        self.assertEqual(list(split(chunks, separators.whitespace, 4)), [B'hello', B'world'])

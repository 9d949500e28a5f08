import logging
import random
import string
import unittest

import streamsplit


__all__ = ['streamsplit', 'TestBase', 'RecordingSource', 'FailingSource']


class RecordingSource:
    """
    A source that serves the given chunks, one chunk or less per read, and remembers the size of
    every region it was asked to fill as well as the number of bytes it returned.
    """
    def __init__(self, *chunks: bytes):
        self.chunks = [memoryview(c) for c in chunks]
        self.requests = []
        self.results = []

    @property
    def reads(self):
        return len(self.results)

    def readinto(self, b) -> int:
        self.requests.append(len(b))
        while self.chunks and not self.chunks[0]:
            self.chunks.pop(0)
        if not self.chunks:
            self.results.append(0)
            return 0
        chunk = self.chunks[0]
        size = min(len(b), len(chunk))
        b[:size] = chunk[:size]
        self.chunks[0] = chunk[size:]
        self.results.append(size)
        return size


class FailingSource(RecordingSource):
    """
    A recording source whose reads fail with the given error for each read index listed in
    `failures`, counting only the attempts.
    """
    def __init__(self, *chunks: bytes, failures=(), error=OSError):
        super().__init__(*chunks)
        self.failures = set(failures)
        self.attempts = 0
        self.error = error

    def readinto(self, b) -> int:
        attempt = self.attempts
        self.attempts += 1
        if attempt in self.failures:
            raise self.error(F'simulated failure of read {attempt}')
        return super().readinto(b)


class TestBase(unittest.TestCase):

    def generate_random_buffer(self, size):
        return bytes(random.randrange(0, 0x100) for _ in range(size))

    def generate_random_text(self, size):
        return ''.join(string.printable[
            random.randrange(0, len(string.printable))] for _ in range(size)).encode('UTF8')

    def setUp(self):
        random.seed(0xBAADF00D)  # guarantee deterministic 'random' buffers
        logging.disable(logging.CRITICAL)

    def tearDown(self):
        logging.disable(logging.NOTSET)

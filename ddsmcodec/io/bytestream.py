"""Reader for big-endian 16-bit raw sample streams."""

import numpy as np
from typing import Iterator, Optional

from ..constants import READ_CHUNK_SIZE


def decode_samples(data: bytes) -> np.ndarray:
    """
    Decode big-endian byte pairs into raw sample values.

    Sample = 256 * first byte + second byte. A trailing odd byte never
    completes a pair and is ignored.

    Args:
        data: Raw bytes

    Returns:
        1D int64 array of samples in [0, 65535]
    """
    usable = len(data) - len(data) % 2
    return np.frombuffer(data[:usable], dtype='>u2').astype(np.int64)


class RawSampleReader:
    """
    Chunked reader of raw samples from a binary file object.

    Bytes are consumed two at a time. A byte left over at the end of a
    read is carried into the next one; a byte left over at end of stream
    is dropped. The stream is assumed to start on a pair boundary.
    """

    def __init__(self, f, chunk_size: int = READ_CHUNK_SIZE):
        """
        Initialize raw sample reader.

        Args:
            f: File object opened in binary read mode
            chunk_size: Number of bytes requested per read
        """
        self.f = f
        self.chunk_size = chunk_size
        self.pending = b''
        self.bytes_read = 0
        self.samples_read = 0
        self.dropped_trailing_byte = False
        self.exhausted = False

    def read_chunk(self) -> Optional[np.ndarray]:
        """Read the next block of samples, or return None at end of stream."""
        while not self.exhausted:
            data = self.f.read(self.chunk_size)
            if not data:
                self.exhausted = True
                if self.pending:
                    self.dropped_trailing_byte = True
                    self.pending = b''
                return None

            self.bytes_read += len(data)
            data = self.pending + data
            usable = len(data) - len(data) % 2
            self.pending = data[usable:]
            if usable == 0:
                continue

            samples = decode_samples(data[:usable])
            self.samples_read += len(samples)
            return samples

        return None

    def __iter__(self) -> Iterator[np.ndarray]:
        while True:
            chunk = self.read_chunk()
            if chunk is None:
                return
            yield chunk

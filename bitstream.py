"""
Bit-level I/O on top of binary streams

Bits are packed most significant bit first, 8 per byte. The writer pads the
final partial byte with zeros; the reader can be told the real bit length so
that padding is never handed back to the caller
"""

from typing import BinaryIO, Iterator, Optional

DEFAULT_BUFFER_SIZE = 64 * 1024


class BitWriter:
    """
    Accumulates bits in an integer until a whole byte is assembled,
    then queues the byte; queued bytes are written to the stream in blocks
    """

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError("buffer_size must be positive")
        self.stream = stream
        self.buffer_size = buffer_size
        self.out = bytearray() # full bytes waiting to be written
        self.acc = 0           # partial byte
        self.acc_bits = 0
        self.bits_written = 0
        self.bytes_written = 0
        self.pad_bits = 0
        self.closed = False

    def write_bit(self, bit: int) -> None:
        if bit not in (0, 1):
            raise ValueError(f"bit must be 0 or 1, got {bit!r}")
        self.acc = (self.acc << 1) | bit
        self.acc_bits += 1
        self.bits_written += 1
        if self.acc_bits == 8:
            self.out.append(self.acc)
            self.acc = 0
            self.acc_bits = 0
            if len(self.out) >= self.buffer_size:
                self._drain()

    def write_bits(self, code: str) -> None:
        """Write a code given as a string of '0'/'1' characters"""
        for ch in code:
            if ch == '0':
                self.write_bit(0)
            elif ch == '1':
                self.write_bit(1)
            else:
                raise ValueError(f"invalid bit character {ch!r} in code {code!r}")

    def _drain(self) -> None:
        if self.out:
            self.stream.write(bytes(self.out))
            self.bytes_written += len(self.out)
            self.out.clear()

    def flush(self) -> int:
        """
        Pads the last partial byte with 0 bits and writes everything out
        Returns the number of pad bits added (0..7)
        """
        pad_bits = 0
        if self.acc_bits != 0:
            pad_bits = 8 - self.acc_bits
            self.out.append((self.acc << pad_bits) & 0xFF)
            self.acc = 0
            self.acc_bits = 0
        self._drain()
        self.stream.flush()
        self.pad_bits = pad_bits
        return pad_bits

    def close(self) -> int:
        if self.closed:
            return self.pad_bits
        self.closed = True
        return self.flush()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        # on error, whole bytes already assembled are written; the partial byte is dropped, no padding
        if exc_type is None:
            self.close()
        else:
            self.closed = True
            self._drain()
        return False


class BitReader:
    """
    Reads bits MSB-first from a binary stream, chunk_size bytes at a time

    If bit_length is given, reading stops after that many bits even if the
    stream holds more (trailing pad bits). Otherwise every bit is returned
    """

    def __init__(self, stream: BinaryIO, bit_length: Optional[int] = None,
                 chunk_size: int = DEFAULT_BUFFER_SIZE):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if bit_length is not None and bit_length < 0:
            raise ValueError("bit_length must be non-negative")
        self.stream = stream
        self.bit_length = bit_length
        self.chunk_size = chunk_size
        self.chunk = b""
        self.byte_index = 0
        self.bit_index = 8 # position inside current byte, 8 means "need next byte"
        self.bits_read = 0

    def _load_byte(self) -> bool:
        if self.byte_index + 1 < len(self.chunk):
            self.byte_index += 1
        else:
            self.chunk = self.stream.read(self.chunk_size)
            self.byte_index = 0
            if not self.chunk:
                return False
        self.bit_index = 0
        return True

    def has_next(self) -> bool:
        if self.bit_length is not None and self.bits_read >= self.bit_length:
            return False
        if self.bit_index < 8:
            return True
        return self._load_byte()

    def read_bit(self) -> int:
        if not self.has_next():
            raise EOFError("no more bits in stream")
        bit = (self.chunk[self.byte_index] >> (7 - self.bit_index)) & 1
        self.bit_index += 1
        self.bits_read += 1
        return bit

    def __iter__(self) -> Iterator[int]:
        while self.has_next():
            yield self.read_bit()

"""
Byte Emitter
============

Writes encoded instructions and wide literals as little-endian bytes.

A single primitive, to_little_endian(), serves both 4-byte instruction
words and 8-byte ``.8byte`` literals. ByteEmitter writes each item to the
output stream as soon as it is produced, so bytes already emitted stay
emitted if a later item fails to assemble.
"""

import logging
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)


# Size of an instruction word in bytes
WORD_SIZE = 4

# Size of a .8byte literal in bytes
QUAD_SIZE = 8


def to_little_endian(value: int, size: int) -> bytes:
    """
    Return ``value`` as ``size`` bytes, least significant byte first.

    The value is reduced modulo 2^(8·size) first, so negative values come
    out in two's complement form.

    >>> to_little_endian(0x8B226020, 4).hex()
    '2060228b'
    >>> to_little_endian(-1, 8).hex()
    'ffffffffffffffff'
    """
    return (value % 2 ** (8 * size)).to_bytes(size, "little")


class ByteEmitter:
    """
    Collects assembled bytes and forwards them to an optional stream.

    Usage:
        emitter = ByteEmitter(sys.stdout.buffer)
        emitter.emit_word(0x8B226020)
        emitter.emit_quad(16)

    Attributes:
        bytes_written: Total number of bytes emitted so far
    """

    def __init__(self, stream: Optional[BinaryIO] = None):
        self._stream = stream
        self._buffer = bytearray()

    @property
    def bytes_written(self) -> int:
        return len(self._buffer)

    def emit_word(self, word: int) -> None:
        """Emit a 32-bit instruction word."""
        self._emit(to_little_endian(word, WORD_SIZE))

    def emit_quad(self, value: int) -> None:
        """Emit a 64-bit literal (negative values as two's complement)."""
        self._emit(to_little_endian(value, QUAD_SIZE))

    def get_bytes(self) -> bytes:
        """Return every byte emitted so far."""
        return bytes(self._buffer)

    def _emit(self, data: bytes) -> None:
        offset = len(self._buffer)
        self._buffer.extend(data)
        if self._stream is not None:
            self._stream.write(data)
            self._stream.flush()
        logger.debug(f"Emitted {len(data)} bytes at offset {offset}: {data.hex()}")

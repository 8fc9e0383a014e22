"""Little-endian binary archives for writing and reading primitive values."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

_INT = struct.Struct("<i")
_FLOAT = struct.Struct("<f")
_DOUBLE = struct.Struct("<d")


class OutputArchive:
    """Writes primitive values to a binary stream.

    Without a stream, values are collected in memory and returned by getvalue().
    """

    def __init__(self, stream: BinaryIO | None = None) -> None:
        self._stream: BinaryIO = stream if stream is not None else io.BytesIO()

    def _pack(self, packer: struct.Struct, value) -> None:
        try:
            self._stream.write(packer.pack(value))
        except struct.error as exc:
            raise OverflowError(f"value {value!r} does not fit: {exc}") from None

    def write_int(self, value: int) -> None:
        """Write a signed 32-bit integer."""
        self._pack(_INT, int(value))

    def write_float(self, value: float) -> None:
        """Write a 32-bit float."""
        self._pack(_FLOAT, float(value))

    def write_double(self, value: float) -> None:
        """Write a 64-bit float."""
        self._pack(_DOUBLE, float(value))

    def write_string(self, value: str) -> None:
        """Write a UTF-8 string, preceded by its length in bytes."""
        data = value.encode("utf-8")
        self.write_int(len(data))
        self._stream.write(data)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes, without a length."""
        self._stream.write(bytes(data))

    def getvalue(self) -> bytes:
        """Everything written so far, when the archive writes to memory."""
        getvalue = getattr(self._stream, "getvalue", None)
        if getvalue is None:
            raise TypeError("the underlying stream does not keep its contents")
        return getvalue()


class InputArchive:
    """Reads primitive values from bytes or a binary stream."""

    def __init__(self, source: bytes | bytearray | memoryview | BinaryIO) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            self._stream: BinaryIO = io.BytesIO(bytes(source))
        else:
            self._stream = source

    def read_bytes(self, size: int) -> bytes:
        """Read exactly size raw bytes."""
        if size < 0:
            raise ValueError(f"cannot read a negative number of bytes: {size}")
        data = self._stream.read(size)
        if len(data) != size:
            raise EOFError(f"expected {size} bytes, got {len(data)}")
        return data

    def _unpack(self, packer: struct.Struct):
        return packer.unpack(self.read_bytes(packer.size))[0]

    def read_int(self) -> int:
        """Read a signed 32-bit integer."""
        return self._unpack(_INT)

    def read_float(self) -> float:
        """Read a 32-bit float."""
        return self._unpack(_FLOAT)

    def read_double(self) -> float:
        """Read a 64-bit float."""
        return self._unpack(_DOUBLE)

    def read_string(self) -> str:
        """Read a length-prefixed UTF-8 string."""
        length = self.read_int()
        if length < 0:
            raise ValueError(f"invalid string length: {length}")
        return self.read_bytes(length).decode("utf-8")
"""
Sequential big-endian reader over an in-memory class file buffer.
"""

import struct

from .errors import ReadFailure, InvalidUtf8Encoding


_U1 = struct.Struct(">B")
_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")
_I4 = struct.Struct(">i")
_I8 = struct.Struct(">q")
_F4 = struct.Struct(">f")
_F8 = struct.Struct(">d")


def decode_modified_utf8(data: bytes) -> str:
    """
    Decode the JVM's modified UTF-8.

    NUL is encoded as the two bytes C0 80 and supplementary characters as a
    pair of three-byte surrogates. Plain UTF-8 input decodes unchanged.
    """
    try:
        text = data.replace(b"\xc0\x80", b"\x00").decode("utf-8", "surrogatepass")
        # Join surrogate pairs into real code points; a lone surrogate fails here.
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeError as e:
        raise InvalidUtf8Encoding(f"Invalid modified UTF-8 data: {data!r}") from e


class ByteReader:
    """Reads fixed-width big-endian values and raw bytes from a buffer."""

    def __init__(self, data: bytes):
        self.data = memoryview(data).cast("B")
        self.pos = 0

    def __len__(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def _require(self, length: int):
        if length > self.remaining:
            raise ReadFailure(
                f"Unexpected end of data at offset {self.pos}: "
                f"need {length} byte(s), {self.remaining} left"
            )

    def _unpack(self, fmt: struct.Struct):
        self._require(fmt.size)
        val = fmt.unpack_from(self.data, self.pos)[0]
        self.pos += fmt.size
        return val

    def read_u1(self) -> int:
        return self._unpack(_U1)

    def read_u2(self) -> int:
        return self._unpack(_U2)

    def read_u4(self) -> int:
        return self._unpack(_U4)

    def read_i4(self) -> int:
        return self._unpack(_I4)

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_f4(self) -> float:
        return self._unpack(_F4)

    def read_f8(self) -> float:
        return self._unpack(_F8)

    def read_bytes(self, length: int) -> bytes:
        self._require(length)
        val = bytes(self.data[self.pos:self.pos + length])
        self.pos += length
        return val

    def read_utf8(self) -> str:
        """Read a u2 length followed by that many bytes of modified UTF-8."""
        length = self.read_u2()
        return decode_modified_utf8(self.read_bytes(length))

    def skip(self, length: int):
        self._require(length)
        self.pos += length

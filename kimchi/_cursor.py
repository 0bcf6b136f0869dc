"""Bounds-checked buffer access for the codec.

BufferCursor is the read side: a position over an immutable view of the
caller's buffer.  Every read checks the remaining byte count first, so no
slice ever silently comes back short.

BufferWriter is the write side: an owned, growable bytearray.  Composite
records reserve their header slot up front and patch the length in once
the children have been written, so nothing is copied twice.
"""

from __future__ import annotations

from typing import Union

from ._errors import ERR_TRUNCATED_BODY, DecodeError

BytesLike = Union[bytes, bytearray, memoryview]


class BufferCursor:
    """Read position over a bytes-like object.

    A cursor is owned by exactly one decode call; it is not thread-safe.
    """

    __slots__ = ("_view", "_pos")

    def __init__(self, data: BytesLike, position: int = 0) -> None:
        view = memoryview(data)
        if view.ndim != 1 or view.itemsize != 1:
            view = view.cast("B")
        self._view = view
        self._pos = position

    @property
    def position(self) -> int:
        return self._pos

    @property
    def size(self) -> int:
        return len(self._view)

    @property
    def remaining(self) -> int:
        return len(self._view) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._view)

    def seek(self, position: int) -> None:
        if position < 0 or position > len(self._view):
            raise IndexError("seek outside buffer")
        self._pos = position

    def read(self, n: int, code: str = ERR_TRUNCATED_BODY) -> bytes:
        """Consume exactly n bytes, or raise DecodeError(code) without moving."""
        if n < 0 or n > self.remaining:
            raise DecodeError(
                code,
                "need {} bytes, {} available".format(n, self.remaining),
                offset=self._pos,
            )
        start = self._pos
        self._pos += n
        return self._view[start:self._pos].tobytes()

    def skip(self, n: int, code: str = ERR_TRUNCATED_BODY) -> None:
        if n < 0 or n > self.remaining:
            raise DecodeError(
                code,
                "need {} bytes, {} available".format(n, self.remaining),
                offset=self._pos,
            )
        self._pos += n

    def __repr__(self) -> str:
        return "BufferCursor(position={}, size={})".format(self._pos, self.size)


class BufferWriter:
    """Growable output buffer owned by a single encode call."""

    __slots__ = ("_buf",)

    def __init__(self) -> None:
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def write(self, data: BytesLike) -> None:
        self._buf += data

    def reserve(self, n: int) -> int:
        """Append n zero bytes and return their offset for a later patch()."""
        offset = len(self._buf)
        self._buf += bytes(n)
        return offset

    def patch(self, offset: int, data: bytes) -> None:
        end = offset + len(data)
        if offset < 0 or end > len(self._buf):
            raise IndexError("patch outside written region")
        self._buf[offset:end] = data

    def getvalue(self) -> bytes:
        return bytes(self._buf)

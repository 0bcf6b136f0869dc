"""Record header codec and header-only record walking.

Header layout (fixed, big-endian):

    offset 0   tag     uint8
    offset 1   length  uint64   exact byte count of the body

For composites the length is the sum of the children's full record
sizes (header + body), never an element count.
"""

from __future__ import annotations

from typing import Iterator, NamedTuple, Tuple

from ._constants import HEADER, HEADER_SIZE, MAX_LENGTH, TAG_NAMES
from ._cursor import BufferCursor, BytesLike
from ._errors import (
    ERR_MALFORMED_HEADER,
    ERR_TRUNCATED_BODY,
    ERR_UNKNOWN_TAG,
    DecodeError,
)


def write_header(tag: int, length: int) -> bytes:
    """Pack a 9-byte header.  The tag is trusted; the length is range-checked."""
    if length < 0 or length > MAX_LENGTH:
        raise OverflowError("record length {} does not fit uint64".format(length))
    return HEADER.pack(tag, length)


def read_header(cursor: BufferCursor) -> Tuple[int, int]:
    """Consume a header and return (tag, length).

    Raises ERR_MALFORMED_HEADER when fewer than 9 bytes remain and
    ERR_UNKNOWN_TAG when the tag byte is not a known tag.  On either
    error the cursor has not advanced past the header start.
    """
    start = cursor.position
    raw = cursor.read(HEADER_SIZE, ERR_MALFORMED_HEADER)
    tag, length = HEADER.unpack(raw)
    if tag not in TAG_NAMES:
        cursor.seek(start)
        raise DecodeError(ERR_UNKNOWN_TAG,
                          "unrecognized type flag 0x{:02x}".format(tag),
                          offset=start)
    return tag, length


# ── Header-only walking ───────────────────────────────────────

class Record(NamedTuple):
    """One header+body unit located inside a buffer."""

    tag: int
    length: int
    offset: int  # offset of the header, relative to the walked buffer

    @property
    def body_offset(self) -> int:
        return self.offset + HEADER_SIZE

    @property
    def size(self) -> int:
        return HEADER_SIZE + self.length


def iter_records(data: BytesLike) -> Iterator[Record]:
    """Yield the records laid end to end in data, reading headers only.

    Works on a whole encoded buffer (one root record) and on a composite
    body (its children).  Stops exactly at the end of data.  A short header
    raises ERR_MALFORMED_HEADER, an unknown tag ERR_UNKNOWN_TAG and a body
    that runs past the end ERR_TRUNCATED_BODY.
    """
    cursor = BufferCursor(data)
    while not cursor.at_end():
        offset = cursor.position
        tag, length = read_header(cursor)
        cursor.skip(length, ERR_TRUNCATED_BODY)
        yield Record(tag, length, offset)

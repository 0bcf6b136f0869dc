"""Decoder: record bytes → value.

One record decodes in a fixed sequence:

    Start → header read → body read (primitive) | body loop (composite) → done

A composite header declares the byte length of its body, not how many
children it holds.  The body loop therefore decodes whole child records
until the cursor sits exactly on the declared end:

  * a child record that would end past the declared end  → ERR_BODY_OVERRUN
  * fewer than HEADER_SIZE bytes left for the next child  → ERR_BODY_OVERRUN
  * the buffer runs out before the declared end          → ERR_BODY_UNDERRUN
  * a DICT body that ends right after a key record       → ERR_BODY_UNDERRUN

Any error unwinds straight out of decode_value(); containers built so far
are dropped with the stack, so a caller sees either a full value or a
DecodeError.
"""

from __future__ import annotations

import logging
import struct
from typing import Any, Callable, Dict, Optional

from ._constants import (
    BOOL_FALSE_TYPE,
    BOOL_TRUE_TYPE,
    BYTES_TYPE,
    COMPOSITE_TAGS,
    DICT_TYPE,
    FIXED_LENGTHS,
    FLOAT_TYPE,
    HEADER_SIZE,
    INT64_MAX,
    INT64_MIN,
    INT_TYPE,
    LIST_TYPE,
    LONG_TYPE,
    MAX_DEPTH,
    NEG_INT_TYPE,
    NEG_LONG_TYPE,
    NONE_TYPE,
    SET_TYPE,
    SMALL_INT_MAX_BYTES,
    SMALL_INT_TAGS,
    TUPLE_TYPE,
    UNICODE_TYPE,
)
from ._cursor import BufferCursor, BytesLike
from ._errors import (
    ERR_BAD_LENGTH,
    ERR_BODY_OVERRUN,
    ERR_BODY_UNDERRUN,
    ERR_INVALID_ENCODING,
    ERR_LIMIT_DEPTH,
    ERR_TRAILING_DATA,
    ERR_TRUNCATED_BODY,
    ERR_UNHASHABLE,
    DecodeError,
)
from ._header import read_header
from ._types import tag_name

log = logging.getLogger(__name__)

_FLOAT = struct.Struct(">d")


# ── Primitive bodies ──────────────────────────────────────────

def _positive(body: bytes) -> int:
    return int.from_bytes(body, "big")


def _negative(body: bytes) -> int:
    return -int.from_bytes(body, "big")


def _float(body: bytes) -> float:
    return _FLOAT.unpack(body)[0]


def _bytes(body: bytes) -> bytes:
    return body


def _unicode(body: bytes) -> str:
    return body.decode("utf-8")


_PRIMITIVES: Dict[int, Callable[[bytes], Any]] = {
    INT_TYPE: _positive,
    LONG_TYPE: _positive,
    NEG_INT_TYPE: _negative,
    NEG_LONG_TYPE: _negative,
    FLOAT_TYPE: _float,
    BYTES_TYPE: _bytes,
    UNICODE_TYPE: _unicode,
    BOOL_TRUE_TYPE: lambda body: True,
    BOOL_FALSE_TYPE: lambda body: False,
    NONE_TYPE: lambda body: None,
}


def _check_length(tag: int, length: int, offset: int) -> None:
    expected = FIXED_LENGTHS.get(tag)
    if expected is not None and length != expected:
        raise DecodeError(
            ERR_BAD_LENGTH,
            "{} body must be {} bytes, header declares {}".format(
                tag_name(tag), expected, length),
            offset=offset,
        )
    if tag in SMALL_INT_TAGS and length > SMALL_INT_MAX_BYTES:
        raise DecodeError(
            ERR_BAD_LENGTH,
            "{} magnitude longer than {} bytes".format(
                tag_name(tag), SMALL_INT_MAX_BYTES),
            offset=offset,
        )


# ── Records ───────────────────────────────────────────────────

class _Decoder:
    """State for one decode call: the cursor and the depth bound.

    Recursion costs two frames per nesting level (record() and the
    composite body reader), which keeps MAX_DEPTH well inside the
    interpreter's recursion limit.
    """

    __slots__ = ("cursor", "max_depth")

    def __init__(self, cursor: BufferCursor, max_depth: int) -> None:
        self.cursor = cursor
        self.max_depth = max_depth

    def record(self, depth: int, budget_end: Optional[int]) -> Any:
        """Decode one record.  budget_end is the enclosing body's end, if any."""
        cursor = self.cursor
        start = cursor.position
        tag, length = read_header(cursor)
        body_end = cursor.position + length

        if budget_end is not None and body_end > budget_end:
            raise DecodeError(
                ERR_BODY_OVERRUN,
                "{} record ends at {}, enclosing body ends at {}".format(
                    tag_name(tag), body_end, budget_end),
                offset=start,
            )

        if tag in COMPOSITE_TAGS:
            if depth + 1 > self.max_depth:
                raise DecodeError(ERR_LIMIT_DEPTH,
                                  "nesting exceeds max_depth={}".format(self.max_depth),
                                  offset=start)
            if tag == DICT_TYPE:
                return self.mapping(body_end, depth + 1)
            items = self.items(body_end, depth + 1)
            if tag == LIST_TYPE:
                return items
            if tag == TUPLE_TYPE:
                return tuple(items)
            return self.build_set(tag, items)

        _check_length(tag, length, start)
        body = cursor.read(length, ERR_TRUNCATED_BODY)
        try:
            value = _PRIMITIVES[tag](body)
        except UnicodeDecodeError as e:
            raise DecodeError(ERR_INVALID_ENCODING,
                              "text body is not valid UTF-8: {}".format(e.reason),
                              offset=start)
        if tag in SMALL_INT_TAGS and not INT64_MIN <= value <= INT64_MAX:
            raise DecodeError(ERR_BAD_LENGTH,
                              "{} value {} is outside the signed 64-bit range".format(
                                  tag_name(tag), value),
                              offset=start)
        return value

    # ── Composite bodies ──────────────────────────────────────

    def expect_more(self, body_end: int) -> None:
        if self.cursor.at_end():
            raise DecodeError(
                ERR_BODY_UNDERRUN,
                "buffer ended {} bytes short of the declared body".format(
                    body_end - self.cursor.position),
                offset=self.cursor.position,
            )
        if body_end - self.cursor.position < HEADER_SIZE:
            raise DecodeError(
                ERR_BODY_OVERRUN,
                "{} bytes left in the declared body, a record header needs {}".format(
                    body_end - self.cursor.position, HEADER_SIZE),
                offset=self.cursor.position,
            )

    def items(self, body_end: int, depth: int) -> list:
        cursor = self.cursor
        result = []
        while cursor.position < body_end:
            self.expect_more(body_end)
            result.append(self.record(depth, body_end))
        return result

    def build_set(self, tag: int, items: list):
        kind = set if tag == SET_TYPE else frozenset
        try:
            return kind(items)
        except TypeError:
            raise DecodeError(ERR_UNHASHABLE,
                              "{} element is not hashable".format(tag_name(tag)),
                              offset=self.cursor.position)

    def mapping(self, body_end: int, depth: int) -> dict:
        cursor = self.cursor
        result: dict = {}
        while cursor.position < body_end:
            self.expect_more(body_end)
            key = self.record(depth, body_end)
            if cursor.position >= body_end:
                raise DecodeError(ERR_BODY_UNDERRUN,
                                  "mapping body ends after a key record",
                                  offset=cursor.position)
            self.expect_more(body_end)
            value = self.record(depth, body_end)
            try:
                result[key] = value
            except TypeError:
                raise DecodeError(ERR_UNHASHABLE,
                                  "mapping key of type {} is not hashable".format(
                                      type(key).__name__),
                                  offset=cursor.position)
        return result


def decode_value(data: BytesLike, max_depth: int = MAX_DEPTH,
                 allow_trailing: bool = False) -> Any:
    """Decode the single root record in data.

    Unless allow_trailing is set, bytes after the root record raise
    ERR_TRAILING_DATA.
    """
    cursor = BufferCursor(data)
    try:
        value = _Decoder(cursor, max_depth).record(0, None)
        if not allow_trailing and not cursor.at_end():
            raise DecodeError(ERR_TRAILING_DATA,
                              "{} bytes after root record".format(cursor.remaining),
                              offset=cursor.position)
    except DecodeError as e:
        log.debug("rejected %d-byte buffer: [%s] %s", cursor.size, e.code, e)
        raise
    return value

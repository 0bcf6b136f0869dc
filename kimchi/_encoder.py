"""Encoder: value → record bytes.

Each value becomes one record.  Primitive bodies come from a per-tag
writer; composite bodies are the concatenated *full records* of their
children, so encoding recurses through the same entry point.

The whole top-level value is written into a single BufferWriter.  A
record's header slot is reserved before its body is written and the
length is patched in afterwards, which is how a composite learns its
byte length without encoding its children twice.
"""

from __future__ import annotations

import logging
import struct
from typing import Any, Callable, Dict

from ._constants import (
    BOOL_FALSE_TYPE,
    BOOL_TRUE_TYPE,
    BYTES_TYPE,
    COMPOSITE_TAGS,
    DICT_TYPE,
    FLOAT_TYPE,
    HEADER_SIZE,
    INT_TYPE,
    LONG_TYPE,
    MAX_DEPTH,
    NEG_INT_TYPE,
    NEG_LONG_TYPE,
    NONE_TYPE,
    UNICODE_TYPE,
)
from ._cursor import BufferWriter
from ._errors import ERR_INVALID_ENCODING, ERR_LIMIT_DEPTH, EncodeError
from ._header import write_header
from ._types import classify

log = logging.getLogger(__name__)

_FLOAT = struct.Struct(">d")


# ── Primitive bodies ──────────────────────────────────────────

def magnitude_bytes(n: int) -> bytes:
    """Minimal-width big-endian magnitude of n.  Zero is empty."""
    n = abs(n)
    return n.to_bytes((n.bit_length() + 7) // 8, "big")


def _float_body(value: float) -> bytes:
    return _FLOAT.pack(value)


def _bytes_body(value: bytes) -> bytes:
    return value


def _unicode_body(value: str) -> bytes:
    try:
        return value.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates have no UTF-8 form.
        raise EncodeError(ERR_INVALID_ENCODING,
                          "text is not encodable as UTF-8: {}".format(e.reason))


def _empty_body(value: Any) -> bytes:
    return b""


_PRIMITIVE_BODIES: Dict[int, Callable[[Any], bytes]] = {
    INT_TYPE: magnitude_bytes,
    NEG_INT_TYPE: magnitude_bytes,
    LONG_TYPE: magnitude_bytes,
    NEG_LONG_TYPE: magnitude_bytes,
    FLOAT_TYPE: _float_body,
    BYTES_TYPE: _bytes_body,
    UNICODE_TYPE: _unicode_body,
    BOOL_TRUE_TYPE: _empty_body,
    BOOL_FALSE_TYPE: _empty_body,
    NONE_TYPE: _empty_body,
}


# ── Records ──────────────────────────────────────────────────

def _encode_into(out: BufferWriter, value: Any, depth: int, max_depth: int) -> None:
    tag = classify(value)

    if tag in COMPOSITE_TAGS:
        if depth + 1 > max_depth:
            raise EncodeError(ERR_LIMIT_DEPTH,
                              "nesting exceeds max_depth={}".format(max_depth))
        slot = out.reserve(HEADER_SIZE)
        start = len(out)
        if tag == DICT_TYPE:
            # Alternating key record, value record, in iteration order.
            for k, v in value.items():
                _encode_into(out, k, depth + 1, max_depth)
                _encode_into(out, v, depth + 1, max_depth)
        else:
            for item in value:
                _encode_into(out, item, depth + 1, max_depth)
        out.patch(slot, write_header(tag, len(out) - start))
        return

    body = _PRIMITIVE_BODIES[tag](value)
    out.write(write_header(tag, len(body)))
    out.write(body)


def encode_value(value: Any, max_depth: int = MAX_DEPTH) -> bytes:
    """Encode value as exactly one record.

    Raises EncodeError on an unsupported type anywhere in the value,
    on text with no UTF-8 form, or when nesting exceeds max_depth.
    The input value is never modified.
    """
    out = BufferWriter()
    _encode_into(out, value, 0, max_depth)
    log.debug("encoded %s into %d bytes", type(value).__qualname__, len(out))
    return out.getvalue()

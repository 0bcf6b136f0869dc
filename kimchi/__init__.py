"""kimchi: a self-describing binary codec for Python builtin values.

Every value becomes one record: a 1-byte type tag, an 8-byte big-endian
body length, then the body.  Containers hold the full records of their
children, so no schema is needed to read a buffer back.

Quick start:
    >>> from kimchi import encode, decode
    >>> decode(encode([1, "ab", [True, None]]))
    [1, 'ab', [True, None]]
    >>> encode(-300).hex()
    '020000000000000002012c'

Supported types (exact types only, no subclasses):
    int, float, bytes, str, list, tuple, dict, set, frozenset, bool, None
"""

from __future__ import annotations

import logging
from typing import Any

from ._constants import (
    BOOL_FALSE_TYPE,
    BOOL_TRUE_TYPE,
    BYTES_TYPE,
    DICT_TYPE,
    FLOAT_TYPE,
    FROZEN_SET_TYPE,
    HEADER_SIZE,
    INT_TYPE,
    LIST_TYPE,
    LONG_TYPE,
    MAX_DEPTH,
    NEG_INT_TYPE,
    NEG_LONG_TYPE,
    NONE_TYPE,
    SET_TYPE,
    TUPLE_TYPE,
    UNICODE_TYPE,
)
from ._cursor import BufferCursor, BytesLike
from ._decoder import decode_value
from ._encoder import encode_value
from ._errors import (
    ERR_BAD_LENGTH,
    ERR_BODY_OVERRUN,
    ERR_BODY_UNDERRUN,
    ERR_INVALID_ENCODING,
    ERR_LIMIT_DEPTH,
    ERR_MALFORMED_HEADER,
    ERR_TRAILING_DATA,
    ERR_TRUNCATED_BODY,
    ERR_UNHASHABLE,
    ERR_UNKNOWN_TAG,
    ERR_UNSUPPORTED_TYPE,
    DecodeError,
    EncodeError,
    KimchiError,
)
from ._header import Record, iter_records, read_header, write_header
from ._types import classify, tag_name

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Public API functions
    "encode",
    "decode",
    "dumps",
    "loads",
    "iter_records",
    "classify",
    "tag_name",
    "read_header",
    "write_header",
    # Types
    "Record",
    "BufferCursor",
    # Exceptions
    "KimchiError",
    "EncodeError",
    "DecodeError",
    # Error codes
    "ERR_UNSUPPORTED_TYPE",
    "ERR_MALFORMED_HEADER",
    "ERR_UNKNOWN_TAG",
    "ERR_BODY_UNDERRUN",
    "ERR_BODY_OVERRUN",
    "ERR_INVALID_ENCODING",
    "ERR_TRUNCATED_BODY",
    "ERR_BAD_LENGTH",
    "ERR_TRAILING_DATA",
    "ERR_UNHASHABLE",
    "ERR_LIMIT_DEPTH",
    # Tags and layout
    "HEADER_SIZE",
    "MAX_DEPTH",
    "INT_TYPE",
    "NEG_INT_TYPE",
    "LONG_TYPE",
    "NEG_LONG_TYPE",
    "FLOAT_TYPE",
    "BYTES_TYPE",
    "UNICODE_TYPE",
    "LIST_TYPE",
    "TUPLE_TYPE",
    "DICT_TYPE",
    "SET_TYPE",
    "FROZEN_SET_TYPE",
    "BOOL_TRUE_TYPE",
    "BOOL_FALSE_TYPE",
    "NONE_TYPE",
]


# ── Core API ──────────────────────────────────────────────────

def encode(value: Any, *, max_depth: int = MAX_DEPTH) -> bytes:
    """Serialize value into a single record.

    Raises EncodeError (code ERR_UNSUPPORTED_TYPE) if value, or anything
    nested in it, is not one of the supported exact types.
    """
    return encode_value(value, max_depth)


def decode(data: BytesLike, *, max_depth: int = MAX_DEPTH,
           allow_trailing: bool = False) -> Any:
    """Reconstruct the value held in data.

    Accepts bytes, bytearray or memoryview.  data must contain exactly one
    record unless allow_trailing is true.  Raises DecodeError; the .code
    attribute says what was wrong and .offset says where.
    """
    return decode_value(data, max_depth, allow_trailing)


# Same entry points under the pickle/json names.
dumps = encode
loads = decode

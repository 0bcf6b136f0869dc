"""kimchi constants: record header layout, type tags, and limits.

Every encoded unit is a record:

    [tag: 1 byte][length: uint64 big-endian][body: length bytes]

The length is always present, even for tags whose body is empty.
"""

from __future__ import annotations

import struct

# ── Record header ─────────────────────────────────────────────
HEADER = struct.Struct(">BQ")
HEADER_SIZE: int = HEADER.size  # 9
MAX_LENGTH: int = 2**64 - 1

# ── Type tags (single byte each) ─────────────────────────────
# 0x00 is never a valid tag.  Sign is carried by the tag, so integer
# bodies are pure magnitude.
INT_TYPE: int = 0x01         # 0 <= n <= INT64_MAX
NEG_INT_TYPE: int = 0x02     # INT64_MIN <= n < 0
LONG_TYPE: int = 0x03        # n > INT64_MAX
NEG_LONG_TYPE: int = 0x04    # n < INT64_MIN
FLOAT_TYPE: int = 0x05       # IEEE-754 binary64, big-endian
BYTES_TYPE: int = 0x06
UNICODE_TYPE: int = 0x07     # UTF-8
LIST_TYPE: int = 0x08
TUPLE_TYPE: int = 0x09
DICT_TYPE: int = 0x0A        # alternating key, value records
SET_TYPE: int = 0x0B
FROZEN_SET_TYPE: int = 0x0C
BOOL_TRUE_TYPE: int = 0x0D   # empty body
BOOL_FALSE_TYPE: int = 0x0E  # empty body
NONE_TYPE: int = 0x0F        # empty body

TAG_NAMES = {
    INT_TYPE: "INT",
    NEG_INT_TYPE: "NEG_INT",
    LONG_TYPE: "LONG",
    NEG_LONG_TYPE: "NEG_LONG",
    FLOAT_TYPE: "FLOAT",
    BYTES_TYPE: "BYTES",
    UNICODE_TYPE: "UNICODE",
    LIST_TYPE: "LIST",
    TUPLE_TYPE: "TUPLE",
    DICT_TYPE: "DICT",
    SET_TYPE: "SET",
    FROZEN_SET_TYPE: "FROZEN_SET",
    BOOL_TRUE_TYPE: "BOOL_TRUE",
    BOOL_FALSE_TYPE: "BOOL_FALSE",
    NONE_TYPE: "NONE",
}

SMALL_INT_TAGS = frozenset({INT_TYPE, NEG_INT_TYPE})
COMPOSITE_TAGS = frozenset({LIST_TYPE, TUPLE_TYPE, DICT_TYPE, SET_TYPE, FROZEN_SET_TYPE})

# Body length each fixed-size tag must declare.
FIXED_LENGTHS = {
    FLOAT_TYPE: 8,
    BOOL_TRUE_TYPE: 0,
    BOOL_FALSE_TYPE: 0,
    NONE_TYPE: 0,
}

# ── Native machine word ──────────────────────────────────────
# Python ints are arbitrary-precision; "small" means it fits a signed
# 64-bit word.  A small-int magnitude never needs more than 8 bytes.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1
SMALL_INT_MAX_BYTES: int = 8

# ── Limits ───────────────────────────────────────────────────
# Encode and decode recurse once per nesting level.  The bound keeps
# adversarial input (and self-referencing containers) from exhausting
# the interpreter stack.
MAX_DEPTH: int = 256

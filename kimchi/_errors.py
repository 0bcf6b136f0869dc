"""kimchi error codes and exception classes.

Every failure is an ordinary, reportable outcome: nothing is retried and
nothing partially decoded is ever returned.  The `.code` attribute is
one of the ERR_* strings below and is what tests compare against.
"""

from __future__ import annotations

from typing import Optional

# ── Encode side ──────────────────────────────────────────────
ERR_UNSUPPORTED_TYPE: str = "ERR_UNSUPPORTED_TYPE"  # no encoding rule for the type

# ── Decode side ──────────────────────────────────────────────
ERR_MALFORMED_HEADER: str = "ERR_MALFORMED_HEADER"  # fewer than 9 header bytes
ERR_UNKNOWN_TAG: str = "ERR_UNKNOWN_TAG"            # tag byte not in the enumeration
ERR_BODY_UNDERRUN: str = "ERR_BODY_UNDERRUN"        # children end before declared length
ERR_BODY_OVERRUN: str = "ERR_BODY_OVERRUN"          # child crosses declared length
ERR_INVALID_ENCODING: str = "ERR_INVALID_ENCODING"  # text body is not UTF-8
ERR_TRUNCATED_BODY: str = "ERR_TRUNCATED_BODY"      # buffer ends inside a body
ERR_BAD_LENGTH: str = "ERR_BAD_LENGTH"              # illegal length for a fixed-size tag
ERR_TRAILING_DATA: str = "ERR_TRAILING_DATA"        # bytes after the root record
ERR_UNHASHABLE: str = "ERR_UNHASHABLE"              # dict key / set element not hashable

# ── Both directions ──────────────────────────────────────────
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"            # nesting exceeds max_depth


class KimchiError(Exception):
    """Base exception for kimchi encode/decode failures."""

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code


class EncodeError(KimchiError):
    """Raised by encode().

    For ERR_UNSUPPORTED_TYPE, `.type_name` holds the offending type's name.
    """

    def __init__(self, code: str, msg: str = "",
                 type_name: Optional[str] = None) -> None:
        super().__init__(code, msg)
        self.type_name = type_name


class DecodeError(KimchiError):
    """Raised by decode().  `.offset` is where the violation was detected."""

    def __init__(self, code: str, msg: str = "",
                 offset: Optional[int] = None) -> None:
        if offset is not None:
            msg = "{} (at offset {})".format(msg or code, offset)
        super().__init__(code, msg)
        self.offset = offset

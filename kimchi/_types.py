"""Runtime type classification: the one partial function in the codec.

classify() maps a value to its tag by *exact* type.  Subclasses are
rejected: an IntEnum, an OrderedDict or a named tuple would otherwise be
written with the base type's rules and come back as something else.

Exact matching also settles the bool/int question.  type(True) is bool,
not int, so True can never land on the integer path.
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
    INT64_MAX,
    INT64_MIN,
    INT_TYPE,
    LIST_TYPE,
    LONG_TYPE,
    NEG_INT_TYPE,
    NEG_LONG_TYPE,
    NONE_TYPE,
    SET_TYPE,
    TAG_NAMES,
    TUPLE_TYPE,
    UNICODE_TYPE,
)
from ._errors import ERR_UNSUPPORTED_TYPE, EncodeError

log = logging.getLogger(__name__)

# Types whose tag does not depend on the value.
_FIXED_TAGS = {
    float: FLOAT_TYPE,
    bytes: BYTES_TYPE,
    str: UNICODE_TYPE,
    list: LIST_TYPE,
    tuple: TUPLE_TYPE,
    dict: DICT_TYPE,
    set: SET_TYPE,
    frozenset: FROZEN_SET_TYPE,
}


def _int_tag(n: int) -> int:
    if n < 0:
        return NEG_INT_TYPE if n >= INT64_MIN else NEG_LONG_TYPE
    return INT_TYPE if n <= INT64_MAX else LONG_TYPE


def classify(value: Any) -> int:
    """Return the tag for value, or raise EncodeError(ERR_UNSUPPORTED_TYPE)."""
    kind = type(value)

    tag = _FIXED_TAGS.get(kind)
    if tag is not None:
        return tag

    if kind is int:
        return _int_tag(value)

    if kind is bool:
        return BOOL_TRUE_TYPE if value else BOOL_FALSE_TYPE

    if value is None:
        return NONE_TYPE

    log.debug("unsupported type %r", kind.__qualname__)
    raise EncodeError(
        ERR_UNSUPPORTED_TYPE,
        'unknown object type "{}"'.format(kind.__qualname__),
        type_name=kind.__qualname__,
    )


def tag_name(tag: int) -> str:
    """Human-readable name for a tag byte, for diagnostics."""
    name = TAG_NAMES.get(tag)
    if name is None:
        return "UNKNOWN(0x{:02x})".format(tag)
    return name

"""Property tests over randomly generated values.

Every generated value is made only of supported exact types.  Floats
exclude NaN so that equality is meaningful.
"""

from __future__ import annotations

import os
import sys
import unittest

from hypothesis import given, settings, strategies as st

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from kimchi import (
    DecodeError,
    ERR_BODY_UNDERRUN,
    ERR_MALFORMED_HEADER,
    ERR_TRUNCATED_BODY,
    ERR_UNKNOWN_TAG,
    HEADER_SIZE,
    decode,
    encode,
    iter_records,
)
from kimchi._constants import COMPOSITE_TAGS

# ── Strategies ────────────────────────────────────────────────

integers = st.one_of(
    st.integers(min_value=-(2**63), max_value=2**63 - 1),
    st.integers(min_value=-(2**200), max_value=2**200),
)

scalars = st.one_of(
    st.none(),
    st.booleans(),
    integers,
    st.floats(allow_nan=False),
    st.binary(max_size=32),
    st.text(max_size=16),
)

hashables = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.tuples(children, children),
        st.frozensets(children, max_size=4),
    ),
    max_leaves=8,
)

values = st.recursive(
    scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=5),
        st.lists(children, max_size=5).map(tuple),
        st.dictionaries(hashables, children, max_size=5),
        st.sets(hashables, max_size=5),
        st.frozensets(hashables, max_size=5),
    ),
    max_leaves=25,
)

unused_tags = st.one_of(st.just(0x00), st.integers(min_value=0x10, max_value=0xFF))


class TestProperties(unittest.TestCase):
    @given(values)
    @settings(max_examples=200, deadline=None)
    def test_round_trip(self, value):
        out = decode(encode(value))
        self.assertEqual(out, value)
        self.assertIs(type(out), type(value))

    @given(values)
    @settings(deadline=None)
    def test_encoding_is_stable(self, value):
        self.assertEqual(encode(value), encode(value))

    @given(values)
    @settings(deadline=None)
    def test_composite_length_is_sum_of_child_records(self, value):
        data = encode(value)
        (root,) = list(iter_records(data))
        self.assertEqual(root.size, len(data))
        if root.tag in COMPOSITE_TAGS:
            children = list(iter_records(data[HEADER_SIZE:]))
            self.assertEqual(sum(c.size for c in children), root.length)

    @given(values, st.data())
    @settings(deadline=None)
    def test_truncation_never_decodes(self, value, data):
        encoded = encode(value)
        cut = data.draw(st.integers(min_value=1, max_value=len(encoded)))
        with self.assertRaises(DecodeError) as ctx:
            decode(encoded[:-cut])
        self.assertIn(ctx.exception.code,
                      {ERR_MALFORMED_HEADER, ERR_TRUNCATED_BODY, ERR_BODY_UNDERRUN})

    @given(values, unused_tags)
    @settings(deadline=None)
    def test_corrupt_root_tag(self, value, tag):
        encoded = bytearray(encode(value))
        encoded[0] = tag
        with self.assertRaises(DecodeError) as ctx:
            decode(bytes(encoded))
        self.assertEqual(ctx.exception.code, ERR_UNKNOWN_TAG)


if __name__ == "__main__":
    unittest.main()

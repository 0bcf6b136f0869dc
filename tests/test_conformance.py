"""kimchi wire-format conformance suite.

Runs every vector in conformance/vectors.json.  A vector pins either a
value ↔ bytes mapping or the error code a malformed buffer must raise.

Usage:
    python tests/test_conformance.py [--vectors-dir DIR]
    python -m pytest tests/test_conformance.py -v
    KIMCHI_VECTORS_DIR=conformance python tests/test_conformance.py
"""

from __future__ import annotations

import argparse
import ast
import json
import math
import os
import sys
import unittest
from typing import Any, List, Optional, Tuple

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from kimchi import DecodeError, decode, encode

# ── Locate conformance data ───────────────────────────────────

_VECTORS_DIR: Optional[str] = os.environ.get("KIMCHI_VECTORS_DIR", None)


def _find_vectors_dir() -> str:
    if _VECTORS_DIR:
        return _VECTORS_DIR
    candidates = [
        os.path.join(os.path.dirname(__file__), "..", "conformance"),
        os.path.join(os.path.dirname(__file__), "conformance"),
    ]
    for d in candidates:
        if os.path.isfile(os.path.join(d, "vectors.json")):
            return d
    raise FileNotFoundError(
        "Cannot find conformance vectors. Set KIMCHI_VECTORS_DIR or --vectors-dir."
    )


def _load_vectors() -> List[dict]:
    path = os.path.join(_find_vectors_dir(), "vectors.json")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)["vectors"]


def _same(a: Any, b: Any) -> bool:
    """Equality that also tells -0.0 from 0.0 and checks exact types."""
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(_same(x, y) for x, y in zip(a, b))
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(_same(a[k], b[k]) for k in a)
    return a == b


def _run_vector(vec: dict) -> Tuple[bool, str]:
    """Execute one vector.  Returns (passed, detail)."""
    raw = bytes.fromhex(vec["hex"])

    if "err" in vec:
        try:
            got = decode(raw)
        except DecodeError as e:
            return e.code == vec["err"], "raised {}".format(e.code)
        return False, "decoded to {!r}".format(got)

    expected = ast.literal_eval(vec["value"])
    try:
        got = decode(raw)
    except DecodeError as e:
        return False, "raised {}".format(e.code)
    if not _same(got, expected):
        return False, "decoded to {!r}".format(got)

    if vec["mode"] == "both":
        out = encode(expected)
        if out != raw:
            return False, "encoded to {}".format(out.hex())
    return True, "ok"


# ── unittest integration ──────────────────────────────────────

class ConformanceTests(unittest.TestCase):
    """Dynamically generated: one test method per vector."""
    pass


def _make_test(vec: dict):
    def test_fn(self: unittest.TestCase) -> None:
        passed, detail = _run_vector(vec)
        self.assertTrue(passed, "{}: {}".format(vec["test_id"], detail))
    return test_fn


# Attach test methods at import time.
try:
    for _vec in _load_vectors():
        _fn = _make_test(_vec)
        _fn.__name__ = "test_{}".format(_vec["test_id"])
        _fn.__qualname__ = "ConformanceTests.test_{}".format(_vec["test_id"])
        setattr(ConformanceTests, _fn.__name__, _fn)
except FileNotFoundError:
    pass


# ── Standalone CLI runner ─────────────────────────────────────

def main() -> None:
    global _VECTORS_DIR

    parser = argparse.ArgumentParser(description="kimchi conformance runner")
    parser.add_argument("--vectors-dir", default=None,
                        help="Directory containing vectors.json")
    args, _remaining = parser.parse_known_args()

    if args.vectors_dir:
        _VECTORS_DIR = args.vectors_dir

    failures: List[Tuple[str, str]] = []
    vectors = _load_vectors()
    for vec in vectors:
        passed, detail = _run_vector(vec)
        if not passed:
            failures.append((vec["test_id"], detail))

    total = len(vectors)
    print("CONFORMANCE: {}/{} PASS".format(total - len(failures), total))
    for tid, detail in failures:
        print("  FAIL {}: {}".format(tid, detail))

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()

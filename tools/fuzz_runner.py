#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Seeded fuzzing for the kimchi codec.
#
# Each round:
#   A) generates a random value, checks decode(encode(v)) == v and that
#      every composite body length equals the sum of its child records
#   B) mutates the encoding (byte flip, truncation, insertion, length
#      rewrite) and checks decode() either returns or raises DecodeError
#
# Any other outcome prints a minimal repro payload and exits non-zero.

import os, sys, random
from typing import Any, Callable, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import kimchi
from kimchi import DecodeError, HEADER_SIZE
from kimchi._constants import COMPOSITE_TAGS

SEED = int(os.environ.get("KIMCHI_SEED", "4242"))
ROUNDS = int(os.environ.get("KIMCHI_FUZZ_ROUNDS", "5000"))
MAX_GEN_DEPTH = int(os.environ.get("KIMCHI_GEN_MAX_DEPTH", "5"))

random.seed(SEED)

def fail(label: str, data: bytes, detail: str) -> None:
    print("FAIL:", label)
    print("HEX :", data.hex()[:4000])
    print("INFO:", detail)
    raise SystemExit(1)

# --- generators ---

def rand_int() -> int:
    r = random.random()
    if r < 0.6:
        return random.randint(-1000, 1000)
    if r < 0.85:
        return random.randint(-(2**63), 2**63 - 1)
    return random.choice([-1, 1]) * random.getrandbits(random.randint(64, 300))

def rand_text() -> str:
    out = []
    for _ in range(random.randint(0, 12)):
        r = random.random()
        if r < 0.7:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.9:
            out.append(chr(random.randint(0xA0, 0xD7FF)))
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)

def rand_scalar() -> Any:
    return random.choice([
        lambda: None,
        lambda: random.random() < 0.5,
        rand_int,
        lambda: random.uniform(-1e300, 1e300),
        lambda: bytes(random.getrandbits(8) for _ in range(random.randint(0, 24))),
        rand_text,
    ])()

def rand_hashable(depth: int) -> Any:
    if depth >= MAX_GEN_DEPTH or random.random() < 0.7:
        return rand_scalar()
    items = [rand_hashable(depth + 1) for _ in range(random.randint(0, 3))]
    return tuple(items) if random.random() < 0.5 else frozenset(items)

def rand_value(depth: int = 0) -> Any:
    if depth >= MAX_GEN_DEPTH or random.random() < 0.4:
        return rand_scalar()
    n = random.randint(0, 5)
    kind = random.randint(0, 4)
    if kind == 0:
        return [rand_value(depth + 1) for _ in range(n)]
    if kind == 1:
        return tuple(rand_value(depth + 1) for _ in range(n))
    if kind == 2:
        return {rand_hashable(depth + 1): rand_value(depth + 1) for _ in range(n)}
    if kind == 3:
        return {rand_hashable(depth + 1) for _ in range(n)}
    return frozenset(rand_hashable(depth + 1) for _ in range(n))

# --- mutators ---

def flip(data: bytes) -> bytes:
    b = bytearray(data)
    b[random.randrange(len(b))] = random.getrandbits(8)
    return bytes(b)

def truncate(data: bytes) -> bytes:
    return data[:random.randrange(len(data))]

def insert(data: bytes) -> bytes:
    i = random.randint(0, len(data))
    return data[:i] + bytes([random.getrandbits(8)]) + data[i:]

def rewrite_length(data: bytes) -> bytes:
    # Only the root header is known to sit at offset 0.
    b = bytearray(data)
    b[1:HEADER_SIZE] = random.getrandbits(64).to_bytes(8, "big")
    return bytes(b)

MUTATORS: List[Callable[[bytes], bytes]] = [flip, truncate, insert, rewrite_length]

# --- checks ---

def check_accounting(data: bytes) -> None:
    for rec in kimchi.iter_records(data):
        if rec.tag in COMPOSITE_TAGS:
            body = data[rec.body_offset:rec.body_offset + rec.length]
            total = sum(child.size for child in kimchi.iter_records(body))
            if total != rec.length:
                fail("length accounting", data, f"declared={rec.length} children={total}")
            check_accounting(body)

def main() -> int:
    for i in range(ROUNDS):
        value = rand_value()
        data = kimchi.encode(value)

        # A) round trip + accounting
        try:
            out = kimchi.decode(data)
        except DecodeError as e:
            fail("A round trip", data, f"round={i} raised {e.code}: {e}")
        if out != value:
            fail("A round trip", data, f"round={i} got {out!r}")
        check_accounting(data)

        # B) mutated input: value or DecodeError, nothing else
        mutate = random.choice(MUTATORS)
        bad = mutate(data)
        try:
            kimchi.decode(bad)
        except DecodeError:
            pass
        except Exception as e:
            fail("B " + mutate.__name__, bad, f"round={i} {type(e).__name__}: {e}")

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())

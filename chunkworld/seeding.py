# chunkworld/seeding.py

"""
================================================================================
SEED DERIVATION
================================================================================
Turns a parent seed plus an ordered list of tags into a new 32-bit seed, so
that every chunk and every field gets independent but reproducible randomness.

Data Contract:
---------------
- Inputs: primitive values (int, float, str, bool, None).
- Outputs: a signed 32-bit integer.
- Side Effects: None.
- Invariants: Pure integer arithmetic on the canonical text of the inputs.
  The same inputs give the same seed on every platform and interpreter.
  Order matters: derive_seed(s, 1, 2) != derive_seed(s, 2, 1) in general.
================================================================================
"""

import math
import numbers
import struct

from .errors import ConfigurationError

_UINT32_MASK = 0xFFFFFFFF


def to_int32(value: int) -> int:
    """Wraps an arbitrary Python int to the signed 32-bit range."""
    value &= _UINT32_MASK
    return value - 0x100000000 if value & 0x80000000 else value


def _canonical_text(value) -> str:
    # bool is an Integral, so it must be checked first.
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        value = float(value)
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    raise TypeError(f"Seed tags must be primitive values, got {type(value).__name__}")


def _utf16_units(text: str):
    encoded = text.encode("utf-16-le")
    return struct.unpack(f"<{len(encoded) // 2}H", encoded)


def generate_hash(*inputs) -> int:
    """
    Fast, deterministic, non-cryptographic hash of the given inputs.

    Each input is converted to its canonical text and folded in with the
    classic ``hash * 31 + unit`` step over UTF-16 code units.
    """
    hash_value = 0
    for item in inputs:
        for unit in _utf16_units(_canonical_text(item)):
            hash_value = (hash_value * 31 + unit) & _UINT32_MASK
    return to_int32(hash_value)


def derive_seed(parent_seed, *tags) -> int:
    """Derives a sub-seed, e.g. derive_seed(global_seed, cx, cz, "height")."""
    return generate_hash(parent_seed, *tags)


def resolve_seed(seed) -> int:
    """
    Converts a user-facing seed into the integer the pipeline works with.
    Strings are hashed once; integers are wrapped to signed 32 bits.
    """
    if isinstance(seed, bool):
        raise ConfigurationError("Seed must be an integer or a string, not a boolean.")
    if isinstance(seed, numbers.Integral):
        return to_int32(int(seed))
    if isinstance(seed, str):
        return generate_hash(seed)
    raise ConfigurationError(f"Seed must be an integer or a string, got {type(seed).__name__}.")

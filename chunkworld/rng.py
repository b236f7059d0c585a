# chunkworld/rng.py

"""
================================================================================
PSEUDO-RANDOM STREAM
================================================================================
A small, reproducible random number generator (Mulberry32). Every generator
in the pipeline owns its own instance, seeded from seeding.derive_seed(), so
no subsystem can disturb another's sequence.

Data Contract:
---------------
- Inputs (on initialization): a single integer seed (wrapped to 32 bits).
- Outputs: floats in [0, 1) from random(), plus convenience helpers.
- Side Effects: None beyond advancing the instance's own state.
- Invariants: The whole state is one 32-bit word. Only 32-bit integer
  multiplication, addition and xor-shifts are used, so the sequence is the
  same on every platform.
================================================================================
"""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_UINT32_MASK = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32-bit by 32-bit multiplication."""
    return (a * b) & _UINT32_MASK


class RNG:
    """Seeded Mulberry32 stream."""

    __slots__ = ("_seed", "_state")

    def __init__(self, seed: int):
        self._seed = int(seed) & _UINT32_MASK
        self._state = self._seed

    @property
    def seed(self) -> int:
        """The 32-bit seed this stream was created with."""
        return self._seed

    def random(self) -> float:
        """Returns the next float in [0.0, 1.0) and advances the stream."""
        self._state = (self._state + _INCREMENT) & _UINT32_MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _UINT32_MASK
        return ((t ^ (t >> 14)) & _UINT32_MASK) / _TWO_POW_32

    def random_int(self, low: int, high: int) -> int:
        """Integer N such that low <= N < high."""
        return int(self.random() * (high - low)) + low

    def random_float(self, low: float, high: float) -> float:
        return self.random() * (high - low) + low

    def random_bool(self, probability: float = 0.5) -> bool:
        return self.random() < probability

    def choice(self, seq: Sequence[T]) -> T:
        """Random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.random_int(0, len(seq))]

    def reset(self) -> None:
        """Rewinds the stream to its original seed."""
        self._state = self._seed

    def derive(self, offset: int) -> "RNG":
        """A new, independent stream seeded with seed + offset."""
        return RNG(self._seed + offset)

    def __repr__(self) -> str:
        return f"RNG(seed={self._seed})"

"""Counter-based pseudo-random function.

Every random draw in spatialbench is a pure function of ``(seed, ordinal,
stream)``. There is no generator state to advance, so any row can be
produced in isolation, by any thread, in any order.

The mixing function is the SplitMix64 finalizer. All arithmetic is modulo
2**64.
"""

from __future__ import annotations

MASK64 = (1 << 64) - 1
GOLDEN_GAMMA = 0x9E3779B97F4A7C15

_UNIT_SCALE = 2.0**-53


def mix64(value: int) -> int:
    """Apply one SplitMix64 step to ``value``."""
    z = (value + GOLDEN_GAMMA) & MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
    return z ^ (z >> 31)


def hash64(seed: int, ordinal: int, stream: int = 0) -> int:
    """Return a 64-bit hash of ``(seed, ordinal, stream)``.

    Args:
        seed: Configuration or table seed.
        ordinal: Zero-based row ordinal.
        stream: Draw index within the row (one per independent quantity).

    Returns:
        Unsigned 64-bit integer.
    """
    z = mix64(seed & MASK64)
    z = mix64(z ^ (ordinal & MASK64))
    return mix64(z ^ (stream & MASK64))


def unit(seed: int, ordinal: int, stream: int = 0) -> float:
    """Return a float in ``[0, 1)`` keyed by ``(seed, ordinal, stream)``."""
    return (hash64(seed, ordinal, stream) >> 11) * _UNIT_SCALE


def randint(seed: int, ordinal: int, stream: int, low: int, high: int) -> int:
    """Return an integer in the closed range ``[low, high]``."""
    return low + hash64(seed, ordinal, stream) % (high - low + 1)


def reduce(seed: int, ordinal: int, stream: int, cardinality: int) -> int:
    """Map a row onto ``[0, cardinality)``.

    Used for foreign keys: the result indexes into a dimension table of
    ``cardinality`` rows.
    """
    return hash64(seed, ordinal, stream) % cardinality

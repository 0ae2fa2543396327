"""
Deterministic random number generation for world planning.

Mulberry32 generator plus an FNV-1a string hash. Every planner builds its
own SimRng from an explicit seed, so the same seed and inputs always give
the same plan.
"""

from typing import List, Sequence, TypeVar, Union

T = TypeVar("T")

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

# Stand-in state for seeds that hash to zero
ZERO_SEED_STATE = 0x9E3779B9

_MULBERRY_INCREMENT = 0x6D2B79F5


class EmptyInputError(ValueError):
    """Raised when a random choice is requested from an empty sequence."""


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


def _int32(n):
    """Fold to a signed 32-bit integer."""
    n = _uint32(n)
    return n - 0x100000000 if n & 0x80000000 else n


def hash32(text: str) -> int:
    """
    FNV-1a hash of a string, folded to a signed 32-bit integer.

    Hashes UTF-16 code units so ids hash the same as they do in the
    browser tools that share these seeds.
    """
    h = FNV_OFFSET_BASIS
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _uint32(h * FNV_PRIME)
    return _int32(h)


class SimRng:
    """
    Seeded mulberry32 generator.

    Integer-only state updates; the only float operation is the final
    division, so sequences are bit-identical on every platform.
    """

    hash32 = staticmethod(hash32)

    def __init__(self, seed: Union[int, str]):
        """Initialize with an integer or string seed."""
        self.call_count = 0

        if isinstance(seed, str):
            state = _uint32(hash32(seed))
        else:
            state = _uint32(seed)

        self.state = state or ZERO_SEED_STATE

    def next(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        self.state = _uint32(self.state + _MULBERRY_INCREMENT)

        a = self.state
        t = _uint32((a ^ (a >> 15)) * (a | 1))
        t = _uint32(t + _uint32((t ^ (t >> 7)) * (t | 61))) ^ t
        return _uint32(t ^ (t >> 14)) / 4294967296

    def randint(self, lo: float, hi: float) -> int:
        """Random integer in [lo, hi], both bounds truncated toward zero."""
        lo = int(lo)
        hi = int(hi)
        if hi < lo:
            return lo
        return lo + int(self.next() * (hi - lo + 1))

    def chance(self, p_true: float = 0.5) -> bool:
        return self.next() < p_true

    def pick(self, items: Sequence[T]) -> T:
        """Choose an element from a non-empty sequence."""
        if not items:
            raise EmptyInputError("pick() called with empty input")
        return items[self.randint(0, len(items) - 1)]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """
        Fisher-Yates shuffle into a new list.

        The input sequence is left untouched.
        """
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.randint(0, i)
            result[i], result[j] = result[j], result[i]
        return result

"""
Module: core.utils.randomness

Purpose:
    Deterministic, platform-independent random primitives. A seeded
    mulberry32 stream plus Fisher-Yates shuffling and sampling built on it.
    The same seed always yields the same float sequence, which is what lets
    a session rebuild its per-question answer display order after reload.

Key Functions:
    - seeded_sequence(): Create a reproducible stream of floats in [0, 1)
    - string_to_seed(): FNV-1a hash of a string to a 32-bit seed
    - time_seed(): Wall-clock seed for non-deterministic sampling
    - shuffle(): Permuted copy via Fisher-Yates
    - sample_k(): k elements without replacement (shuffle then truncate)

Key Classes:
    - SeededRandom: mulberry32 generator

Dependencies:
    - time (std)

Used By:
    - selection.filters: Random subset selection and question shuffling
    - quiz.controller: Answer display order per session+question
"""

from __future__ import annotations

import time
from typing import Callable, Iterator, List, Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_MULBERRY_INCREMENT = 0x6D2B79F5
_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619

RandomSource = Callable[[], float]


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32x32 multiplication."""
    return (a * b) & _MASK32


class SeededRandom:
    """
    mulberry32 pseudo-random generator.

    Produces an infinite stream of floats in [0, 1). Calling the instance
    (or ``next()``) draws one value.

    Example:
        >>> rng = SeededRandom(42)
        >>> first = [rng() for _ in range(3)]
        >>> again = SeededRandom(42)
        >>> first == [again() for _ in range(3)]
        True
    """

    __slots__ = ("_state", "draws")

    def __init__(self, seed: int) -> None:
        self._state = int(seed) & _MASK32
        self.draws = 0

    def next_uint32(self) -> int:
        self._state = (self._state + _MULBERRY_INCREMENT) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32) ^ t
        self.draws += 1
        return (t ^ (t >> 14)) & _MASK32

    def next(self) -> float:
        return self.next_uint32() / 4294967296

    def __call__(self) -> float:
        return self.next()

    def __iter__(self) -> Iterator[float]:
        while True:
            yield self.next()


def seeded_sequence(seed: int) -> SeededRandom:
    """
    Create a reproducible random stream.

    Args:
        seed: Unsigned 32-bit seed (larger values are masked)

    Returns:
        SeededRandom yielding floats in [0, 1)
    """
    return SeededRandom(seed)


def string_to_seed(value: str) -> int:
    """
    Derive a 32-bit seed from a string (FNV-1a over UTF-16 code units).

    Stable across runs and platforms for the same input.

    Example:
        >>> string_to_seed("a")
        3826002220
    """
    h = _FNV_OFFSET_BASIS
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = _imul(h, _FNV_PRIME)
    return h


def time_seed() -> int:
    """Seed from the wall clock (epoch milliseconds, masked to 32 bits)."""
    return int(time.time() * 1000) & _MASK32


def shuffle(items: Sequence[T], rng: RandomSource) -> List[T]:
    """
    Return a shuffled copy of ``items`` (Fisher-Yates).

    Consumes exactly ``len(items) - 1`` draws from ``rng`` and never
    mutates the input.
    """
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = int(rng() * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out


def sample_k(items: Sequence[T], k: int, rng: RandomSource) -> List[T]:
    """
    Pick ``k`` elements without replacement.

    Shuffles then truncates, so ``k >= len(items)`` simply returns a full
    shuffle. Negative ``k`` yields an empty list.
    """
    return shuffle(items, rng)[: max(0, k)]

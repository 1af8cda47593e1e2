"""
Core Utilities

Randomness primitives, text normalization, and the session
encode/decode functions used at the storage boundary.
"""

from .randomness import (
    SeededRandom,
    seeded_sequence,
    string_to_seed,
    time_seed,
    shuffle,
    sample_k,
)
from .text import norm_space, answer_letter, normalize_indices
from .clock import Clock, now_ms

__all__ = [
    "SeededRandom",
    "seeded_sequence",
    "string_to_seed",
    "time_seed",
    "shuffle",
    "sample_k",
    "norm_space",
    "answer_letter",
    "normalize_indices",
    "Clock",
    "now_ms",
]

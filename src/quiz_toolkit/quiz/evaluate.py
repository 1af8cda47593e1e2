"""
Module: quiz.evaluate

Purpose:
    Answer-evaluation rule. Pure functions, no session state.

Correct-index resolution (in this order):
    1. ``original_correct_indices`` when ``prefer_original`` and non-empty
    2. ``correct_indices`` when non-empty
    3. indices of answers flagged ``is_correct``

The first tier lets a quiz-taker be scored against the answer key as it
was before a dataset maintainer changed it.

Key Functions:
    - correct_index_set(): Resolve the effective answer key
    - evaluate(): Exact set match of a selection against the key
    - is_multi_correct(): Whether more than one answer is correct
"""

from __future__ import annotations

from typing import FrozenSet, Iterable

from quiz_toolkit.core.models import Question


def correct_index_set(question: Question, prefer_original: bool = False) -> FrozenSet[int]:
    """
    Resolve the set of correct original indices.

    Example:
        >>> q = Question(id="q", original_correct_indices=(0,), correct_indices=(1,))
        >>> sorted(correct_index_set(q, prefer_original=True))
        [0]
        >>> sorted(correct_index_set(q))
        [1]
    """
    if prefer_original and question.original_correct_indices:
        return frozenset(question.original_correct_indices)
    if question.correct_indices:
        return frozenset(question.correct_indices)
    return frozenset(i for i, answer in enumerate(question.answers) if answer.is_correct)


def evaluate(question: Question, selected: Iterable[int], prefer_original: bool = False) -> bool:
    """
    True iff the selection equals the effective answer key as a set.

    Order and duplicate selections are irrelevant.
    """
    return frozenset(selected or ()) == correct_index_set(question, prefer_original)


def is_multi_correct(question: Question, prefer_original: bool = False) -> bool:
    """
    Whether the question needs multi-select input.

    Uses the current key unless ``prefer_original`` is given.
    """
    return len(correct_index_set(question, prefer_original)) > 1

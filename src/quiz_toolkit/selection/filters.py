"""
Module: selection.filters

Purpose:
    Pure filter/sampling pipeline that narrows a question list to the
    subset a quiz or search runs on. Every stage is total: it never
    raises, and an empty selector leaves its input unchanged.

Pipeline (order is significant):
    1. Exam-name filter
    2. Topic filter (super-topic OR (super, sub) pair)
    3. Image-mode filter
    4. Free-text search
    5. Random subset of N (time-seeded)
    6. Optional question shuffle (same stream)

Key Functions:
    - filter_by_exams(), filter_by_topics(), filter_by_image_mode()
    - search_questions(): Case-insensitive substring search
    - apply_random_and_shuffle(): Stages 5-6
    - build_subset(): Whole pipeline from a SubsetConfig
    - question_id_index(): id -> Question lookup

Dependencies:
    - core.utils.randomness: Sampling and shuffling

Used By:
    - quiz.controller callers (CLI, UI) to build start_quiz_session input
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from quiz_toolkit.core.models import Question
from quiz_toolkit.core.utils.randomness import RandomSource, sample_k, seeded_sequence, shuffle, time_seed

from .config import ImageMode, SubsetConfig, parse_sub_topic_pairs

logger = logging.getLogger(__name__)


def filter_by_exams(questions: Sequence[Question], exam_names: Iterable[str]) -> List[Question]:
    """Keep questions whose exam_name is in ``exam_names`` (no-op when empty)."""
    wanted = set(exam_names or ())
    if not wanted:
        return list(questions)
    return [q for q in questions if q.exam_name and q.exam_name in wanted]


def filter_by_topics(
    questions: Sequence[Question],
    super_topics: Iterable[str] = (),
    sub_topics: Iterable[Tuple[str, str]] = (),
) -> List[Question]:
    """
    Keep questions matching a selected super-topic or (super, sub) pair.

    No-op when both selector sets are empty. Sub-topic pairs may also be
    given in the ``"Super::Sub"`` string form.
    """
    super_set = {str(t).strip() for t in super_topics or () if str(t).strip()}
    pair_set = parse_sub_topic_pairs(sub_topics)
    if not super_set and not pair_set:
        return list(questions)

    out = []
    for q in questions:
        sup = (q.super_topic or "").strip()
        sub = (q.sub_topic or "").strip()
        if sup and sup in super_set:
            out.append(q)
        elif sup and sub and (sup, sub) in pair_set:
            out.append(q)
    return out


def filter_by_image_mode(questions: Sequence[Question], mode: ImageMode | str | None) -> List[Question]:
    """Filter by image presence; unknown modes behave like ``all``."""
    mode = ImageMode.parse(mode)
    if mode is ImageMode.WITH:
        return [q for q in questions if q.has_images]
    if mode is ImageMode.WITHOUT:
        return [q for q in questions if not q.has_images]
    return list(questions)


def search_questions(
    questions: Sequence[Question],
    query: str = "",
    *,
    in_answers: bool = False,
) -> List[Question]:
    """
    Case-insensitive substring search over question text.

    Args:
        questions: Input list
        query: Search term; blank means no filtering
        in_answers: Also match against answer texts

    Returns:
        Matching questions in input order
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(questions)

    out = []
    for q in questions:
        if needle in (q.text or "").lower():
            out.append(q)
        elif in_answers and any(needle in (a.text or "").lower() for a in q.answers):
            out.append(q)
    return out


def apply_random_and_shuffle(
    questions: Sequence[Question],
    *,
    random_n: int = 0,
    shuffle_questions: bool = False,
    rng: Optional[RandomSource] = None,
) -> List[Question]:
    """
    Random subset selection followed by an optional shuffle.

    Sampling only happens when ``0 < random_n < len(questions)``. Both
    steps draw from one stream, seeded from the wall clock unless ``rng``
    is supplied, so results vary per session by design.
    """
    if rng is None:
        rng = seeded_sequence(time_seed())

    out = list(questions)
    if 0 < random_n < len(out):
        out = sample_k(out, random_n, rng)
    if shuffle_questions:
        out = shuffle(out, rng)
    return out


def build_subset(
    questions: Sequence[Question],
    config: SubsetConfig,
    *,
    rng: Optional[RandomSource] = None,
) -> List[Question]:
    """
    Run the full pipeline.

    Each stage only narrows what the previous stage returned; no stage
    re-expands a filtered set.

    Example:
        >>> subset = build_subset(catalog.questions(), SubsetConfig(random_n=10))
        >>> len(subset) <= 10
        True
    """
    out = filter_by_exams(questions, config.exams)
    out = filter_by_topics(out, config.super_topics, config.sub_topics)
    out = filter_by_image_mode(out, config.image_mode)
    out = search_questions(out, config.query, in_answers=config.in_answers)
    filtered_count = len(out)
    out = apply_random_and_shuffle(
        out,
        random_n=config.random_n,
        shuffle_questions=config.shuffle_questions,
        rng=rng,
    )
    logger.debug(f"Subset: {len(questions)} -> {filtered_count} filtered -> {len(out)} selected")
    return out


def question_id_index(questions: Iterable[Question]) -> Dict[str, Question]:
    """Map question id -> Question (last wins on duplicate ids)."""
    return {q.id: q for q in questions}

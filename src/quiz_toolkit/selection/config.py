"""
Module: selection.config

Purpose:
    Configuration for narrowing a catalog to a quiz or search subset.
    Immutable configuration with validation on construction.

Key Classes:
    - ImageMode: Three-state image presence filter
    - SubsetConfig: All filter/sampling settings for one subset build

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - selection.filters: build_subset
    - quiz.config: QuizConfig embeds the subset settings it was built with
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Tuple

SUB_TOPIC_SEPARATOR = "::"


class ImageMode(str, Enum):
    """
    Image presence filter.

    Attributes:
        ALL: No filtering
        WITH: Only questions with at least one image
        WITHOUT: Only questions without images

    Example:
        >>> ImageMode.parse("with") is ImageMode.WITH
        True
        >>> ImageMode.parse("bogus") is ImageMode.ALL
        True
    """

    ALL = "all"
    WITH = "with"
    WITHOUT = "without"

    @classmethod
    def parse(cls, value: Any) -> ImageMode:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "all").lower())
        except ValueError:
            return cls.ALL


def parse_sub_topic_pairs(values: Iterable[Any]) -> FrozenSet[Tuple[str, str]]:
    """
    Normalize sub-topic selectors to ``(super_topic, sub_topic)`` pairs.

    Accepts tuples/lists of two strings or the ``"Super::Sub"`` encoding.
    Anything else is ignored.
    """
    pairs = set()
    for value in values or ():
        if isinstance(value, str):
            if SUB_TOPIC_SEPARATOR not in value:
                continue
            sup, sub = value.split(SUB_TOPIC_SEPARATOR, 1)
        elif isinstance(value, (tuple, list)) and len(value) == 2:
            sup, sub = value
        else:
            continue
        sup, sub = str(sup).strip(), str(sub).strip()
        if sup and sub:
            pairs.add((sup, sub))
    return frozenset(pairs)


@dataclass(frozen=True)
class SubsetConfig:
    """
    Settings for building a question subset (immutable).

    Attributes:
        exams: Exam names to keep (empty = all)
        super_topics: Super-topics to keep
        sub_topics: ``(super_topic, sub_topic)`` pairs to keep
        image_mode: Image presence filter
        query: Case-insensitive substring search (empty = no search)
        in_answers: Also search answer texts
        random_n: Random subset size (0 = keep all)
        shuffle_questions: Shuffle the final order

    Invariants:
        - random_n >= 0

    Example:
        >>> config = SubsetConfig(exams=("Exam A",), random_n=20)
        >>> config.has_topic_filter
        False
    """

    exams: Tuple[str, ...] = ()
    super_topics: Tuple[str, ...] = ()
    sub_topics: FrozenSet[Tuple[str, str]] = field(default_factory=frozenset)
    image_mode: ImageMode = ImageMode.ALL
    query: str = ""
    in_answers: bool = False
    random_n: int = 0
    shuffle_questions: bool = False

    def __post_init__(self) -> None:
        """Validate and normalize on construction."""
        if self.random_n < 0:
            raise ValueError(f"random_n must be non-negative: {self.random_n}")
        # Frozen: normalize loose inputs through object.__setattr__
        object.__setattr__(self, "exams", tuple(self.exams))
        object.__setattr__(self, "super_topics", tuple(self.super_topics))
        object.__setattr__(self, "sub_topics", parse_sub_topic_pairs(self.sub_topics))
        object.__setattr__(self, "image_mode", ImageMode.parse(self.image_mode))

    @property
    def has_topic_filter(self) -> bool:
        return bool(self.super_topics or self.sub_topics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exams": list(self.exams),
            "superTopics": list(self.super_topics),
            "subTopics": sorted(f"{sup}{SUB_TOPIC_SEPARATOR}{sub}" for sup, sub in self.sub_topics),
            "imageFilter": self.image_mode.value,
            "query": self.query,
            "inAnswers": self.in_answers,
            "randomN": self.random_n,
            "shuffleQuestions": self.shuffle_questions,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SubsetConfig:
        """Build from a stored dict; missing or malformed keys fall back to defaults."""
        data = data if isinstance(data, dict) else {}
        try:
            random_n = max(0, int(data.get("randomN") or 0))
        except (TypeError, ValueError):
            random_n = 0
        return cls(
            exams=tuple(str(e) for e in data.get("exams") or () if e),
            super_topics=tuple(str(t) for t in data.get("superTopics") or () if t),
            sub_topics=parse_sub_topic_pairs(data.get("subTopics") or ()),
            image_mode=ImageMode.parse(data.get("imageFilter")),
            query=str(data.get("query") or ""),
            in_answers=bool(data.get("inAnswers", False)),
            random_n=random_n,
            shuffle_questions=bool(data.get("shuffleQuestions", False)),
        )

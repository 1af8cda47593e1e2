"""
Module: questions

Purpose:
    Provides the Question dataclass - the normalized, read-only record the
    catalog hands to the engine. Answer positions in ``answers`` are the
    *original indices* used for scoring and storage; display order is a
    separate per-session permutation.

Key Classes:
    - Answer: One answer option (text + correctness flag)
    - Question: Complete multiple-choice question

Key Functions:
    - Question.to_dict() / Question.from_dict(): Catalog JSON (camelCase)

Dependencies:
    - dataclasses (std)

Used By:
    - catalog.loader: Normalization of raw records
    - selection.filters: Filter/sampling pipeline
    - quiz.evaluate: Correct-index resolution
    - quiz.controller: Session start
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Answer:
    """
    One answer option (immutable).

    Attributes:
        text: Whitespace-normalized answer text
        is_correct: Per-answer correctness flag (used only when the
            question carries no explicit correct index list)
    """

    text: str
    is_correct: bool = False

    def to_dict(self) -> dict:
        return {"text": self.text, "isCorrect": self.is_correct}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Answer:
        return cls(text=str(data.get("text") or ""), is_correct=bool(data.get("isCorrect")))


@dataclass(frozen=True)
class Question:
    """
    Multiple-choice question (immutable).

    Attributes:
        id: Unique, non-empty identifier
        text: Normalized question body
        answers: Answer options in original order
        correct_indices: Current answer key (original indices), may be empty
        original_correct_indices: Answer key before a maintainer edit, may be empty
        exam_name: Source exam, if known
        exam_year: Source exam year, if known
        explanation: Optional explanation text
        super_topic: Top-level topic classification
        sub_topic: Topic below ``super_topic``
        image_files: Opaque image asset references

    Invariants:
        - id is non-empty after stripping

    Example:
        >>> q = Question(
        ...     id="q1",
        ...     text="2 + 2 = ?",
        ...     answers=(Answer("3"), Answer("4", True)),
        ... )
        >>> q.answer_count
        2
    """

    id: str
    text: str = ""
    answers: tuple[Answer, ...] = ()
    correct_indices: tuple[int, ...] = ()
    original_correct_indices: tuple[int, ...] = ()
    exam_name: Optional[str] = None
    exam_year: Optional[int] = None
    explanation: Optional[str] = None
    super_topic: Optional[str] = None
    sub_topic: Optional[str] = None
    image_files: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError(f"question id must be a non-empty string: {self.id!r}")

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def answer_count(self) -> int:
        return len(self.answers)

    @property
    def has_images(self) -> bool:
        return len(self.image_files) > 0

    @property
    def answer_key_changed(self) -> bool:
        """
        Whether the answer key was edited after the original was recorded.

        True only when an original key exists and differs (as a set) from
        the current explicit key.
        """
        if not self.original_correct_indices:
            return False
        return set(self.original_correct_indices) != set(self.correct_indices)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to the catalog JSON shape.

        Returns:
            Dict with camelCase keys, suitable for a ``questions`` array
        """
        d: Dict[str, Any] = {
            "id": self.id,
            "questionText": self.text,
            "answers": [a.to_dict() for a in self.answers],
            "correctIndices": list(self.correct_indices),
            "imageFiles": list(self.image_files),
        }
        if self.original_correct_indices:
            d["originalCorrectIndices"] = list(self.original_correct_indices)
        if self.exam_name is not None:
            d["examName"] = self.exam_name
        if self.exam_year is not None:
            d["examYear"] = self.exam_year
        if self.explanation:
            d["explanationText"] = self.explanation
        if self.super_topic:
            d["aiSuperTopic"] = self.super_topic
        if self.sub_topic:
            d["aiSubtopic"] = self.sub_topic
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        """
        Deserialize from an already-normalized catalog dict.

        Raw, untrusted records go through ``catalog.loader.normalize_question``
        instead, which also collapses whitespace and drops bad ids.
        """
        return cls(
            id=data["id"],
            text=data.get("questionText", ""),
            answers=tuple(Answer.from_dict(a) for a in data.get("answers", [])),
            correct_indices=tuple(data.get("correctIndices", [])),
            original_correct_indices=tuple(data.get("originalCorrectIndices", [])),
            exam_name=data.get("examName"),
            exam_year=data.get("examYear"),
            explanation=data.get("explanationText"),
            super_topic=data.get("aiSuperTopic"),
            sub_topic=data.get("aiSubtopic"),
            image_files=tuple(data.get("imageFiles", [])),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Question({self.id!r}, exam={self.exam_name!r}, "
            f"answers={self.answer_count}, images={len(self.image_files)})"
        )

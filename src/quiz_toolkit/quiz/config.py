"""
Module: quiz.config

Purpose:
    Configuration a quiz session is started with. Stored inside the
    session record as the opaque ``quizConfig`` object, so it must survive
    round trips through older or newer versions: unknown keys are ignored
    on read and the session keeps the raw dict as-is.

Key Classes:
    - QuizMode: practice (solutions shown while answering) or exam
    - QuizConfig: Session configuration
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from quiz_toolkit.core.models import ViewMode
from quiz_toolkit.selection.config import SubsetConfig

logger = logging.getLogger(__name__)

LEGACY_MODIFIED_KEY_FLAG = "useAiModifiedAnswers"


def _prefers_original_key(data: Dict[str, Any]) -> bool:
    """
    Original-key policy of a stored ``quizConfig``.

    ``useOriginalAnswerKey`` wins when present. Older records instead carry
    ``useAiModifiedAnswers``, where an explicit ``false`` means the original
    key; a missing or non-boolean flag means the current key.
    """
    if "useOriginalAnswerKey" in data:
        return bool(data["useOriginalAnswerKey"])
    return data.get(LEGACY_MODIFIED_KEY_FLAG) is False


class QuizMode(str, Enum):
    PRACTICE = "practice"
    EXAM = "exam"


@dataclass(frozen=True)
class QuizConfig:
    """
    Quiz session configuration (immutable).

    Attributes:
        shuffle_answers: Assign each question a per-session answer display order
        quiz_mode: PRACTICE shows solutions after each submit, EXAM only in review
        prefer_original_key: Score against the pre-edit answer key where one exists
        subset: Filter/sampling settings used to build the question subset

    Example:
        >>> config = QuizConfig(shuffle_answers=True, quiz_mode=QuizMode.EXAM)
        >>> config.solutions_visible(ViewMode.QUIZ)
        False
    """

    shuffle_answers: bool = False
    quiz_mode: QuizMode = QuizMode.PRACTICE
    prefer_original_key: bool = False
    subset: SubsetConfig = field(default_factory=SubsetConfig)

    @property
    def shuffle_questions(self) -> bool:
        return self.subset.shuffle_questions

    @property
    def random_n(self) -> int:
        return self.subset.random_n

    def solutions_visible(self, view: ViewMode) -> bool:
        if self.quiz_mode is QuizMode.PRACTICE:
            return True
        return view is ViewMode.REVIEW

    def to_dict(self) -> Dict[str, Any]:
        d = self.subset.to_dict()
        d.update(
            {
                "shuffleAnswers": self.shuffle_answers,
                "quizMode": self.quiz_mode.value,
                "useOriginalAnswerKey": self.prefer_original_key,
            }
        )
        return d

    @classmethod
    def from_dict(cls, data: Any) -> QuizConfig:
        """Build from a stored ``quizConfig``; malformed values fall back to defaults."""
        if not isinstance(data, dict):
            return cls()
        try:
            mode = QuizMode(str(data.get("quizMode") or QuizMode.PRACTICE.value))
        except ValueError:
            logger.debug(f"Unknown quiz mode {data.get('quizMode')!r}, using practice")
            mode = QuizMode.PRACTICE
        return cls(
            shuffle_answers=bool(data.get("shuffleAnswers", False)),
            quiz_mode=mode,
            prefer_original_key=_prefers_original_key(data),
            subset=SubsetConfig.from_dict(data),
        )

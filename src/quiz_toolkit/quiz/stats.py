"""
Module: quiz.stats

Purpose:
    Read-only aggregates over a session (progress, per-exam and per-topic
    breakdown) and over a whole dataset (latest result per question).

Key Functions:
    - session_progress(): Counts and percentages for one session
    - exam_breakdown(): Progress per exam name
    - topic_breakdown(): Progress per super-topic with sub-topic buckets
    - dataset_overview(): Correct/wrong/unseen across finished sessions

Dependencies:
    - core.models.session: QuizSession

Used By:
    - quiz_toolkit.cli: ``stats`` command
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Protocol

from quiz_toolkit.core.models import Question, QuizSession

UNKNOWN_EXAM = "(unknown exam)"
UNKNOWN_TOPIC = "(no topic)"


class QuestionLookup(Protocol):
    def get(self, question_id: str) -> Optional[Question]: ...


def percent(part: int, whole: int) -> int:
    """Rounded percentage, halves rounding up (0 when ``whole`` is 0)."""
    if not whole:
        return 0
    return int(part * 100 / whole + 0.5)


@dataclass(frozen=True)
class QuizProgress:
    """
    Progress of a set of questions (immutable).

    Attributes:
        total: Questions in scope
        submitted: Questions with a locked-in answer
        correct: Submitted and correct
    """

    total: int = 0
    submitted: int = 0
    correct: int = 0

    @property
    def wrong(self) -> int:
        return max(0, self.submitted - self.correct)

    @property
    def unanswered(self) -> int:
        return max(0, self.total - self.submitted)

    @property
    def pct_answered(self) -> int:
        """Correct as a share of submitted questions."""
        return percent(self.correct, self.submitted)

    @property
    def pct_all(self) -> int:
        """Correct as a share of all questions."""
        return percent(self.correct, self.total)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "submitted": self.submitted,
            "correct": self.correct,
            "wrong": self.wrong,
            "unanswered": self.unanswered,
            "pctAnswered": self.pct_answered,
            "pctAll": self.pct_all,
        }


def _progress_of(session: QuizSession, question_ids: Iterable[str]) -> QuizProgress:
    total = submitted = correct = 0
    for qid in question_ids:
        total += 1
        if qid in session.submitted:
            submitted += 1
            if session.results.get(qid) is True:
                correct += 1
    return QuizProgress(total=total, submitted=submitted, correct=correct)


def session_progress(session: QuizSession) -> QuizProgress:
    return _progress_of(session, session.question_order)


def exam_breakdown(session: QuizSession, catalog: QuestionLookup) -> Dict[str, QuizProgress]:
    """
    Progress per exam name, in first-appearance order.

    Questions missing from the catalog or without an exam name are
    grouped under ``UNKNOWN_EXAM``.
    """
    groups: Dict[str, list] = {}
    for qid in session.question_order:
        question = catalog.get(qid)
        exam = (question.exam_name if question else None) or UNKNOWN_EXAM
        groups.setdefault(exam, []).append(qid)
    return {exam: _progress_of(session, ids) for exam, ids in groups.items()}


@dataclass
class TopicProgress:
    """Progress of one super-topic, with its sub-topics."""

    name: str
    progress: QuizProgress = field(default_factory=QuizProgress)
    sub_topics: Dict[str, QuizProgress] = field(default_factory=dict)


def topic_breakdown(session: QuizSession, catalog: QuestionLookup) -> Dict[str, TopicProgress]:
    """Progress per super-topic and sub-topic, in first-appearance order."""
    groups: Dict[str, Dict[str, list]] = {}
    for qid in session.question_order:
        question = catalog.get(qid)
        sup = (question.super_topic if question else None) or UNKNOWN_TOPIC
        sub = (question.sub_topic if question else None) or UNKNOWN_TOPIC
        groups.setdefault(sup, {}).setdefault(sub, []).append(qid)

    out: Dict[str, TopicProgress] = {}
    for sup, subs in groups.items():
        all_ids = [qid for ids in subs.values() for qid in ids]
        out[sup] = TopicProgress(
            name=sup,
            progress=_progress_of(session, all_ids),
            sub_topics={sub: _progress_of(session, ids) for sub, ids in subs.items()},
        )
    return out


@dataclass(frozen=True)
class DatasetOverview:
    """
    Latest-result summary of a dataset's questions.

    Attributes:
        total: Questions in the catalog
        correct: Latest finished result is correct
        wrong: Latest finished result is wrong
    """

    total: int
    correct: int
    wrong: int

    @property
    def unseen(self) -> int:
        return max(0, self.total - self.correct - self.wrong)


def dataset_overview(question_ids: Iterable[str], latest_results: Mapping[str, bool]) -> DatasetOverview:
    """
    Summarize ``SessionStore.latest_answered_results_by_question`` output
    for the questions currently in the catalog. Results for questions no
    longer in the catalog are ignored.
    """
    ids = list(dict.fromkeys(question_ids))
    correct = sum(1 for qid in ids if latest_results.get(qid) is True)
    wrong = sum(1 for qid in ids if latest_results.get(qid) is False)
    return DatasetOverview(total=len(ids), correct=correct, wrong=wrong)

"""
Module: session

Purpose:
    In-memory representation of one quiz attempt. Container-native
    (sets/dicts) while active; the plain-JSON persisted record shape lives only
    at the storage boundary (core.utils.serialization).

Key Classes:
    - ViewMode: Workflow mode of the controller
    - QuizSession: Mutable session state

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - quiz.controller: Owns the active session
    - core.utils.serialization: encode_session / decode_session
    - quiz.stats, export.csv_export: Read-only consumers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

QUIZ_KIND = "quiz"


class ViewMode(str, Enum):
    """Workflow mode. ``SEARCH`` is a browse mode with no session object."""

    CONFIG = "config"
    QUIZ = "quiz"
    REVIEW = "review"
    SEARCH = "search"


@dataclass
class QuizSession:
    """
    Mutable quiz session.

    Attributes:
        id: Unique session id, fixed for the session's lifetime
        dataset_id: Partition key in the session store
        dataset_label: Human-readable dataset name
        notebook_url: Optional link stored alongside the dataset
        kind: Always "quiz" for sessions created by the controller
        created_at: Epoch ms of creation
        updated_at: Epoch ms of the last successful save
        finished_at: Epoch ms of the first finish, None while active
        quiz_config: Opaque configuration dict the session was started with
        question_order: Question ids, fixed at creation
        answer_order: question id -> display permutation of original indices
        answers: question id -> currently selected original indices
        submitted: Question ids with a locked-in answer
        results: question id -> correctness, only for submitted ids

    Invariants:
        - question_order has no duplicates
        - every id in answer_order/answers/submitted/results is in question_order
        - every key of results is in submitted
    """

    id: str
    dataset_id: str
    dataset_label: str = ""
    notebook_url: Optional[str] = None
    kind: str = QUIZ_KIND
    created_at: int = 0
    updated_at: Optional[int] = None
    finished_at: Optional[int] = None
    quiz_config: Dict[str, Any] = field(default_factory=dict)
    question_order: List[str] = field(default_factory=list)
    answer_order: Dict[str, List[int]] = field(default_factory=dict)
    answers: Dict[str, Set[int]] = field(default_factory=dict)
    submitted: Set[str] = field(default_factory=set)
    results: Dict[str, bool] = field(default_factory=dict)

    @property
    def is_finished(self) -> bool:
        return self.finished_at is not None

    def selected(self, question_id: str) -> List[int]:
        """Selected original indices for a question, sorted."""
        return sorted(self.answers.get(question_id, ()))

    def is_submitted(self, question_id: str) -> bool:
        return question_id in self.submitted

    def invariant_violations(self) -> List[str]:
        """
        Describe broken invariants (empty list when consistent).

        Consistency check used by the test suite; decode_session already
        drops the entries that would show up here.
        """
        problems: List[str] = []
        order = set(self.question_order)
        if len(order) != len(self.question_order):
            problems.append("question_order contains duplicates")
        for name, keys in (
            ("answer_order", self.answer_order.keys()),
            ("answers", self.answers.keys()),
            ("submitted", self.submitted),
            ("results", self.results.keys()),
        ):
            stray = sorted(set(keys) - order)
            if stray:
                problems.append(f"{name} has ids outside question_order: {stray}")
        unsubmitted = sorted(set(self.results) - self.submitted)
        if unsubmitted:
            problems.append(f"results for unsubmitted ids: {unsubmitted}")
        return problems

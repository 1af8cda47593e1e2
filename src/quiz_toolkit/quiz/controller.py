"""
Module: quiz.controller

Purpose:
    Session state machine. Owns the active QuizSession and the workflow
    view, applies the evaluation rule on submit, and writes the session
    to the SessionStore after every content mutation.

    config --start--> quiz --finish--> review
      ^                |                  |
      +----abort-------+------abort-------+

    ``search`` is a browse mode beside this machine; it holds a question
    subset but no session.

    Persistence is best-effort: a failed save is logged and the in-memory
    session stays authoritative for the rest of the process.

Key Classes:
    - QuizController: Session lifecycle and answer mutations
    - SearchView: Subset shown in search mode
    - QuizError (+ subclasses): Rejected operations

Dependencies:
    - quiz.evaluate: Scoring on submit
    - storage.session_store: Durable snapshots
    - core.utils.randomness: Per-question answer display order

Used By:
    - quiz_toolkit.cli and UI front-ends
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from quiz_toolkit.catalog.manifest import DatasetInfo
from quiz_toolkit.core.models import Question, QuizSession, ViewMode, QUIZ_KIND
from quiz_toolkit.core.utils.clock import Clock, now_ms
from quiz_toolkit.core.utils.randomness import seeded_sequence, shuffle, string_to_seed
from quiz_toolkit.core.utils.serialization import decode_session, encode_session
from quiz_toolkit.core.utils.text import normalize_indices
from quiz_toolkit.selection.config import SubsetConfig
from quiz_toolkit.storage.session_store import SessionStore

from .config import QuizConfig
from .evaluate import evaluate, is_multi_correct

logger = logging.getLogger(__name__)


class QuizError(ValueError):
    """Operation rejected by the quiz state machine. Nothing was mutated."""
    pass


class InvalidSubsetError(QuizError):
    """Session start with an empty subset or duplicate question ids."""
    pass


class InvalidSessionTypeError(QuizError):
    """Stored session is not a quiz session."""
    pass


class InvalidStateError(QuizError):
    """Operation not valid in the current view."""
    pass


class UnknownQuestionError(QuizError):
    """Question is not part of the active session."""
    pass


@dataclass
class SearchView:
    """
    Search-mode state.

    Attributes:
        question_order: Ids of the browsed subset, in display order
        config: Filter settings the subset was built with
    """

    question_order: List[str] = field(default_factory=list)
    config: SubsetConfig = field(default_factory=SubsetConfig)


def new_session_id(now: int) -> str:
    return f"s_{now}_{uuid.uuid4().hex[:12]}"


def answer_display_order(session_id: str, question: Question) -> List[int]:
    """
    Deterministic display permutation of a question's original indices.

    Seeded from ``"<session_id>|<question_id>"`` so the same session
    always shows the same order, including after hydration.
    """
    rng = seeded_sequence(string_to_seed(f"{session_id}|{question.id}"))
    return shuffle(list(range(question.answer_count)), rng)


class QuizController:
    """
    Quiz session state machine for one dataset.

    Args:
        store: Where sessions are persisted
        dataset: Dataset the sessions belong to (partition key + labels)
        clock: Epoch-ms time source

    Example:
        >>> controller = QuizController(store, DatasetInfo(id="ds1"))
        >>> session = controller.start_quiz_session(subset, QuizConfig(shuffle_answers=True))
        >>> controller.select_answer(subset[0], 1)
        >>> controller.submit_answer(subset[0])
        >>> controller.finish_quiz_session()
        >>> controller.view
        <ViewMode.REVIEW: 'review'>
    """

    def __init__(self, store: SessionStore, dataset: DatasetInfo, *, clock: Clock = now_ms) -> None:
        self.store = store
        self.dataset = dataset
        self._clock = clock
        self.view: ViewMode = ViewMode.CONFIG
        self.session: Optional[QuizSession] = None
        self.search: Optional[SearchView] = None

    # ─────────────────────────────────────────────────────────────────────────
    # State helpers
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def config(self) -> QuizConfig:
        """Parsed configuration of the active session (defaults when none)."""
        if self.session is None:
            return QuizConfig()
        return QuizConfig.from_dict(self.session.quiz_config)

    @property
    def prefer_original(self) -> bool:
        return self.config.prefer_original_key

    def solutions_visible(self) -> bool:
        return self.session is not None and self.config.solutions_visible(self.view)

    def _require_view(self, *views: ViewMode) -> QuizSession:
        if self.session is None or self.view not in views:
            allowed = "/".join(v.value for v in views)
            raise InvalidStateError(f"Operation requires {allowed} view with an active session (view={self.view.value})")
        return self.session

    def _require_member(self, session: QuizSession, question_id: str) -> None:
        if question_id not in session.question_order:
            raise UnknownQuestionError(f"Question {question_id!r} is not part of session {session.id}")

    def _reset(self) -> None:
        self.session = None
        self.search = None

    def persist_current_session(self) -> bool:
        """
        Save the active session.

        Returns:
            True if the save landed; False if there was nothing to save or
            the store raised (logged, in-memory state untouched)
        """
        session = self.session
        if session is None:
            return False
        try:
            record = self.store.save_session(self.dataset.id, session)
        except Exception as e:
            logger.warning(f"Could not persist session {session.id}: {e}")
            return False
        session.updated_at = record.get("updatedAt")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def start_quiz_session(
        self,
        subset: Sequence[Question],
        config: Union[QuizConfig, Mapping[str, Any], None] = None,
    ) -> QuizSession:
        """
        Start a new session over ``subset`` (question order is kept as given).

        Args:
            subset: Non-empty questions, unique ids
            config: QuizConfig, or a raw ``quizConfig`` mapping stored as-is

        Returns:
            The new active session

        Raises:
            InvalidSubsetError: If the subset is empty or repeats an id
        """
        subset = list(subset or ())
        if not subset:
            raise InvalidSubsetError("Cannot start a quiz with an empty question subset")
        ids = [q.id for q in subset]
        if len(set(ids)) != len(ids):
            dupes = sorted({qid for qid in ids if ids.count(qid) > 1})
            raise InvalidSubsetError(f"Question subset contains duplicate ids: {dupes}")

        if isinstance(config, QuizConfig):
            raw_config = config.to_dict()
        elif isinstance(config, Mapping):
            raw_config = dict(config)
        else:
            raw_config = QuizConfig().to_dict()
        parsed = QuizConfig.from_dict(raw_config)

        now = self._clock()
        session = QuizSession(
            id=new_session_id(now),
            dataset_id=self.dataset.id,
            dataset_label=self.dataset.display_label,
            notebook_url=self.dataset.notebook_url,
            kind=QUIZ_KIND,
            created_at=now,
            quiz_config=raw_config,
            question_order=ids,
        )
        if parsed.shuffle_answers:
            session.answer_order = {q.id: answer_display_order(session.id, q) for q in subset}

        self._reset()
        self.session = session
        self.view = ViewMode.QUIZ
        self.persist_current_session()
        logger.info(f"Started session {session.id} with {len(ids)} question(s) ({parsed.quiz_mode.value} mode)")
        return session

    def finish_quiz_session(self) -> None:
        """
        Move to review. ``finished_at`` is set only on the first finish.

        Finishing while already in review does nothing.

        Raises:
            InvalidStateError: Outside quiz/review
        """
        session = self._require_view(ViewMode.QUIZ, ViewMode.REVIEW)
        if self.view is ViewMode.REVIEW:
            logger.debug(f"Session {session.id} already finished")
            return
        self.view = ViewMode.REVIEW
        if session.finished_at is None:
            session.finished_at = self._clock()
        self.persist_current_session()
        logger.info(f"Finished session {session.id}")

    def abort_quiz_session(self) -> None:
        """
        Delete the session from the store and return to config.

        A failing delete is logged and ignored.

        Raises:
            InvalidStateError: Outside quiz/review
        """
        session = self._require_view(ViewMode.QUIZ, ViewMode.REVIEW)
        try:
            self.store.delete_session(self.dataset.id, session.id)
        except Exception as e:
            logger.warning(f"Could not delete session {session.id}: {e}")
        self._reset()
        self.view = ViewMode.CONFIG
        logger.info(f"Aborted session {session.id}")

    def hydrate_quiz_session(self, stored: Union[QuizSession, Dict[str, Any]]) -> QuizSession:
        """
        Make a stored session the active one.

        View becomes review when the session is finished, quiz otherwise.
        Nothing is written to the store.

        Raises:
            InvalidSessionTypeError: If ``stored`` is not a quiz session
            QuizError: If the record has no id
        """
        if isinstance(stored, QuizSession):
            if stored.kind != QUIZ_KIND:
                raise InvalidSessionTypeError(f"Not a quiz session (kind={stored.kind!r})")
            session = decode_session(encode_session(stored))
        else:
            if not isinstance(stored, dict) or stored.get("kind") != QUIZ_KIND:
                kind = stored.get("kind") if isinstance(stored, dict) else type(stored).__name__
                raise InvalidSessionTypeError(f"Not a quiz session (kind={kind!r})")
            try:
                session = decode_session(stored)
            except ValueError as e:
                raise QuizError(f"Invalid stored session: {e}") from e

        if not session.dataset_id:
            session.dataset_id = self.dataset.id
        if not session.dataset_label:
            session.dataset_label = self.dataset.display_label

        self._reset()
        self.session = session
        self.view = ViewMode.REVIEW if session.is_finished else ViewMode.QUIZ
        logger.info(f"Hydrated session {session.id} ({self.view.value})")
        return session

    def resume_session(self, session_id: str) -> Optional[QuizSession]:
        """Load a stored session of this dataset and hydrate it; None if absent."""
        record = self.store.load_session(self.dataset.id, session_id)
        if record is None:
            logger.info(f"Session {session_id} not found for dataset {self.dataset.id!r}")
            return None
        return self.hydrate_quiz_session(record)

    def start_search_view(self, subset: Sequence[Question], config: Optional[SubsetConfig] = None) -> SearchView:
        """Enter search mode over ``subset``. The active session, if any, is kept."""
        self.search = SearchView(question_order=[q.id for q in subset], config=config or SubsetConfig())
        self.view = ViewMode.SEARCH
        return self.search

    def exit_to_config(self) -> None:
        """Return to config. The session is kept and can be resumed later."""
        self.view = ViewMode.CONFIG

    # ─────────────────────────────────────────────────────────────────────────
    # Answer mutations
    # ─────────────────────────────────────────────────────────────────────────

    def select_answer(self, question: Question, index: int) -> List[int]:
        """
        Apply a click on answer ``index`` (an original index).

        Single-correct questions behave like radio buttons (the selection
        becomes ``[index]``); multi-correct questions toggle ``index``.

        Returns:
            The new selection, sorted

        Raises:
            InvalidStateError: Outside quiz view or question already submitted
            UnknownQuestionError: Question not in the session
            QuizError: Index out of range
        """
        session = self._require_view(ViewMode.QUIZ)
        self._require_member(session, question.id)
        if session.is_submitted(question.id):
            raise InvalidStateError(f"Question {question.id!r} is submitted; unsubmit it before changing the answer")
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < question.answer_count:
            raise QuizError(f"Answer index {index!r} out of range for question {question.id!r}")

        if is_multi_correct(question, self.prefer_original):
            selected = set(session.answers.get(question.id, ()))
            selected ^= {index}
        else:
            selected = {index}
        session.answers[question.id] = selected
        self.persist_current_session()
        return sorted(selected)

    def set_selection(self, question_id: str, indices: Iterable[int]) -> List[int]:
        """Replace the selection for an unsubmitted question."""
        session = self._require_view(ViewMode.QUIZ)
        self._require_member(session, question_id)
        if session.is_submitted(question_id):
            raise InvalidStateError(f"Question {question_id!r} is submitted; unsubmit it before changing the answer")
        selected = normalize_indices(list(indices or ()))
        session.answers[question_id] = set(selected)
        self.persist_current_session()
        return selected

    def submit_answer(self, question: Question) -> bool:
        """
        Lock in the current selection and score it.

        Re-submitting an already submitted question re-scores the same
        selection and is not rejected here.

        Returns:
            Whether the answer is correct
        """
        session = self._require_view(ViewMode.QUIZ)
        self._require_member(session, question.id)
        correct = evaluate(question, session.answers.get(question.id, ()), self.prefer_original)
        session.submitted.add(question.id)
        session.results[question.id] = correct
        self.persist_current_session()
        logger.debug(f"Submitted {question.id} in {session.id}: {'correct' if correct else 'wrong'}")
        return correct

    def unsubmit_answer(self, question_id: str) -> None:
        """Reopen a submitted question; its selection is kept."""
        session = self._require_view(ViewMode.QUIZ)
        self._require_member(session, question_id)
        session.submitted.discard(question_id)
        session.results.pop(question_id, None)
        self.persist_current_session()

    # ─────────────────────────────────────────────────────────────────────────
    # Read helpers
    # ─────────────────────────────────────────────────────────────────────────

    def display_order(self, question: Question) -> List[int]:
        """Stored display permutation, or identity when none fits the question."""
        identity = list(range(question.answer_count))
        if self.session is None:
            return identity
        order = self.session.answer_order.get(question.id)
        if order is None:
            return identity
        if sorted(order) != identity:
            logger.debug(f"Stored answer order for {question.id} does not match its answers, using identity")
            return identity
        return list(order)

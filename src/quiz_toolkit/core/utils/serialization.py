"""
Session Serialization

Explicit encode/decode between the in-memory QuizSession (sets and
dicts of sets) and the persisted record shape: plain JSON objects and
arrays with camelCase keys.

Persisted record::

    {
      "id": str, "createdAt": int, "updatedAt": int, "finishedAt": int | null,
      "datasetId": str, "datasetLabel": str, "notebookUrl": str | null,
      "kind": "quiz", "quizConfig": {...},
      "questionOrder": [qid, ...],
      "answerOrder": {qid: [int, ...]},
      "answers": {qid: [int, ...]},
      "submitted": [qid, ...],
      "results": {qid: bool}
    }

``decode_session(encode_session(s))`` reproduces ``s`` field for field.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..models.session import QUIZ_KIND, QuizSession
from .text import normalize_indices

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Value decoding
# ─────────────────────────────────────────────────────────────────────────────

def decode_result_value(value: Any) -> Optional[bool]:
    """
    Decode a stored correctness value.

    Accepts booleans plus the legacy encodings 1/0 and "1"/"0".
    Anything else is undecodable and yields None (callers skip it rather
    than defaulting to False).
    """
    if value is True or value is False:
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if value in ("1", "0"):
        return value == "1"
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _permutation(value: Any) -> Optional[List[int]]:
    if not isinstance(value, list):
        return None
    out = [_as_int(v) for v in value]
    if any(v is None for v in out):
        return None
    return out  # type: ignore[return-value]


# ─────────────────────────────────────────────────────────────────────────────
# Session <-> record
# ─────────────────────────────────────────────────────────────────────────────

def encode_session(session: QuizSession) -> Dict[str, Any]:
    """
    Serialize a session to its persisted record.

    Sets become sorted lists; ``submitted`` follows ``question_order``.
    """
    position = {qid: i for i, qid in enumerate(session.question_order)}
    submitted = sorted(session.submitted, key=lambda qid: (position.get(qid, len(position)), qid))
    record: Dict[str, Any] = {
        "id": session.id,
        "createdAt": session.created_at,
        "finishedAt": session.finished_at,
        "datasetId": session.dataset_id,
        "datasetLabel": session.dataset_label or session.dataset_id,
        "notebookUrl": session.notebook_url,
        "kind": session.kind,
        "quizConfig": dict(session.quiz_config),
        "questionOrder": list(session.question_order),
        "answerOrder": {qid: list(order) for qid, order in session.answer_order.items()},
        "answers": {qid: sorted(sel) for qid, sel in session.answers.items()},
        "submitted": submitted,
        "results": {qid: bool(ok) for qid, ok in session.results.items()},
    }
    if session.updated_at is not None:
        record["updatedAt"] = session.updated_at
    return record


def decode_session(record: Dict[str, Any]) -> QuizSession:
    """
    Rebuild a QuizSession from a persisted record.

    Tolerates missing or malformed containers (treated as empty) and
    drops entries that would break the session invariants, logging each
    drop at debug level.

    Raises:
        ValueError: If the record is not a dict or has no id
    """
    if not isinstance(record, dict):
        raise ValueError(f"session record must be an object, got {type(record).__name__}")
    session_id = record.get("id")
    if not isinstance(session_id, str) or not session_id:
        raise ValueError("session record has no id")

    raw_order = record.get("questionOrder")
    question_order: List[str] = []
    if isinstance(raw_order, list):
        seen = set()
        for qid in raw_order:
            qid = str(qid)
            if qid in seen:
                logger.debug(f"Session {session_id}: dropping duplicate question id {qid!r}")
                continue
            seen.add(qid)
            question_order.append(qid)
    members = set(question_order)

    def _in_session(qid: str, what: str) -> bool:
        if qid in members:
            return True
        logger.debug(f"Session {session_id}: dropping {what} for unknown question {qid!r}")
        return False

    answer_order: Dict[str, List[int]] = {}
    raw_answer_order = record.get("answerOrder")
    if isinstance(raw_answer_order, dict):
        for qid, order in raw_answer_order.items():
            perm = _permutation(order)
            if perm is not None and _in_session(qid, "answer order"):
                answer_order[qid] = perm

    answers = {}
    raw_answers = record.get("answers")
    if isinstance(raw_answers, dict):
        for qid, selected in raw_answers.items():
            if isinstance(selected, list) and _in_session(qid, "answer"):
                answers[qid] = set(normalize_indices(selected))

    submitted = set()
    raw_submitted = record.get("submitted")
    if isinstance(raw_submitted, list):
        submitted = {str(qid) for qid in raw_submitted if _in_session(str(qid), "submission")}

    results: Dict[str, bool] = {}
    raw_results = record.get("results")
    if isinstance(raw_results, dict):
        for qid, value in raw_results.items():
            decoded = decode_result_value(value)
            if decoded is None or qid not in submitted:
                logger.debug(f"Session {session_id}: dropping result for {qid!r}")
                continue
            results[qid] = decoded

    quiz_config = record.get("quizConfig")
    return QuizSession(
        id=session_id,
        dataset_id=str(record.get("datasetId") or ""),
        dataset_label=str(record.get("datasetLabel") or ""),
        notebook_url=record.get("notebookUrl"),
        kind=str(record.get("kind") or ""),
        created_at=_as_int(record.get("createdAt")) or 0,
        updated_at=_as_int(record.get("updatedAt")),
        finished_at=_as_int(record.get("finishedAt")) or None,
        quiz_config=dict(quiz_config) if isinstance(quiz_config, dict) else {},
        question_order=question_order,
        answer_order=answer_order,
        answers=answers,
        submitted=submitted,
        results=results,
    )


def is_quiz_record(record: Any) -> bool:
    return isinstance(record, dict) and record.get("kind") == QUIZ_KIND

"""
Module: export.csv_export

Purpose:
    Per-question results of one session as CSV. Answer indices are
    written as letters (A, B, ...) joined by ``;``; booleans as
    ``true``/``false``; ``is_correct`` is empty for unsubmitted questions.

Key Functions:
    - results_csv(): CSV text for a session
    - write_results_csv(): Same, written to a file
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import List

from quiz_toolkit.core.models import QuizSession
from quiz_toolkit.core.utils.text import answer_letter
from quiz_toolkit.quiz.config import QuizConfig
from quiz_toolkit.quiz.evaluate import correct_index_set
from quiz_toolkit.quiz.stats import QuestionLookup

logger = logging.getLogger(__name__)

CSV_HEADER = ["question_id", "exam_name", "selected", "correct", "submitted", "is_correct"]


def _letters(indices) -> str:
    return ";".join(answer_letter(i) for i in sorted(indices))


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def results_rows(session: QuizSession, catalog: QuestionLookup) -> List[List[str]]:
    """
    One row per question in session order.

    The ``correct`` column uses the same answer key the session is scored
    with. Questions no longer in the catalog get an empty key.
    """
    prefer_original = QuizConfig.from_dict(session.quiz_config).prefer_original_key
    rows = []
    for qid in session.question_order:
        question = catalog.get(qid)
        key = correct_index_set(question, prefer_original) if question else ()
        result = session.results.get(qid)
        rows.append(
            [
                qid,
                (question.exam_name if question else None) or "",
                _letters(session.answers.get(qid, ())),
                _letters(key),
                _bool_text(qid in session.submitted),
                "" if result is None else _bool_text(result),
            ]
        )
    return rows


def results_csv(session: QuizSession, catalog: QuestionLookup) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(results_rows(session, catalog))
    return buffer.getvalue()


def write_results_csv(path: Path, session: QuizSession, catalog: QuestionLookup) -> Path:
    """Write ``results_csv`` output to ``path`` (UTF-8) and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(results_csv(session, catalog), encoding="utf-8")
    logger.info(f"Wrote results for {len(session.question_order)} question(s) to {path}")
    return path

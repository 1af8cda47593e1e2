"""
Module: catalog.loader

Purpose:
    Load the question bank from one or more JSON sources and normalize
    each record into an immutable Question. Sources are merged by id in
    the order given; the last source wins on collisions.

Key Functions:
    - normalize_question(): Raw record -> Question (or None if unusable)
    - load_questions(): Read and merge sources into an ordered id -> Question map

Key Classes:
    - QuestionCatalog: Read-only catalog with all-or-nothing reload
    - CatalogLoadError: Exception for source read/parse failures

Dependencies:
    - requests: HTTP(S) sources
    - core.schemas.validator: Payload shape validation (jsonschema)
    - core.models: Question, Answer

Used By:
    - quiz_toolkit.cli: Statistics over a dataset
    - selection.filters: Consumes catalog.questions()
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Union

import requests

from quiz_toolkit.core.models import Answer, Question
from quiz_toolkit.core.schemas import ValidationError, validate_catalog_payload
from quiz_toolkit.core.utils import norm_space, normalize_indices

logger = logging.getLogger(__name__)

Source = Union[str, Path]

HTTP_TIMEOUT_SECONDS = 20


class CatalogLoadError(Exception):
    """Error loading or parsing a catalog source."""
    pass


# ─────────────────────────────────────────────────────────────────────────────
# Normalization
# ─────────────────────────────────────────────────────────────────────────────

def _optional_text(value: Any) -> Optional[str]:
    text = norm_space(value)
    return text or None


def _optional_year(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else None


def _answer_plausibility(raw: Dict[str, Any]) -> Dict[str, Any]:
    audit = raw.get("aiAudit")
    plausibility = audit.get("answerPlausibility") if isinstance(audit, dict) else None
    return plausibility if isinstance(plausibility, dict) else {}


def normalize_question(raw: Any) -> Optional[Question]:
    """
    Normalize one raw catalog record.

    - id is stringified and stripped; blank ids drop the record
    - whitespace is collapsed in all text fields
    - ``finalCorrectIndices`` overrides ``correctIndices`` when present
    - both keys fall back to ``aiAudit.answerPlausibility`` when missing
    - index lists are coerced to sorted unique ints

    Args:
        raw: Record from a source's ``questions`` array

    Returns:
        Question, or None if the record has no usable id
    """
    if not isinstance(raw, dict):
        return None
    qid = norm_space(raw.get("id"))
    if not qid:
        return None

    answers = tuple(
        Answer(text=norm_space(a.get("text")), is_correct=bool(a.get("isCorrect")))
        for a in (raw.get("answers") or [])
        if isinstance(a, dict)
    )
    plausibility = _answer_plausibility(raw)
    current_key = (
        raw.get("finalCorrectIndices")
        or plausibility.get("finalCorrectIndices")
        or raw.get("correctIndices")
    )
    original_key = raw.get("originalCorrectIndices") or plausibility.get("originalCorrectIndices")
    image_files = raw.get("imageFiles") if isinstance(raw.get("imageFiles"), list) else []

    return Question(
        id=qid,
        text=norm_space(raw.get("questionText")),
        answers=answers,
        correct_indices=tuple(normalize_indices(current_key)),
        original_correct_indices=tuple(normalize_indices(original_key)),
        exam_name=raw.get("examName") or None,
        exam_year=_optional_year(raw.get("examYear")),
        explanation=_optional_text(raw.get("explanationText")),
        super_topic=_optional_text(raw.get("aiSuperTopic")),
        sub_topic=_optional_text(raw.get("aiSubtopic")),
        image_files=tuple(str(f) for f in image_files),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Source reading
# ─────────────────────────────────────────────────────────────────────────────

def _is_url(source: Source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _read_source(source: Source) -> Any:
    """Fetch and parse one source. Raises CatalogLoadError on any failure."""
    if _is_url(source):
        try:
            response = requests.get(str(source), timeout=HTTP_TIMEOUT_SECONDS)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise CatalogLoadError(f"Failed to fetch {source}: {exc}") from exc
        except ValueError as exc:
            raise CatalogLoadError(f"Invalid JSON from {source}: {exc}") from exc

    path = Path(source)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as exc:
        raise CatalogLoadError(f"Failed to read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise CatalogLoadError(f"{path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Invalid JSON in {path}: {exc}") from exc


def load_questions(sources: Sequence[Source]) -> Dict[str, Question]:
    """
    Load and merge questions from sources.

    Args:
        sources: Local paths or http(s) URLs, merged in order

    Returns:
        Insertion-ordered dict of id -> Question (last source wins)

    Raises:
        CatalogLoadError: If any source cannot be read, parsed, or validated

    Example:
        >>> by_id = load_questions(["bank_a.json", "bank_b.json"])
        >>> len(by_id)
        120
    """
    by_id: Dict[str, Question] = {}
    for source in sources:
        payload = _read_source(source)
        try:
            validate_catalog_payload(payload, source=str(source))
        except ValidationError as exc:
            raise CatalogLoadError(str(exc)) from exc

        dropped = 0
        for raw in payload.get("questions") or []:
            question = normalize_question(raw)
            if question is None:
                dropped += 1
                continue
            # Existing ids keep their position; the record is replaced
            by_id[question.id] = question
        if dropped:
            logger.warning(f"Dropped {dropped} question(s) without id from {source}")

    logger.info(f"Loaded {len(by_id)} questions from {len(sources)} source(s)")
    return by_id


# ─────────────────────────────────────────────────────────────────────────────
# Catalog
# ─────────────────────────────────────────────────────────────────────────────

class QuestionCatalog:
    """
    Read-only question catalog keyed by id.

    ``load()`` replaces the contents only when every source loaded; on
    failure the previous contents remain.

    Example:
        >>> catalog = QuestionCatalog()
        >>> catalog.load(["questions.json"])
        >>> catalog.exam_names()
        ['Exam 2021', 'Exam 2022']
    """

    def __init__(self, questions: Iterable[Question] = ()) -> None:
        self._by_id: Dict[str, Question] = {}
        for q in questions:
            self._by_id[q.id] = q

    def load(self, sources: Sequence[Source]) -> None:
        """
        Load sources, replacing the catalog on success.

        Raises:
            CatalogLoadError: On any source failure (catalog unchanged)
        """
        self._by_id = load_questions(sources)

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def questions(self) -> List[Question]:
        return list(self._by_id.values())

    def exam_names(self) -> List[str]:
        return sorted({q.exam_name for q in self._by_id.values() if q.exam_name})

    def topic_tree(self) -> Dict[str, List[str]]:
        """Map super-topic -> sorted sub-topics (questions without a super-topic are skipped)."""
        tree: Dict[str, set] = {}
        for q in self._by_id.values():
            if not q.super_topic:
                continue
            subs = tree.setdefault(q.super_topic, set())
            if q.sub_topic:
                subs.add(q.sub_topic)
        return {topic: sorted(subs) for topic, subs in sorted(tree.items())}

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    def __iter__(self) -> Iterator[Question]:
        return iter(self._by_id.values())

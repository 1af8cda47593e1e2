"""
Module: storage.session_store

Purpose:
    Durable, single-device store of quiz session snapshots, partitioned
    by dataset. One JSON document acts as a key-value store; each dataset
    owns the key ``<prefix>sessions:<datasetId>`` whose value is the list
    of that dataset's session records (newest activity first).

    Every save rewrites the partition's list as a whole under an
    exclusive file lock. Two processes saving concurrently are serialized
    by the lock, but each works from the list it read, so the last writer
    wins for its own entries.

Key Classes:
    - SessionStore: list/save/load/delete + aggregate queries + backup
    - BackupFormatError: Backup payload is not a JSON object

Dependencies:
    - storage.file_locking: portalocker-guarded JSON document access
    - core.utils.serialization: QuizSession -> record encoding

Used By:
    - quiz.controller: Persistence after every mutation
    - quiz_toolkit.cli: Listing, statistics, backup/restore
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from quiz_toolkit.config import DEFAULT_PREFIX, StoreConfig
from quiz_toolkit.core.models import QuizSession
from quiz_toolkit.core.schemas import ValidationError, validate_backup_payload
from quiz_toolkit.core.utils.clock import Clock, now_ms
from quiz_toolkit.core.utils.serialization import decode_result_value, encode_session, is_quiz_record

from .file_locking import locked_read_json, locked_read_modify_write_json

logger = logging.getLogger(__name__)

SessionRecord = Dict[str, Any]


class BackupFormatError(ValueError):
    """Backup payload has the wrong top-level shape."""
    pass


def _timestamp(record: SessionRecord, *keys: str) -> int:
    """First truthy numeric timestamp among ``keys`` (0 if none)."""
    for key in keys:
        value = record.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if value:
            return int(value)
    return 0


def _coerce_list(value: Any) -> List[SessionRecord]:
    if not isinstance(value, list):
        return []
    return [r for r in value if isinstance(r, dict)]


def _str_list(value: Any) -> List[str]:
    """String entries of a stored id list; anything else is dropped."""
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


class SessionStore:
    """
    Per-dataset session store backed by one JSON document.

    Not-found lookups return None. Corrupt or malformed stored data reads
    as "no sessions"; write failures (OSError, lock errors) propagate to
    the caller.

    Example:
        >>> store = SessionStore(Path("workspace/sessions.json"))
        >>> store.save_session("ds1", {"id": "s1", "kind": "quiz", "createdAt": 1})["updatedAt"] > 0
        True
        >>> [s["id"] for s in store.list_sessions("ds1")]
        ['s1']
    """

    def __init__(self, path: Path, *, prefix: str = DEFAULT_PREFIX, clock: Clock = now_ms) -> None:
        self.path = Path(path)
        self.prefix = prefix
        self._clock = clock

    @classmethod
    def from_config(cls, config: StoreConfig, *, clock: Clock = now_ms) -> SessionStore:
        return cls(config.session_file, prefix=config.prefix, clock=clock)

    # ─────────────────────────────────────────────────────────────────────────
    # Keys and raw access
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def namespace(self) -> str:
        """Key prefix shared by every dataset partition of this store."""
        return f"{self.prefix}sessions:"

    def key(self, dataset_id: str) -> str:
        return f"{self.namespace}{dataset_id}"

    def _read_document(self) -> Dict[str, Any]:
        document = locked_read_json(self.path, dict)
        if not isinstance(document, dict):
            logger.warning(f"Session store {self.path.name} is not a JSON object, treating as empty")
            return {}
        return document

    def _partition(self, document: Dict[str, Any], dataset_id: str) -> List[SessionRecord]:
        raw = document.get(self.key(dataset_id))
        if raw is not None and not isinstance(raw, list):
            logger.warning(f"Malformed session list for dataset {dataset_id!r}, treating as empty")
        return _coerce_list(raw)

    @staticmethod
    def _sorted_by_activity(records: List[SessionRecord]) -> List[SessionRecord]:
        return sorted(records, key=lambda r: _timestamp(r, "updatedAt", "createdAt"), reverse=True)

    # ─────────────────────────────────────────────────────────────────────────
    # CRUD
    # ─────────────────────────────────────────────────────────────────────────

    def list_sessions(self, dataset_id: str) -> List[SessionRecord]:
        """All sessions of a dataset, most recent activity first (updatedAt, then createdAt)."""
        return self._sorted_by_activity(self._partition(self._read_document(), dataset_id))

    def save_session(self, dataset_id: str, session: Union[QuizSession, SessionRecord]) -> SessionRecord:
        """
        Upsert a session by id and refresh its ``updatedAt``.

        New sessions are prepended; the list is kept recency-ordered.

        Args:
            dataset_id: Partition to write
            session: QuizSession (encoded here) or an already-encoded record

        Returns:
            The stored record, including the refreshed ``updatedAt``

        Raises:
            ValueError: If the session has no id
            OSError / portalocker.LockException: If the write fails
        """
        record = encode_session(session) if isinstance(session, QuizSession) else dict(session)
        if not record.get("id"):
            raise ValueError("cannot save a session without an id")
        record["updatedAt"] = self._clock()
        key = self.key(dataset_id)

        def _upsert(document: Dict[str, Any]) -> Dict[str, Any]:
            records = self._sorted_by_activity(self._partition(document, dataset_id))
            for i, existing in enumerate(records):
                if existing.get("id") == record["id"]:
                    records[i] = record
                    break
            else:
                records.insert(0, record)
            document[key] = self._sorted_by_activity(records)
            return document

        locked_read_modify_write_json(self.path, _upsert)
        logger.debug(f"Saved session {record['id']} for dataset {dataset_id!r}")
        return record

    def load_session(self, dataset_id: str, session_id: str) -> Optional[SessionRecord]:
        for record in self._partition(self._read_document(), dataset_id):
            if record.get("id") == session_id:
                return record
        return None

    def delete_session(self, dataset_id: str, session_id: str) -> None:
        """Remove a session. Deleting an unknown id is not an error."""
        key = self.key(dataset_id)

        def _remove(document: Dict[str, Any]) -> Dict[str, Any]:
            records = self._partition(document, dataset_id)
            document[key] = [r for r in records if r.get("id") != session_id]
            return document

        locked_read_modify_write_json(self.path, _remove)
        logger.debug(f"Deleted session {session_id} for dataset {dataset_id!r}")

    def dataset_ids(self) -> List[str]:
        """Dataset ids that have a partition in this store."""
        namespace = self.namespace
        return sorted(k[len(namespace):] for k in self._read_document() if k.startswith(namespace))

    # ─────────────────────────────────────────────────────────────────────────
    # Aggregate queries
    # ─────────────────────────────────────────────────────────────────────────

    def _finished_quizzes(self, dataset_id: str) -> List[SessionRecord]:
        finished = [
            r for r in self._partition(self._read_document(), dataset_id)
            if is_quiz_record(r) and _timestamp(r, "finishedAt")
        ]
        return sorted(finished, key=lambda r: _timestamp(r, "finishedAt"), reverse=True)

    def latest_finished_quiz(self, dataset_id: str) -> Optional[SessionRecord]:
        """Most recently finished quiz session (by finishedAt), or None."""
        finished = self._finished_quizzes(dataset_id)
        return finished[0] if finished else None

    def latest_answered_results_by_question(self, dataset_id: str) -> Dict[str, bool]:
        """
        Latest correctness per question across finished quiz sessions.

        Sessions are scanned newest-finished first. A question takes its
        value from the first session where it is in questionOrder, in
        submitted, and has a decodable result (true/false or legacy 1/0).
        Older sessions never overwrite it; undecodable values are skipped.

        Returns:
            question id -> bool
        """
        latest: Dict[str, bool] = {}
        for record in self._finished_quizzes(dataset_id):
            submitted = set(_str_list(record.get("submitted")))
            results = record.get("results")
            results = results if isinstance(results, dict) else {}
            for qid in _str_list(record.get("questionOrder")):
                if qid in latest or qid not in submitted:
                    continue
                value = decode_result_value(results.get(qid))
                if value is None:
                    continue
                latest[qid] = value
        return latest

    # ─────────────────────────────────────────────────────────────────────────
    # Backup / restore
    # ─────────────────────────────────────────────────────────────────────────

    def export_all(self) -> Dict[str, List[SessionRecord]]:
        """Every partition under this store's namespace: full key -> session list."""
        namespace = self.namespace
        document = self._read_document()
        return {k: _coerce_list(v) for k, v in document.items() if k.startswith(namespace)}

    def import_all(self, payload: Any) -> int:
        """
        Restore partitions from an ``export_all`` payload.

        Keys outside this store's namespace are ignored. A partition value
        that is not a list is written as an empty list.

        Returns:
            Number of partitions written

        Raises:
            BackupFormatError: If ``payload`` is not a JSON object
        """
        try:
            validate_backup_payload(payload)
        except ValidationError as exc:
            raise BackupFormatError("Invalid backup format: expected a JSON object") from exc

        namespace = self.namespace
        entries = {
            k: (_coerce_list(v) if isinstance(v, list) else [])
            for k, v in payload.items()
            if isinstance(k, str) and k.startswith(namespace)
        }
        if not entries:
            logger.info("Backup contained no session data for this store")
            return 0

        def _merge(document: Dict[str, Any]) -> Dict[str, Any]:
            document.update(entries)
            return document

        locked_read_modify_write_json(self.path, _merge)
        logger.info(f"Imported backup ({len(entries)} dataset partition(s))")
        return len(entries)

    def clear_all(self) -> int:
        """
        Remove every partition under this store's namespace.

        Returns:
            Number of partitions removed
        """
        namespace = self.namespace
        removed: List[str] = []

        def _clear(document: Dict[str, Any]) -> Dict[str, Any]:
            removed.extend(k for k in document if k.startswith(namespace))
            for k in removed:
                del document[k]
            return document

        locked_read_modify_write_json(self.path, _clear)
        logger.info(f"Cleared {len(removed)} dataset partition(s)")
        return len(removed)

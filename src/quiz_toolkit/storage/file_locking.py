"""
Module: storage.file_locking

Purpose:
    Cross-platform locked access to the JSON key-value document behind the
    session store. Uses portalocker for Mac, Windows, and Linux compatibility.

    Locks are taken on a sidecar ``<name>.lock`` file so the data file can
    be replaced atomically (write temp file, then ``os.replace``): a reader
    sees either the old or the new document, never a partial write.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_read_json: Read JSON under a shared lock
    - locked_read_modify_write_json: Read-modify-write JSON under an exclusive lock
    - corrupt_path_for: Where an unreadable document is moved before a rewrite

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - storage.session_store: Every read and write of the session document
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'w', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.

    Example:
        >>> with locked_file(path, 'a') as f:
        ...     f.write('data')
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".lock")


class _UnreadableDocument(Exception):
    """Document bytes exist but are not valid UTF-8 JSON."""
    pass


def _load_json_unlocked(path: Path, default: Callable[[], Any]) -> Any:
    """Read JSON; missing or blank yields ``default()``, unreadable raises _UnreadableDocument."""
    try:
        content = path.read_text(encoding='utf-8')
    except FileNotFoundError:
        return default()
    except UnicodeDecodeError as e:
        raise _UnreadableDocument(str(e)) from e
    if not content.strip():
        return default()
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise _UnreadableDocument(str(e)) from e


def _read_json_unlocked(path: Path, default: Callable[[], Any]) -> Any:
    """Read JSON; a missing, empty, or corrupt file yields ``default()``."""
    try:
        return _load_json_unlocked(path, default)
    except _UnreadableDocument as e:
        logger.warning(f"Corrupt JSON in {path.name}, treating as empty: {e}")
        return default()


def corrupt_path_for(path: Path) -> Path:
    return path.with_name(f"{path.name}.corrupt-{int(time.time() * 1000)}")


def _quarantine(path: Path, reason: str) -> Path:
    """Move an unusable document aside so the next write cannot destroy it."""
    target = corrupt_path_for(path)
    os.replace(path, target)
    logger.warning(f"Moved unreadable {path.name} to {target.name} ({reason})")
    return target


def _atomic_write_json(path: Path, data: Any) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def locked_read_json(
    path: Path,
    default: Callable[[], Any] = dict,
) -> Any:
    """
    Read a JSON document under a shared lock.

    Missing or corrupt documents read as ``default()``; this never raises
    for content problems, only for lock/OS failures.
    """
    with locked_file(lock_path_for(path), 'a+', portalocker.LOCK_SH):
        return _read_json_unlocked(path, default)


def locked_read_modify_write_json(
    path: Path,
    modifier: Callable[[Dict[str, Any]], Dict[str, Any]],
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """
    Read JSON, apply modifier, write back - all with exclusive lock.

    An unreadable or non-object document is handed to ``modifier`` as
    ``default()``; before the result is written, the old file is moved to
    ``<name>.corrupt-<ms>`` so no stored data is overwritten.

    Args:
        path: Path to JSON file.
        modifier: Function that takes existing data, returns modified data.
        default: Factory for default data if file doesn't exist.

    Returns:
        The modified data that was written.

    Example:
        >>> def add_dataset(existing):
        ...     existing.setdefault("examgen:v1:sessions:ds1", [])
        ...     return existing
        >>> locked_read_modify_write_json(store_path, add_dataset)
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with locked_file(lock_path_for(path), 'a+', portalocker.LOCK_EX):
        problem = None
        try:
            existing = _load_json_unlocked(path, default)
        except _UnreadableDocument as e:
            problem, existing = str(e), None
        if problem is None and not isinstance(existing, dict):
            problem = f"top-level {type(existing).__name__}, expected object"
        if problem is not None:
            existing = default()
        modified = modifier(existing)
        if problem is not None:
            _quarantine(path, problem)
        _atomic_write_json(path, modified)
        return modified

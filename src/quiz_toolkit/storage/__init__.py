"""
Storage Package

Session persistence: one JSON document guarded by a portalocker file
lock, partitioned per dataset.
"""

from .file_locking import locked_file, locked_read_json, locked_read_modify_write_json
from .session_store import BackupFormatError, SessionStore

__all__ = [
    "BackupFormatError",
    "SessionStore",
    "locked_file",
    "locked_read_json",
    "locked_read_modify_write_json",
]

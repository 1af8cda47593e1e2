"""
Module: config

Purpose:
    Storage configuration. Immutable configuration with validation on
    construction.

Key Classes:
    - StoreConfig: Where and under which key namespace sessions are stored

Used By:
    - storage.session_store: SessionStore.from_config
    - quiz_toolkit.cli: --data-dir handling
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from quiz_toolkit.common.paths import get_app_data_dir

DEFAULT_PREFIX = "examgen:v1:"
DEFAULT_FILE_NAME = "sessions.json"
PREFIX_ENV_VAR = "QUIZ_TOOLKIT_STORE_PREFIX"


@dataclass(frozen=True)
class StoreConfig:
    """
    Session store configuration (immutable).

    Attributes:
        data_dir: Directory holding the store document
        file_name: Store document name
        prefix: Format-version namespace for storage keys

    Invariants:
        - prefix is non-empty and ends with ":"

    Example:
        >>> config = StoreConfig(data_dir=Path("/tmp/quiz"))
        >>> config.session_file
        PosixPath('/tmp/quiz/sessions.json')
    """

    data_dir: Path
    file_name: str = DEFAULT_FILE_NAME
    prefix: str = DEFAULT_PREFIX

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.prefix or not self.prefix.endswith(":"):
            raise ValueError(f"prefix must be non-empty and end with ':': {self.prefix!r}")
        if not self.file_name:
            raise ValueError("file_name must not be empty")
        object.__setattr__(self, "data_dir", Path(self.data_dir))

    @property
    def session_file(self) -> Path:
        return self.data_dir / self.file_name

    @classmethod
    def from_env(cls, data_dir: Optional[Path] = None) -> StoreConfig:
        """Defaults from the environment; an explicit ``data_dir`` wins."""
        return cls(
            data_dir=Path(data_dir) if data_dir else get_app_data_dir(),
            prefix=os.environ.get(PREFIX_ENV_VAR, DEFAULT_PREFIX),
        )

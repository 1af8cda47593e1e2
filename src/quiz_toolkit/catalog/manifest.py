"""
Module: catalog.manifest

Purpose:
    Dataset manifest: the list of question banks a user can pick from.
    Each dataset names its catalog sources and the label/notebook link
    that get copied into every stored session.

Key Functions:
    - load_manifest(): Read manifest.json (None on failure, never raises)

Key Classes:
    - DatasetInfo: One dataset entry
    - Manifest: All datasets, looked up by id
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from quiz_toolkit.core.schemas import ValidationError, validate_manifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetInfo:
    """
    One dataset (immutable).

    Attributes:
        id: Partition key used by the session store
        label: Display name (falls back to id)
        notebook_url: Optional external notebook link
        sources: Catalog sources (paths or URLs), merged in order
    """

    id: str
    label: str = ""
    notebook_url: Optional[str] = None
    sources: Tuple[str, ...] = ()

    @property
    def display_label(self) -> str:
        return self.label or self.id


@dataclass(frozen=True)
class Manifest:
    datasets: Tuple[DatasetInfo, ...] = ()
    _by_id: Dict[str, DatasetInfo] = field(default_factory=dict, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        self._by_id.update({d.id: d for d in self.datasets})

    def get(self, dataset_id: str) -> Optional[DatasetInfo]:
        return self._by_id.get(dataset_id)

    def ids(self) -> List[str]:
        return [d.id for d in self.datasets]


def _resolve_source(entry: str, base_dir: Path) -> str:
    if entry.lower().startswith(("http://", "https://")):
        return entry
    path = Path(entry)
    return str(path if path.is_absolute() else base_dir / path)


def load_manifest(path: Path) -> Optional[Manifest]:
    """
    Load a dataset manifest.

    A missing, unreadable, or malformed manifest is not fatal: a warning
    is logged and None returned, leaving the caller to offer manual
    source selection.

    Relative source paths are resolved against the manifest's directory.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        validate_manifest(data, source=str(path))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Manifest could not be loaded from {path}: {e}")
        return None

    datasets = []
    for raw in data["datasets"]:
        datasets.append(
            DatasetInfo(
                id=raw["id"],
                label=raw.get("label") or "",
                notebook_url=raw.get("notebookUrl"),
                sources=tuple(_resolve_source(s, path.parent) for s in raw.get("json", [])),
            )
        )
    logger.info(f"Loaded manifest with {len(datasets)} dataset(s)")
    return Manifest(datasets=tuple(datasets))

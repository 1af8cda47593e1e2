"""
Question catalog: loading, normalization, and dataset manifests.

The engine treats the catalog as read-only input; everything here
produces immutable Question records keyed by id.
"""

from .loader import CatalogLoadError, QuestionCatalog, load_questions, normalize_question
from .manifest import DatasetInfo, Manifest, load_manifest

__all__ = [
    "CatalogLoadError",
    "QuestionCatalog",
    "load_questions",
    "normalize_question",
    "DatasetInfo",
    "Manifest",
    "load_manifest",
]

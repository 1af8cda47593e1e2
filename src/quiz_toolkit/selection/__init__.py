"""
Module: selection

Purpose:
    Filter/sampling pipeline that turns the catalog into the ordered
    subset a quiz session is started on (or a search view browses).

Key Functions:
    - build_subset(): Run all stages from a SubsetConfig
    - filter_by_exams / filter_by_topics / filter_by_image_mode
    - search_questions(): Free-text search
    - apply_random_and_shuffle(): Random N + shuffle

Key Classes:
    - SubsetConfig: Settings for one subset build
    - ImageMode: Image presence filter
"""

from .config import ImageMode, SubsetConfig, parse_sub_topic_pairs
from .filters import (
    apply_random_and_shuffle,
    build_subset,
    filter_by_exams,
    filter_by_image_mode,
    filter_by_topics,
    question_id_index,
    search_questions,
)

__all__ = [
    "ImageMode",
    "SubsetConfig",
    "parse_sub_topic_pairs",
    "apply_random_and_shuffle",
    "build_subset",
    "filter_by_exams",
    "filter_by_image_mode",
    "filter_by_topics",
    "question_id_index",
    "search_questions",
]

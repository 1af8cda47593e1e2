"""
Quiz Package

Evaluation rule, quiz configuration, the session state machine, and
read-only statistics over sessions.
"""

from .config import QuizConfig, QuizMode
from .controller import (
    InvalidSessionTypeError,
    InvalidStateError,
    InvalidSubsetError,
    QuizController,
    QuizError,
    SearchView,
    UnknownQuestionError,
    answer_display_order,
)
from .evaluate import correct_index_set, evaluate, is_multi_correct
from .stats import (
    DatasetOverview,
    QuizProgress,
    TopicProgress,
    dataset_overview,
    exam_breakdown,
    session_progress,
    topic_breakdown,
)

__all__ = [
    "QuizConfig",
    "QuizMode",
    "QuizController",
    "QuizError",
    "InvalidSubsetError",
    "InvalidSessionTypeError",
    "InvalidStateError",
    "UnknownQuestionError",
    "SearchView",
    "answer_display_order",
    "correct_index_set",
    "evaluate",
    "is_multi_correct",
    "QuizProgress",
    "TopicProgress",
    "DatasetOverview",
    "session_progress",
    "exam_breakdown",
    "topic_breakdown",
    "dataset_overview",
]

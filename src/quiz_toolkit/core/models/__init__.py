"""
Core Models Package

Question records are frozen dataclasses handed out by the catalog and
never mutated by the engine. QuizSession is the single mutable model,
owned by the quiz controller while a session is active.
"""

from .questions import Answer, Question
from .session import QUIZ_KIND, QuizSession, ViewMode

__all__ = [
    "Answer",
    "Question",
    "QUIZ_KIND",
    "QuizSession",
    "ViewMode",
]

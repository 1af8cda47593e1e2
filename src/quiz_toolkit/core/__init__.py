"""
Quiz Toolkit Core Package

Shared data models and utilities used by every other layer:

- ``models``: Question (immutable) and QuizSession (mutable)
- ``utils``: deterministic randomizer, text helpers, session serialization
- ``schemas``: JSON Schema validation of catalog and backup payloads
"""

from .models import Answer, Question, QuizSession, ViewMode

__all__ = [
    "Answer",
    "Question",
    "QuizSession",
    "ViewMode",
]

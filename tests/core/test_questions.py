"""
Unit Tests for Question Model

Construction validation, calculated properties, and catalog-dict
conversion.
"""

import pytest

from quiz_toolkit.core.models.questions import Answer, Question


class TestQuestionCreation:
    """Tests for Question construction."""

    def test_init_when_valid_then_creates(self):
        q = Question(id="q1", text="Pick one", answers=(Answer("x"), Answer("y", True)))

        assert q.id == "q1"
        assert q.answer_count == 2

    @pytest.mark.parametrize("bad_id", ["", "   ", None])
    def test_init_when_blank_id_then_raises(self, bad_id):
        with pytest.raises(ValueError, match="non-empty"):
            Question(id=bad_id)

    def test_question_is_frozen(self):
        q = Question(id="q1")

        with pytest.raises(Exception):
            q.text = "changed"


class TestQuestionProperties:
    """Tests for calculated properties."""

    def test_has_images(self):
        assert Question(id="q", image_files=("a.png",)).has_images
        assert not Question(id="q").has_images

    def test_answer_key_changed_when_original_differs(self):
        q = Question(id="q", correct_indices=(1,), original_correct_indices=(0,))

        assert q.answer_key_changed

    def test_answer_key_changed_when_same_set_then_false(self):
        q = Question(id="q", correct_indices=(0, 2), original_correct_indices=(2, 0))

        assert not q.answer_key_changed

    def test_answer_key_changed_when_no_original_then_false(self):
        assert not Question(id="q", correct_indices=(1,)).answer_key_changed


class TestQuestionDict:
    """Tests for to_dict/from_dict."""

    def test_to_dict_uses_catalog_keys(self):
        q = Question(
            id="q1",
            text="T",
            answers=(Answer("a", True),),
            correct_indices=(0,),
            exam_name="Exam",
            exam_year=2021,
            super_topic="Sup",
            sub_topic="Sub",
        )

        d = q.to_dict()

        assert d["questionText"] == "T"
        assert d["answers"] == [{"text": "a", "isCorrect": True}]
        assert d["correctIndices"] == [0]
        assert d["examName"] == "Exam"
        assert d["examYear"] == 2021
        assert d["aiSuperTopic"] == "Sup"
        assert d["aiSubtopic"] == "Sub"
        assert "originalCorrectIndices" not in d

    def test_from_dict_restores_question(self):
        q = Question(
            id="q1",
            text="T",
            answers=(Answer("a"), Answer("b", True)),
            correct_indices=(1,),
            original_correct_indices=(0,),
            image_files=("x.png",),
        )

        assert Question.from_dict(q.to_dict()) == q

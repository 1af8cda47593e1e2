"""
Unit Tests for Session Serialization

encode_session / decode_session between QuizSession and the persisted
record shape, plus legacy result decoding.
"""

import json

import pytest

from quiz_toolkit.core.models.session import QuizSession
from quiz_toolkit.core.utils.serialization import (
    decode_result_value,
    decode_session,
    encode_session,
    is_quiz_record,
)


@pytest.fixture
def sample_session() -> QuizSession:
    return QuizSession(
        id="s_1_abc",
        dataset_id="ds1",
        dataset_label="Dataset One",
        notebook_url=None,
        created_at=1000,
        updated_at=2000,
        finished_at=3000,
        quiz_config={"shuffleAnswers": True, "quizMode": "exam", "extra": {"kept": 1}},
        question_order=["q2", "q1", "q3"],
        answer_order={"q1": [2, 0, 1], "q2": [1, 0]},
        answers={"q1": {2, 0}, "q2": {1}},
        submitted={"q1", "q2"},
        results={"q1": False, "q2": True},
    )


class TestEncodeSession:
    """Tests for encode_session()."""

    def test_encode_when_session_then_camelcase_record(self, sample_session):
        record = encode_session(sample_session)

        assert record["id"] == "s_1_abc"
        assert record["datasetId"] == "ds1"
        assert record["kind"] == "quiz"
        assert record["createdAt"] == 1000
        assert record["updatedAt"] == 2000
        assert record["finishedAt"] == 3000
        assert record["questionOrder"] == ["q2", "q1", "q3"]

    def test_encode_sets_become_sorted_lists(self, sample_session):
        record = encode_session(sample_session)

        assert record["answers"] == {"q1": [0, 2], "q2": [1]}
        assert record["submitted"] == ["q2", "q1"]

    def test_encode_is_json_serializable(self, sample_session):
        json.dumps(encode_session(sample_session))

    def test_encode_when_no_label_then_falls_back_to_dataset_id(self, sample_session):
        sample_session.dataset_label = ""

        assert encode_session(sample_session)["datasetLabel"] == "ds1"

    def test_encode_when_never_saved_then_no_updated_at(self, sample_session):
        sample_session.updated_at = None

        assert "updatedAt" not in encode_session(sample_session)


class TestDecodeSession:
    """Tests for decode_session()."""

    def test_round_trip_reproduces_every_field(self, sample_session):
        restored = decode_session(json.loads(json.dumps(encode_session(sample_session))))

        assert restored == sample_session

    def test_round_trip_keeps_unknown_config_keys(self, sample_session):
        restored = decode_session(encode_session(sample_session))

        assert restored.quiz_config["extra"] == {"kept": 1}

    def test_decode_when_not_dict_then_raises(self):
        with pytest.raises(ValueError):
            decode_session(["not", "a", "record"])

    def test_decode_when_no_id_then_raises(self):
        with pytest.raises(ValueError, match="no id"):
            decode_session({"kind": "quiz"})

    def test_decode_when_containers_missing_then_empty(self):
        session = decode_session({"id": "s", "kind": "quiz"})

        assert session.question_order == []
        assert session.answers == {}
        assert session.submitted == set()
        assert session.results == {}
        assert session.finished_at is None

    def test_decode_drops_entries_outside_question_order(self):
        session = decode_session(
            {
                "id": "s",
                "questionOrder": ["q1", "q1", "q2"],
                "answers": {"q1": [0], "ghost": [1]},
                "submitted": ["q1", "ghost"],
                "results": {"q1": True, "ghost": False, "q2": True},
            }
        )

        assert session.question_order == ["q1", "q2"]
        assert session.answers == {"q1": {0}}
        assert session.submitted == {"q1"}
        # q2 has a result but was never submitted
        assert session.results == {"q1": True}
        assert session.invariant_violations() == []

    def test_invariant_violations_when_hand_built_inconsistent(self):
        session = QuizSession(
            id="s",
            dataset_id="ds",
            question_order=["q1", "q1"],
            answers={"ghost": {0}},
            submitted={"q1"},
            results={"q1": True, "q2": False},
        )

        problems = session.invariant_violations()

        assert "question_order contains duplicates" in problems
        assert any(p.startswith("answers has ids outside") for p in problems)
        assert any("results for unsubmitted ids: ['q2']" in p for p in problems)

    def test_decode_accepts_legacy_result_encodings(self):
        session = decode_session(
            {
                "id": "s",
                "questionOrder": ["a", "b", "c", "d"],
                "submitted": ["a", "b", "c", "d"],
                "results": {"a": 1, "b": 0, "c": "1", "d": "maybe"},
            }
        )

        assert session.results == {"a": True, "b": False, "c": True}


class TestDecodeResultValue:
    """Tests for decode_result_value()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, True),
            (False, False),
            (1, True),
            (0, False),
            (1.0, True),
            ("1", True),
            ("0", False),
            ("true", None),
            (2, None),
            (None, None),
            ([], None),
        ],
    )
    def test_decode_result_value(self, value, expected):
        assert decode_result_value(value) is expected


def test_is_quiz_record():
    assert is_quiz_record({"kind": "quiz"})
    assert not is_quiz_record({"kind": "search"})
    assert not is_quiz_record(None)

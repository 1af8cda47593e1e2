"""
Unit Tests for Catalog Loading

Record normalization, multi-source merge, URL sources (requests mocked),
and all-or-nothing catalog reload.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from quiz_toolkit.catalog.loader import (
    CatalogLoadError,
    QuestionCatalog,
    load_questions,
    normalize_question,
)


def _write(path: Path, questions) -> Path:
    path.write_text(json.dumps({"questions": questions}), encoding="utf-8")
    return path


class TestNormalizeQuestion:
    """Tests for normalize_question()."""

    def test_normalize_when_full_record_then_question(self):
        q = normalize_question(
            {
                "id": "  q1 ",
                "questionText": "What   is\n TCP?",
                "answers": [{"text": " a  protocol ", "isCorrect": True}, {"text": "a cable"}],
                "correctIndices": [0, "1", 1.0, "x", True],
                "examName": "Exam 2021",
                "examYear": "2021",
                "aiSuperTopic": "Networks",
                "aiSubtopic": "  Protocols ",
                "imageFiles": ["img.png"],
            }
        )

        assert q.id == "q1"
        assert q.text == "What is TCP?"
        assert q.answers[0].text == "a protocol"
        assert q.answers[0].is_correct
        assert q.correct_indices == (0, 1)
        assert q.exam_year == 2021
        assert q.sub_topic == "Protocols"
        assert q.image_files == ("img.png",)

    @pytest.mark.parametrize("raw", [{"id": ""}, {"id": "   "}, {}, "q1", None])
    def test_normalize_when_no_usable_id_then_none(self, raw):
        assert normalize_question(raw) is None

    def test_normalize_prefers_final_correct_indices(self):
        q = normalize_question({"id": "q", "correctIndices": [0], "finalCorrectIndices": [2]})

        assert q.correct_indices == (2,)

    def test_normalize_reads_original_correct_indices(self):
        q = normalize_question({"id": "q", "correctIndices": [1], "originalCorrectIndices": [0]})

        assert q.original_correct_indices == (0,)
        assert q.answer_key_changed

    def test_normalize_when_year_not_numeric_then_none(self):
        assert normalize_question({"id": "q", "examYear": "n/a"}).exam_year is None

    def test_normalize_falls_back_to_answer_plausibility_audit(self):
        q = normalize_question(
            {
                "id": "q",
                "correctIndices": [3],
                "aiAudit": {"answerPlausibility": {"originalCorrectIndices": [0], "finalCorrectIndices": [1, 2]}},
            }
        )

        assert q.correct_indices == (1, 2)
        assert q.original_correct_indices == (0,)
        assert q.answer_key_changed

    def test_normalize_top_level_keys_win_over_audit(self):
        q = normalize_question(
            {
                "id": "q",
                "finalCorrectIndices": [2],
                "originalCorrectIndices": [1],
                "aiAudit": {"answerPlausibility": {"originalCorrectIndices": [0], "finalCorrectIndices": [3]}},
            }
        )

        assert (q.correct_indices, q.original_correct_indices) == ((2,), (1,))

    @pytest.mark.parametrize("audit", [None, "x", {"answerPlausibility": None}, {"answerPlausibility": [1]}])
    def test_normalize_when_audit_malformed_then_ignored(self, audit):
        q = normalize_question({"id": "q", "correctIndices": [1], "aiAudit": audit})

        assert q.correct_indices == (1,)
        assert q.original_correct_indices == ()


class TestLoadQuestions:
    """Tests for load_questions()."""

    def test_load_when_two_sources_then_last_wins_by_id(self, tmp_path):
        a = _write(tmp_path / "a.json", [{"id": "q1", "questionText": "old"}, {"id": "q2"}])
        b = _write(tmp_path / "b.json", [{"id": "q1", "questionText": "new"}, {"id": "q3"}])

        by_id = load_questions([a, b])

        assert list(by_id) == ["q1", "q2", "q3"]
        assert by_id["q1"].text == "new"

    def test_load_drops_records_without_id(self, tmp_path):
        src = _write(tmp_path / "a.json", [{"id": ""}, {"id": "q1"}])

        assert list(load_questions([src])) == ["q1"]

    def test_load_when_file_missing_then_raises(self, tmp_path):
        with pytest.raises(CatalogLoadError, match="Failed to read"):
            load_questions([tmp_path / "missing.json"])

    def test_load_when_invalid_json_then_raises(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogLoadError, match="Invalid JSON"):
            load_questions([bad])

    def test_load_when_not_utf8_then_raises(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_bytes(b'{"questions": [{"id": "\xff"}]}')

        with pytest.raises(CatalogLoadError, match="UTF-8"):
            load_questions([bad])

    def test_load_when_wrong_shape_then_raises(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"questions": "nope"}), encoding="utf-8")

        with pytest.raises(CatalogLoadError):
            load_questions([bad])

    @patch("quiz_toolkit.catalog.loader.requests.get")
    def test_load_when_url_source_then_fetched_with_requests(self, mock_get):
        response = MagicMock()
        response.json.return_value = {"questions": [{"id": "remote"}]}
        mock_get.return_value = response

        by_id = load_questions(["https://example.org/bank.json"])

        assert list(by_id) == ["remote"]
        mock_get.assert_called_once()
        assert mock_get.call_args.kwargs["timeout"] > 0
        response.raise_for_status.assert_called_once()

    @patch("quiz_toolkit.catalog.loader.requests.get")
    def test_load_when_http_error_then_raises(self, mock_get):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        mock_get.return_value = response

        with pytest.raises(CatalogLoadError, match="Failed to fetch"):
            load_questions(["https://example.org/missing.json"])

    @patch("quiz_toolkit.catalog.loader.requests.get")
    def test_load_when_network_error_then_raises(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("offline")

        with pytest.raises(CatalogLoadError):
            load_questions(["http://example.org/bank.json"])


class TestQuestionCatalog:
    """Tests for QuestionCatalog."""

    def test_load_when_failure_then_previous_contents_kept(self, tmp_path):
        good = _write(tmp_path / "good.json", [{"id": "q1"}])
        catalog = QuestionCatalog()
        catalog.load([good])

        with pytest.raises(CatalogLoadError):
            catalog.load([good, tmp_path / "missing.json"])

        assert len(catalog) == 1
        assert "q1" in catalog

    def test_exam_names_and_topic_tree(self, sample_questions):
        catalog = QuestionCatalog(sample_questions)

        assert catalog.exam_names() == ["Exam 2021", "Exam 2022"]
        assert catalog.topic_tree() == {
            "Networks": ["Protocols"],
            "Security": ["Crypto", "Malware"],
        }

    def test_get_and_iteration_order(self, sample_questions):
        catalog = QuestionCatalog(sample_questions)

        assert catalog.get("q2") is sample_questions[1]
        assert catalog.get("nope") is None
        assert [q.id for q in catalog] == ["q1", "q2", "q3", "q4"]
        assert catalog.questions() == sample_questions

"""
Unit Tests for Results CSV Export
"""

import csv
import io

from quiz_toolkit.catalog.loader import QuestionCatalog
from quiz_toolkit.core.models import QuizSession
from quiz_toolkit.export.csv_export import CSV_HEADER, results_csv, write_results_csv


def _session(**overrides) -> QuizSession:
    values = dict(
        id="s",
        dataset_id="ds1",
        question_order=["q2", "q1", "q4"],
        answers={"q2": {2, 0}, "q1": {3}},
        submitted={"q2", "q1"},
        results={"q2": True, "q1": False},
    )
    values.update(overrides)
    return QuizSession(**values)


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


class TestResultsCsv:
    """Tests for results_csv()."""

    def test_header_and_rows_in_session_order(self, sample_questions):
        rows = _rows(results_csv(_session(), QuestionCatalog(sample_questions)))

        assert rows[0] == CSV_HEADER
        assert rows[1] == ["q2", "Exam 2022", "A;C", "A;C", "true", "true"]
        assert rows[2] == ["q1", "Exam 2021", "D", "B", "true", "false"]
        assert rows[3] == ["q4", "Exam 2022", "", "B", "false", ""]

    def test_correct_column_follows_original_key_policy(self, sample_questions):
        session = _session(quiz_config={"useOriginalAnswerKey": True})

        rows = _rows(results_csv(session, QuestionCatalog(sample_questions)))

        assert rows[3][3] == "A"

    def test_correct_column_follows_legacy_modified_answers_flag(self, sample_questions):
        session = _session(quiz_config={"useAiModifiedAnswers": False})

        rows = _rows(results_csv(session, QuestionCatalog(sample_questions)))

        assert rows[3][3] == "A"

    def test_exam_name_with_comma_is_quoted(self, question_factory):
        catalog = QuestionCatalog([question_factory("q1", exam_name="Exam, Spring")])
        session = _session(question_order=["q1"], answers={}, submitted=set(), results={})

        rows = _rows(results_csv(session, catalog))

        assert rows[1][1] == "Exam, Spring"

    def test_question_missing_from_catalog(self):
        rows = _rows(results_csv(_session(), QuestionCatalog()))

        assert rows[1][:4] == ["q2", "", "A;C", ""]


def test_write_results_csv(tmp_path, sample_questions):
    path = write_results_csv(tmp_path / "out" / "results.csv", _session(), QuestionCatalog(sample_questions))

    assert path.read_text(encoding="utf-8").splitlines()[0] == ",".join(CSV_HEADER)

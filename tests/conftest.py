import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import quiz_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from quiz_toolkit.catalog.manifest import DatasetInfo  # noqa: E402
from quiz_toolkit.core.models import Answer, Question  # noqa: E402
from quiz_toolkit.storage import SessionStore  # noqa: E402


class FakeClock:
    """Deterministic epoch-ms clock: every call advances by ``step``."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


def make_question(
    qid: str,
    answers=("A", "B", "C", "D"),
    correct=(0,),
    original=(),
    exam_name="Exam 2021",
    super_topic="Networks",
    sub_topic="Protocols",
    images=(),
    text=None,
) -> Question:
    return Question(
        id=qid,
        text=text or f"Question {qid}?",
        answers=tuple(Answer(a, i in correct) for i, a in enumerate(answers)),
        correct_indices=tuple(correct),
        original_correct_indices=tuple(original),
        exam_name=exam_name,
        super_topic=super_topic,
        sub_topic=sub_topic,
        image_files=tuple(images),
    )


# Common test fixtures
@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path: Path, fake_clock) -> SessionStore:
    """Session store on a temp file with a deterministic clock."""
    return SessionStore(tmp_path / "sessions.json", clock=fake_clock)


@pytest.fixture
def dataset() -> DatasetInfo:
    return DatasetInfo(id="ds1", label="Dataset One", notebook_url="https://example.org/nb")


@pytest.fixture
def sample_questions():
    """Four questions: single-correct, multi-correct, image-bearing, changed key."""
    return [
        make_question("q1", correct=(1,)),
        make_question("q2", correct=(0, 2), exam_name="Exam 2022", super_topic="Security", sub_topic="Crypto"),
        make_question("q3", correct=(3,), images=("q3.png",), super_topic="Security", sub_topic="Malware"),
        make_question("q4", correct=(1,), original=(0,), exam_name="Exam 2022", super_topic=None, sub_topic=None),
    ]


@pytest.fixture
def question_factory():
    """Build a Question with sensible defaults (see ``make_question``)."""
    return make_question

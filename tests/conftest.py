import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import studysheet
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from studysheet.core.models import ContentBlock, Subtopic, Topic


SENTENCE = "The derivative measures how a function changes as its input changes. "


# Common test fixtures
@pytest.fixture
def block_factory():
    """Factory to create content blocks with sensible defaults."""
    def _create(
        block_id: str = "b1",
        content: str = "Short paragraph.",
        block_type: str = "paragraph",
        priority: float = 5,
        height: float = 0,
        topic_id: str | None = None,
    ) -> ContentBlock:
        return ContentBlock(
            id=block_id,
            content=content,
            type=block_type,
            priority=priority,
            estimated_height=height,
            topic_id=topic_id,
        )
    return _create


@pytest.fixture
def topic_factory():
    """Factory to create topics; low-value, zero-confidence by default."""
    def _create(
        topic_id: str = "topic-1",
        content: str = "plain words",
        confidence: float = 0.0,
        examples: tuple = (),
        subtopics: tuple[Subtopic, ...] = (),
    ) -> Topic:
        return Topic(
            id=topic_id,
            title=topic_id.replace("-", " ").title(),
            content=content,
            subtopics=subtopics,
            confidence=confidence,
            examples=examples,
        )
    return _create


@pytest.fixture
def long_paragraphs(block_factory):
    """Thirty ~300 character paragraphs: overflows two A4 pages."""
    text = (SENTENCE * 5)[:300]
    return [block_factory(f"p{i}", text) for i in range(30)]

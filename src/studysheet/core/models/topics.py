"""
Module: topics

Purpose:
    Topic records produced by the external topic-extraction step. The
    layout engine reads them to score content importance; it never
    mutates them.

Key Classes:
    - Subtopic: Nested topic content
    - Topic: Top-level topic with confidence, examples and sources

Dependencies:
    - dataclasses (std)

Used By:
    - studysheet.layout.prioritizer: Priority scoring
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Subtopic:
    """Subtopic nested under a Topic."""

    id: str
    title: str
    content: str = ""
    confidence: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Subtopic:
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            content=data.get("content", ""),
            confidence=data.get("confidence", 1.0),
        )


@dataclass(frozen=True)
class Topic:
    """
    Extracted topic (immutable, read-only input).

    Attributes:
        id: Topic identifier, e.g. "topic-3"
        title: Display title
        content: Topic body text
        subtopics: Nested subtopics
        confidence: Extraction confidence in [0, 1]
        examples: Worked examples attached to the topic (opaque to the engine)
        source_files: Files the topic was extracted from

    Example:
        >>> topic = Topic("topic-1", "Derivatives", "Definition of ...", confidence=0.9)
        >>> topic.total_content_length
        17
    """

    id: str
    title: str
    content: str = ""
    subtopics: tuple[Subtopic, ...] = ()
    confidence: float = 0.0
    examples: tuple[Any, ...] = ()
    source_files: tuple[str, ...] = ()

    @property
    def total_content_length(self) -> int:
        """Length of the topic body plus every subtopic body."""
        return len(self.content) + sum(len(sub.content) for sub in self.subtopics)

    @property
    def has_examples(self) -> bool:
        return len(self.examples) > 0

    @property
    def has_subtopics(self) -> bool:
        return len(self.subtopics) > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "subtopics": [sub.to_dict() for sub in self.subtopics],
            "confidence": self.confidence,
            "examples": list(self.examples),
            "source_files": list(self.source_files),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Topic:
        """Deserialize from a dictionary (accepts ``sourceFiles`` too)."""
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            content=data.get("content", ""),
            subtopics=tuple(Subtopic.from_dict(s) for s in data.get("subtopics", [])),
            confidence=data.get("confidence", 0.0),
            examples=tuple(data.get("examples", [])),
            source_files=tuple(data.get("source_files", data.get("sourceFiles", []))),
        )

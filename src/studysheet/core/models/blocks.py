"""
Module: blocks

Purpose:
    Provides the ContentBlock dataclass - the atomic, typed unit of document
    content that the layout engine measures, places and (when space runs
    out) removes or compresses.

Key Classes:
    - ContentBlock: Heading/paragraph/list/table/image with a priority

Dependencies:
    - dataclasses (std)

Used By:
    - studysheet.layout.column_engine: Column distribution
    - studysheet.layout.overflow: Precise height pass
    - studysheet.layout.prioritizer: Reduction planning
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

BlockType = Literal["heading", "paragraph", "list", "table", "image"]
BLOCK_TYPES: tuple[str, ...] = ("heading", "paragraph", "list", "table", "image")


@dataclass(frozen=True)
class ContentBlock:
    """
    A single block of content to lay out (immutable).

    Attributes:
        id: Stable, unique join key across layouts, plans and suggestions
        content: Raw text (used only for height estimates and previews)
        type: One of heading, paragraph, list, table, image
        priority: Caller-assigned importance, 1 (lowest) to 10 (highest)
        estimated_height: Caller override in px; 0 means "compute it"
        topic_id: Explicit owning topic, if the caller knows it

    Invariants:
        - type is one of BLOCK_TYPES
        - id is never rewritten by the engine

    Example:
        >>> block = ContentBlock("topic-1-intro", "Derivatives measure...", "paragraph", 7)
        >>> block.has_height_override
        False
    """

    id: str
    content: str
    type: BlockType = "paragraph"
    priority: float = 5
    estimated_height: float = 0
    topic_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate block type on construction."""
        if self.type not in BLOCK_TYPES:
            raise ValueError(f"Invalid block type for {self.id!r}: {self.type!r}")

    @property
    def has_height_override(self) -> bool:
        """True when the caller supplied a positive height."""
        return self.estimated_height > 0

    @property
    def content_length(self) -> int:
        return len(self.content)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        data: dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "type": self.type,
            "priority": self.priority,
            "estimated_height": self.estimated_height,
        }
        if self.topic_id is not None:
            data["topic_id"] = self.topic_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ContentBlock:
        """
        Deserialize from a dictionary.

        Accepts both snake_case and the camelCase ``estimatedHeight`` /
        ``topicId`` keys emitted by JavaScript collaborators.
        """
        return cls(
            id=str(data["id"]),
            content=data.get("content", ""),
            type=data.get("type", "paragraph"),
            priority=data.get("priority", 5),
            estimated_height=data.get("estimated_height", data.get("estimatedHeight", 0)),
            topic_id=data.get("topic_id", data.get("topicId")),
        )

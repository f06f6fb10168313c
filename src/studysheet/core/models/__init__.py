"""
Core Models Package

Immutable, validated input models handed to the layout engine by its
collaborators (content-block assembly and topic extraction).

All models are frozen dataclasses. The engine never mutates them and never
retains them between calls.
"""

from .blocks import BlockType, ContentBlock, BLOCK_TYPES
from .topics import Subtopic, Topic

__all__ = [
    "BlockType",
    "BLOCK_TYPES",
    "ContentBlock",
    "Subtopic",
    "Topic",
]

"""
Serialization Utilities

JSON in and out of the layout engine.

- Input: content blocks and topics from JSON payloads (a list, or an object
  holding a ``blocks`` / ``topics`` list), via the models' ``from_dict()``.
- Output: any engine result dataclass as plain JSON-ready data with
  snake_case keys, for renderer collaborators and the CLI.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Iterable

from ..models import ContentBlock, Topic


class SerializationError(ValueError):
    """Payload could not be turned into engine input."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.path}: {message}" if self.path else message


# ─────────────────────────────────────────────────────────────────────────────
# Input
# ─────────────────────────────────────────────────────────────────────────────

def block_from_dict(data: dict[str, Any]) -> ContentBlock:
    """
    Deserialize a ContentBlock.

    Raises:
        SerializationError: If ``id`` is missing or a field is invalid
    """
    try:
        return ContentBlock.from_dict(data)
    except KeyError as e:
        raise SerializationError(f"Content block is missing required key {e}")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Invalid content block {data.get('id', '?')!r}: {e}")


def topic_from_dict(data: dict[str, Any]) -> Topic:
    """
    Deserialize a Topic (with subtopics).

    Raises:
        SerializationError: If ``id`` is missing or a field is invalid
    """
    try:
        return Topic.from_dict(data)
    except KeyError as e:
        raise SerializationError(f"Topic is missing required key {e}")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Invalid topic {data.get('id', '?')!r}: {e}")


def _items(payload: Any, key: str) -> Iterable[dict[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get(key)
    if not isinstance(payload, list):
        raise SerializationError(f"Expected a list of {key} or an object with a '{key}' list")
    for item in payload:
        if not isinstance(item, dict):
            raise SerializationError(f"Expected an object in {key}, got {type(item).__name__}")
    return payload


def _parse(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON: {e}")


def blocks_from_json(text: str) -> list[ContentBlock]:
    """Parse content blocks from a JSON document."""
    return [block_from_dict(item) for item in _items(_parse(text), "blocks")]


def topics_from_json(text: str) -> list[Topic]:
    """Parse topics from a JSON document."""
    return [topic_from_dict(item) for item in _items(_parse(text), "topics")]


def load_blocks_json(path: Path) -> list[ContentBlock]:
    """
    Load content blocks from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        SerializationError: If the file holds no valid block list
    """
    if not path.exists():
        raise FileNotFoundError(f"Blocks file not found: {path}")
    try:
        return blocks_from_json(path.read_text(encoding="utf-8"))
    except SerializationError as e:
        raise SerializationError(str(e), path=str(path))


def load_topics_json(path: Path) -> list[Topic]:
    """
    Load topics from a JSON file.

    Raises:
        FileNotFoundError: If file doesn't exist
        SerializationError: If the file holds no valid topic list
    """
    if not path.exists():
        raise FileNotFoundError(f"Topics file not found: {path}")
    try:
        return topics_from_json(path.read_text(encoding="utf-8"))
    except SerializationError as e:
        raise SerializationError(str(e), path=str(path))


# ─────────────────────────────────────────────────────────────────────────────
# Output
# ─────────────────────────────────────────────────────────────────────────────

def to_jsonable(value: Any) -> Any:
    """
    Convert engine results to JSON-ready data.

    Dataclasses become dicts keyed by field name, tuples become lists;
    lists and dicts are converted element-wise.

    Example:
        >>> to_jsonable(Dimensions(210.0, 297.0))
        {'width': 210.0, 'height': 297.0, 'unit': 'mm'}
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: to_jsonable(getattr(value, field.name))
            for field in dataclasses.fields(value)
        }
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    return value


def dumps(value: Any, *, indent: int | None = 2) -> str:
    """Serialize an engine result (or a mapping of results) to a JSON string."""
    return json.dumps(to_jsonable(value), indent=indent, ensure_ascii=False)

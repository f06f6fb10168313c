"""
Utils Package

JSON (de)serialization for engine input and results.
"""

from .serialization import (
    SerializationError,
    block_from_dict,
    blocks_from_json,
    dumps,
    load_blocks_json,
    load_topics_json,
    to_jsonable,
    topic_from_dict,
    topics_from_json,
)

__all__ = [
    "SerializationError",
    "block_from_dict",
    "blocks_from_json",
    "topic_from_dict",
    "topics_from_json",
    "load_blocks_json",
    "load_topics_json",
    "to_jsonable",
    "dumps",
]

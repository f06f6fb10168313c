"""
Module: layout.engine

Purpose:
    Facade over the layout subsystems. Owns the active LayoutConfig and
    rebuilds the ColumnEngine/OverflowDetector whenever it changes.

Key Classes:
    - LayoutEngine: Configuration owner and analysis entry point

Key Functions:
    - create_layout_engine(): Engine from LayoutConfig keyword arguments
    - create_content_block(): Block with a computed height
    - create_content_blocks(): Blocks from plain mappings
    - content_block_from_html(): Block from an HTML fragment

Dependencies:
    - layout.column_engine, layout.overflow, layout.prioritizer
    - layout.stylesheet: CSS generation

Used By:
    - scripts/analyze_layout.py: CLI
    - Renderer collaborators (HTML/PDF/Markdown)
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from studysheet.core.models import BlockType, ContentBlock, Topic

from .column_engine import ColumnEngine
from .config import LayoutConfig, Orientation, PaperSize, TextSize
from .models import (
    DetailedOverflowInfo,
    LayoutCalculation,
    LayoutWarning,
    OverflowAnalysis,
    PrioritizedOverflowAnalysis,
)
from .overflow import OverflowDetector
from .prioritizer import ContentPrioritizer, EducationalValueScorer
from .stylesheet import css_variables, print_css
from .thresholds import OVERFLOW
from .typography import text_profile, validate_readability

logger = logging.getLogger(__name__)


class LayoutEngine:
    """
    Coordinates geometry, column flow, overflow detection and prioritization.

    The configuration is immutable; every update swaps in a new LayoutConfig
    and rebuilds the dependent engines.

    Example:
        >>> engine = LayoutEngine()
        >>> engine.update_page_config(columns=3)
        >>> engine.config.page.columns
        3
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        scorer: Optional[EducationalValueScorer] = None,
    ):
        self._config = config or LayoutConfig()
        self._scorer = scorer
        self._rebuild()

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def _rebuild(self) -> None:
        self.column_engine = ColumnEngine(self._config.page, self._config.text)
        prioritizer = ContentPrioritizer(self._config.prioritization, self._scorer)
        self.overflow_detector = OverflowDetector(self._config, prioritizer)

    # ─────────────────────────────────────────────────────────────────────────
    # Configuration updates
    # ─────────────────────────────────────────────────────────────────────────

    def update_config(self, **changes: Any) -> None:
        """Replace top-level LayoutConfig fields (page, text, max_pages, prioritization)."""
        self._config = replace(self._config, **changes)
        self._rebuild()

    def update_page_config(
        self,
        paper_size: Optional[PaperSize] = None,
        orientation: Optional[Orientation] = None,
        columns: Optional[int] = None,
    ) -> None:
        changes: Dict[str, Any] = {}
        if paper_size:
            changes["paper_size"] = paper_size
        if orientation:
            changes["orientation"] = orientation
        if columns:
            changes["columns"] = columns
        if changes:
            self.update_config(page=replace(self._config.page, **changes))

    def update_text_config(self, size: Optional[TextSize] = None) -> None:
        """Switch to the standard profile for a size class."""
        if size:
            self.update_config(text=text_profile(size))

    def update_prioritization_config(self, **changes: Any) -> None:
        self.update_config(prioritization=replace(self._config.prioritization, **changes))

    # ─────────────────────────────────────────────────────────────────────────
    # Analysis
    # ─────────────────────────────────────────────────────────────────────────

    def calculate_layout(self, blocks: Sequence[ContentBlock]) -> LayoutCalculation:
        return self.column_engine.calculate_layout(blocks, self._config.max_pages)

    def analyze_overflow(self, blocks: Sequence[ContentBlock]) -> OverflowAnalysis:
        return self.overflow_detector.analyze_overflow(blocks)

    def analyze_overflow_with_prioritization(
        self,
        blocks: Sequence[ContentBlock],
        topics: Optional[Sequence[Topic]] = None,
    ) -> PrioritizedOverflowAnalysis:
        return self.overflow_detector.analyze_overflow_with_prioritization(blocks, topics)

    def detailed_overflow_info(self, blocks: Sequence[ContentBlock]) -> DetailedOverflowInfo:
        return self.overflow_detector.detailed_overflow_info(blocks)

    def generate_warnings(self, blocks: Sequence[ContentBlock]) -> List[LayoutWarning]:
        """Readability warnings for the profile followed by layout warnings for the blocks."""
        warnings = validate_readability(self._config.text)
        warnings.extend(self.overflow_detector.generate_layout_warnings(blocks))
        return warnings

    def optimize_layout(self, blocks: Sequence[ContentBlock]) -> List[ContentBlock]:
        """
        Keep the highest-priority blocks that fit the page budget.

        Non-topic-aware alternative to the reduction plan. Returns the input
        order unchanged when nothing overflows; otherwise walks blocks by
        priority (descending, stable) and keeps each one whose precise
        height still fits under content height x max pages.
        """
        layout = self.calculate_layout(blocks)
        if not layout.overflow.has_overflow:
            return list(blocks)

        budget = self.overflow_detector.available_height
        kept: List[ContentBlock] = []
        used = 0.0
        for block in sorted(blocks, key=lambda b: b.priority, reverse=True):
            height = self.overflow_detector.block_height(block)
            if used + height <= budget:
                kept.append(block)
                used += height
            else:
                logger.debug(f"Dropping {block.id} ({height:.0f}px) from optimized layout")

        logger.info(f"Optimized layout keeps {len(kept)} of {len(blocks)} blocks")
        return kept

    def balance_columns(
        self, columns: Sequence[Sequence[ContentBlock]]
    ) -> List[List[ContentBlock]]:
        """
        Rebalance column slots page by page.

        For slots the caller has edited, e.g. after applying a reduction
        plan to a distributed layout. Blocks never move to another page.

        Args:
            columns: Slots as from distribute(), slot = page * columns + column

        Returns:
            New slot lists (input unchanged)
        """
        per_page = self._config.page.columns
        balanced: List[List[ContentBlock]] = []
        for start in range(0, len(columns), per_page):
            page = [list(column) for column in columns[start:start + per_page]]
            balanced.extend(self.column_engine.balance_columns(page))
        return balanced

    def validate_config(self) -> List[LayoutWarning]:
        """Configuration smells independent of any content."""
        warnings = validate_readability(self._config.text)

        if self._config.page.columns > OVERFLOW.max_recommended_columns:
            warnings.append(LayoutWarning(
                type="spacing",
                severity="medium",
                message="Too many columns may reduce readability",
                affected_elements=("columns",),
            ))

        if self._config.max_pages > OVERFLOW.max_recommended_pages:
            warnings.append(LayoutWarning(
                type="spacing",
                severity="low",
                message="Large number of pages may not be suitable for a cheat sheet",
                affected_elements=("pages",),
            ))

        return warnings

    # ─────────────────────────────────────────────────────────────────────────
    # CSS
    # ─────────────────────────────────────────────────────────────────────────

    def css_variables(self) -> Dict[str, str]:
        return css_variables(self._config)

    def print_css(self) -> str:
        return print_css(self._config)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def create_layout_engine(**changes: Any) -> LayoutEngine:
    """
    Build an engine from LayoutConfig keyword arguments.

    Example:
        >>> create_layout_engine(max_pages=1).config.max_pages
        1
    """
    return LayoutEngine(LayoutConfig(**changes))


def create_content_block(
    id: str,
    content: str,
    type: BlockType = "paragraph",
    priority: float = 5,
) -> ContentBlock:
    """Block whose height the engine computes."""
    return ContentBlock(id=id, content=content, type=type, priority=priority, estimated_height=0)


def create_content_blocks(items: Iterable[Mapping[str, Any]]) -> List[ContentBlock]:
    """Blocks from mappings with ``id``, ``content`` and optional ``type``/``priority``."""
    return [
        create_content_block(
            item["id"],
            item["content"],
            item.get("type") or "paragraph",
            item.get("priority") or 5,
        )
        for item in items
    ]


_TAG_PATTERN = re.compile(r"<[^>]*>")


def content_block_from_html(id: str, html: str, priority: float = 5) -> ContentBlock:
    """
    Block from an HTML fragment, typed by its first structural tag.

    Example:
        >>> content_block_from_html("b1", "<h2>Forces</h2>").type
        'heading'
    """
    text = _TAG_PATTERN.sub("", html).strip()

    block_type: BlockType = "paragraph"
    if any(tag in html for tag in ("<h1>", "<h2>", "<h3>")):
        block_type = "heading"
    elif "<ul>" in html or "<ol>" in html:
        block_type = "list"
    elif "<table>" in html:
        block_type = "table"
    elif "<img" in html:
        block_type = "image"

    return create_content_block(id, text, block_type, priority)

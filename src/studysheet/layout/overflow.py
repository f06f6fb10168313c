"""
Module: layout.overflow

Purpose:
    Second, higher-precision overflow pass. Measures each block with a
    type-specific height formula, simulates cumulative placement against
    the page budget, reports partial fits and space utilization, and
    merges its suggestions with the ColumnEngine's first pass. Optionally
    runs the ContentPrioritizer to produce a reduction plan.

Key Classes:
    - OverflowDetector: Precise overflow analysis for a LayoutConfig

Dependencies:
    - numpy: Cumulative fit simulation
    - layout.column_engine: First-pass estimate
    - layout.prioritizer: Topic-aware reduction planning

Used By:
    - studysheet.layout.engine: LayoutEngine facade
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from studysheet.core.models import ContentBlock, Topic

from .column_engine import ColumnEngine
from .config import LayoutConfig
from .geometry import column_width_px, content_area_px
from .models import (
    IMPACT_ORDER,
    BlockFitInfo,
    ContentReductionPlan,
    DetailedOverflowInfo,
    LayoutWarning,
    OverflowAnalysis,
    OverflowDetails,
    OverflowSuggestion,
    PartialFit,
    PrioritizedOverflowAnalysis,
    SpaceUtilization,
)
from .prioritizer import ContentPrioritizer
from .thresholds import BLOCK_HEIGHTS, OVERFLOW
from .typography import estimate_text_height, font_size_table, suggest_optimal_text_size

logger = logging.getLogger(__name__)


def _by_impact_desc(suggestions: Iterable[OverflowSuggestion]) -> List[OverflowSuggestion]:
    return sorted(suggestions, key=lambda s: IMPACT_ORDER[s.impact], reverse=True)


class OverflowDetector:
    """
    Precise overflow detection for one layout configuration.

    Example:
        >>> detector = OverflowDetector(LayoutConfig(max_pages=1))
        >>> detector.analyze_overflow(blocks).has_overflow
        True
    """

    def __init__(
        self,
        config: LayoutConfig,
        prioritizer: Optional[ContentPrioritizer] = None,
    ):
        self.config = config
        self.column_engine = ColumnEngine(config.page, config.text)
        self.prioritizer = prioritizer or ContentPrioritizer(config.prioritization)
        self.content_area = content_area_px(config.page)
        self.column_width = column_width_px(config.page)
        self.font_sizes = font_size_table(config.text)

    @property
    def available_height(self) -> float:
        """Total budget of the precise pass: content height x max pages (px)."""
        return self.content_area.height * self.config.max_pages

    # ─────────────────────────────────────────────────────────────────────────
    # Analysis
    # ─────────────────────────────────────────────────────────────────────────

    def analyze_overflow(self, blocks: Sequence[ContentBlock]) -> OverflowAnalysis:
        """
        Merge the ColumnEngine estimate with the precise pass.

        has_overflow is OR-ed, overflow_amount is the larger of the two,
        affected blocks are the ordered union and suggestions are merged by
        type keeping the larger estimated reduction.
        """
        layout = self.column_engine.calculate_layout(blocks, self.config.max_pages)
        detailed = self._precise_analysis(blocks)

        affected = list(dict.fromkeys(layout.overflow.affected_blocks + detailed.affected_blocks))
        return OverflowAnalysis(
            has_overflow=layout.overflow.has_overflow or detailed.has_overflow,
            overflow_amount=max(layout.overflow.overflow_amount, detailed.overflow_amount),
            affected_blocks=tuple(affected),
            suggestions=tuple(self._merge_suggestions(layout.overflow.suggestions, detailed.suggestions)),
        )

    def analyze_overflow_with_prioritization(
        self,
        blocks: Sequence[ContentBlock],
        topics: Optional[Sequence[Topic]] = None,
    ) -> PrioritizedOverflowAnalysis:
        """
        Overflow analysis plus topic-aware priorities and a reduction plan.

        Without topics this is the plain analysis. With topics, priorities
        are always computed; the reduction plan and intelligent suggestions
        are only non-empty when there is overflow to close.
        """
        basic = self.analyze_overflow(blocks)
        if not topics:
            return PrioritizedOverflowAnalysis(
                has_overflow=basic.has_overflow,
                overflow_amount=basic.overflow_amount,
                affected_blocks=basic.affected_blocks,
                suggestions=basic.suggestions,
            )

        priorities = self.prioritizer.analyze_priorities(topics, blocks)
        if not basic.has_overflow:
            return PrioritizedOverflowAnalysis(
                has_overflow=False,
                overflow_amount=basic.overflow_amount,
                affected_blocks=basic.affected_blocks,
                suggestions=basic.suggestions,
                priorities=tuple(priorities),
                reduction_plan=ContentReductionPlan(),
            )

        heights = {block.id: self.block_height(block) for block in blocks}
        plan = self.prioritizer.create_reduction_plan(
            basic.overflow_amount, blocks, priorities, block_heights=heights
        )
        intelligent = self.prioritizer.generate_intelligent_suggestions(
            basic.overflow_amount, priorities, plan
        )

        logger.info(
            f"Prioritized overflow of {basic.overflow_amount:.0f}px: "
            f"{len(plan.removable_blocks)} removable, {len(plan.compressible_blocks)} compressible, "
            f"{plan.estimated_space_saved:.0f}px saved"
        )

        return PrioritizedOverflowAnalysis(
            has_overflow=basic.has_overflow,
            overflow_amount=basic.overflow_amount,
            affected_blocks=basic.affected_blocks,
            suggestions=basic.suggestions + tuple(intelligent),
            priorities=tuple(priorities),
            reduction_plan=plan,
            intelligent_suggestions=tuple(intelligent),
        )

    def _precise_analysis(self, blocks: Sequence[ContentBlock]) -> OverflowAnalysis:
        if not blocks:
            return OverflowAnalysis.empty()

        available = self.available_height
        heights = np.array([self.block_height(block) for block in blocks], dtype=float)
        cumulative = np.cumsum(heights)
        total = float(cumulative[-1])

        affected = tuple(block.id for block, crossed in zip(blocks, cumulative > available) if crossed)
        overflow_amount = max(0.0, total - available)

        return OverflowAnalysis(
            has_overflow=overflow_amount > 0,
            overflow_amount=overflow_amount,
            affected_blocks=affected,
            suggestions=tuple(self._detailed_suggestions(
                overflow_amount, blocks, dict(zip((b.id for b in blocks), heights.tolist()))
            )),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Block heights
    # ─────────────────────────────────────────────────────────────────────────

    def block_height(self, block: ContentBlock) -> float:
        """Precise height of a block in px, honouring caller overrides."""
        if block.has_height_override:
            return float(block.estimated_height)

        if block.type == "heading":
            return self._heading_height(block)
        if block.type == "paragraph":
            return self._paragraph_height(block)
        if block.type == "list":
            return self._list_height(block)
        if block.type == "table":
            return self._table_height(block)
        if block.type == "image":
            return self._image_height(block)
        return self._text(block.content, self.font_sizes.body, self.column_width)

    def _text(self, text: str, font_size: float, width: float) -> float:
        return estimate_text_height(text, font_size, self.config.text.line_height, width)

    def _heading_height(self, block: ContentBlock) -> float:
        font_size = self.font_sizes.h2
        base = self._text(block.content, font_size, self.column_width)
        return (
            base
            + font_size * BLOCK_HEIGHTS.heading_space_above
            + font_size * BLOCK_HEIGHTS.heading_space_below
        )

    def _paragraph_height(self, block: ContentBlock) -> float:
        body = self.font_sizes.body
        return self._text(block.content, body, self.column_width) + body * BLOCK_HEIGHTS.paragraph_spacing

    def _list_height(self, block: ContentBlock) -> float:
        body = self.font_sizes.body
        width = self.column_width * BLOCK_HEIGHTS.list_indent_ratio
        items = [line for line in block.content.split("\n") if line.strip()]
        if not items:
            # A list with no items still takes one line
            items = [block.content]
        return sum(
            self._text(item, body, width) + body * BLOCK_HEIGHTS.list_item_spacing
            for item in items
        )

    def _table_height(self, block: ContentBlock) -> float:
        line_height = self.config.text.line_height
        rows = max(BLOCK_HEIGHTS.table_min_rows, math.ceil(len(block.content) / BLOCK_HEIGHTS.table_chars_per_row))
        row_height = self.font_sizes.small * line_height + BLOCK_HEIGHTS.table_row_padding
        header_height = self.font_sizes.body * line_height + BLOCK_HEIGHTS.table_header_padding
        return header_height + rows * row_height

    def _image_height(self, block: ContentBlock) -> float:
        height = min(self.column_width * BLOCK_HEIGHTS.image_width_ratio, BLOCK_HEIGHTS.image_max_height)
        if block.content:
            height += self.font_sizes.caption * BLOCK_HEIGHTS.image_caption_lines
        return height

    # ─────────────────────────────────────────────────────────────────────────
    # Suggestions
    # ─────────────────────────────────────────────────────────────────────────

    def _detailed_suggestions(
        self,
        overflow_amount: float,
        blocks: Sequence[ContentBlock],
        heights: Dict[str, float],
    ) -> List[OverflowSuggestion]:
        if overflow_amount <= 0:
            return []

        suggestions: List[OverflowSuggestion] = []
        available = self.available_height
        percentage = overflow_amount / available * 100 if available > 0 else 100.0

        if percentage > OVERFLOW.detailed_pages_percent:
            page_height = available / self.config.max_pages
            extra_pages = math.ceil(overflow_amount / page_height)
            suggestions.append(OverflowSuggestion(
                type="increase-pages",
                description=f"Add {extra_pages} more page(s) to accommodate all content",
                impact="high" if percentage > OVERFLOW.detailed_high_impact_percent else "medium",
                estimated_reduction=overflow_amount * OVERFLOW.detailed_pages_factor,
            ))

        current = self.config.text.size_class
        if current != "small":
            optimal = suggest_optimal_text_size(
                sum(len(block.content) for block in blocks),
                available,
                self.column_width,
            )
            if optimal != current:
                suggestions.append(OverflowSuggestion(
                    type="smaller-text",
                    description=f'Reduce text size to "{optimal}" for better fit',
                    impact="medium",
                    estimated_reduction=overflow_amount * OVERFLOW.detailed_text_factor,
                ))

        if self.config.page.columns < OVERFLOW.max_suggested_columns:
            suggestions.append(OverflowSuggestion(
                type="more-columns",
                description=(
                    f"Increase to {self.config.page.columns + 1} columns "
                    "for better space utilization"
                ),
                impact="medium",
                estimated_reduction=overflow_amount * OVERFLOW.detailed_columns_factor,
            ))

        low_priority = sorted(
            (b for b in blocks if b.priority < OVERFLOW.low_priority_cutoff),
            key=lambda b: b.priority,
        )
        if low_priority:
            share = low_priority[: math.ceil(len(low_priority) * OVERFLOW.low_priority_share)]
            removable_height = sum(heights[b.id] for b in share)
            suggestions.append(OverflowSuggestion(
                type="reduce-content",
                description=f"Remove {len(low_priority)} low-priority content blocks",
                impact="high",
                estimated_reduction=min(removable_height, overflow_amount),
            ))

        return _by_impact_desc(suggestions)

    @staticmethod
    def _merge_suggestions(
        first: Iterable[OverflowSuggestion],
        second: Iterable[OverflowSuggestion],
    ) -> List[OverflowSuggestion]:
        merged: Dict[str, OverflowSuggestion] = {}
        for suggestion in list(first) + list(second):
            existing = merged.get(suggestion.type)
            if existing is None or suggestion.estimated_reduction > existing.estimated_reduction:
                merged[suggestion.type] = suggestion
        return _by_impact_desc(merged.values())

    # ─────────────────────────────────────────────────────────────────────────
    # Detailed report & warnings
    # ─────────────────────────────────────────────────────────────────────────

    def detailed_overflow_info(self, blocks: Sequence[ContentBlock]) -> DetailedOverflowInfo:
        """
        Per-block fit report with partial-fit cut-off and space utilization.

        The first block that starts inside the budget but does not wholly
        fit gets a PartialFit with the fraction that fits and the text
        that would be shown.
        """
        available = self.available_height
        cumulative = 0.0
        entries: List[BlockFitInfo] = []

        for block in blocks:
            height = self.block_height(block)
            will_fit = cumulative + height <= available

            partial: Optional[PartialFit] = None
            if not will_fit and cumulative < available and height > 0:
                fitting = (available - cumulative) / height
                partial = PartialFit(
                    fitting_percentage=fitting,
                    cutoff_point=estimate_cutoff_point(block.content, fitting),
                )

            cumulative += height
            entries.append(BlockFitInfo(
                block_id=block.id,
                block_type=block.type,
                content_preview=content_preview(block.content),
                estimated_height=height,
                priority=block.priority,
                will_fit=will_fit,
                partial_fit=partial,
            ))

        overflow_amount = max(0.0, cumulative - available)
        used = min(cumulative, available)
        return DetailedOverflowInfo(
            overflow_details=OverflowDetails(
                total_content_height=cumulative,
                available_height=available,
                overflow_amount=overflow_amount,
                overflow_percentage=overflow_amount / available * 100 if available > 0 else 0.0,
            ),
            affected_content=tuple(entries),
            space_utilization=SpaceUtilization(
                used_space=used,
                available_space=available,
                wasted_space=max(0.0, available - cumulative),
                efficiency=used / available if available > 0 else 0.0,
            ),
        )

    def generate_layout_warnings(self, blocks: Sequence[ContentBlock]) -> List[LayoutWarning]:
        """Overflow, readability and spacing warnings for a block set."""
        warnings: List[LayoutWarning] = []
        overflow = self.analyze_overflow(blocks)

        if overflow.has_overflow:
            warnings.append(LayoutWarning(
                type="overflow",
                severity="high" if overflow.overflow_amount > OVERFLOW.high_overflow_px else "medium",
                message=f"Content exceeds available space by {round(overflow.overflow_amount)}px",
                affected_elements=overflow.affected_blocks,
            ))

        if self.font_sizes.body < OVERFLOW.min_comfortable_body_px:
            warnings.append(LayoutWarning(
                type="readability",
                severity="high",
                message="Text size may be too small for comfortable reading",
                affected_elements=("body-text",),
            ))

        if self.column_width < OVERFLOW.min_column_width_px:
            warnings.append(LayoutWarning(
                type="spacing",
                severity="medium",
                message="Columns may be too narrow for optimal readability",
                affected_elements=("columns",),
            ))

        return warnings


def content_preview(content: str) -> str:
    """First 100 characters, with an ellipsis when truncated."""
    limit = OVERFLOW.preview_chars
    return content[:limit] + ("..." if len(content) > limit else "")


def estimate_cutoff_point(content: str, fitting_percentage: float) -> str:
    """
    Estimate the text that fits when only a fraction of a block does.

    Prefers the last sentence end if it lies beyond 80% of the raw cut,
    otherwise the last word boundary if it lies beyond 90% of it,
    otherwise a hard character cut.

    Example:
        >>> estimate_cutoff_point("One two. Three four five six", 0.3)
        'One two.'
    """
    cutoff_index = math.floor(len(content) * max(0.0, min(1.0, fitting_percentage)))
    cutoff_text = content[:cutoff_index]

    last_sentence = cutoff_text.rfind(".")
    if last_sentence >= 0 and last_sentence > cutoff_index * OVERFLOW.sentence_break_ratio:
        return content[: last_sentence + 1]

    last_word = cutoff_text.rfind(" ")
    if last_word > cutoff_index * OVERFLOW.word_break_ratio:
        return content[:last_word]
    return cutoff_text

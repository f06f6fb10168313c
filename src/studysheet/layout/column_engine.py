"""
Module: layout.column_engine

Purpose:
    Distribute content blocks over a fixed grid of column slots
    (columns x pages) and produce a first-pass overflow estimate.

Key Classes:
    - ColumnEngine: Greedy shortest-column-first distribution

Algorithm:
    1. Stable-sort blocks by priority, highest first
    2. Place each block in the slot with the smallest height
    3. If it does not fit there, use the first slot that has room
    4. If no slot has room, place it in the shortest slot anyway and let
       it register as overflow

Dependencies:
    - numpy: Slot height vector, argmin with first-index tie-break
    - layout.geometry, layout.typography

Used By:
    - studysheet.layout.overflow: OverflowDetector first pass
    - studysheet.layout.engine: LayoutEngine.calculate_layout
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from studysheet.core.models import ContentBlock

from .config import PageGeometryConfig, TypographyProfile
from .geometry import column_width_px, content_area_px
from .models import Dimensions, LayoutCalculation, OverflowAnalysis, OverflowSuggestion
from .thresholds import BLOCK_HEIGHTS, OVERFLOW
from .typography import estimate_text_height, font_size_table

logger = logging.getLogger(__name__)


class ColumnEngine:
    """
    Multi-column flow engine for one page/typography configuration.

    Cheap to construct and holds no per-call state; the LayoutEngine
    rebuilds it whenever the configuration changes.

    Example:
        >>> engine = ColumnEngine(PageGeometryConfig(), TypographyProfile())
        >>> layout = engine.calculate_layout(blocks, max_pages=2)
        >>> layout.overflow.has_overflow
        False
    """

    def __init__(self, page: PageGeometryConfig, text: TypographyProfile):
        self.page = page
        self.text = text
        self.content_area = content_area_px(page)
        self.column_width = column_width_px(page)
        self._font_sizes = font_size_table(text)

    @property
    def column_height(self) -> float:
        """Available height of a single column slot (px)."""
        return self.content_area.height

    def calculate_layout(
        self,
        blocks: Sequence[ContentBlock],
        max_pages: int = 1,
    ) -> LayoutCalculation:
        """
        Lay blocks out over ``columns x max_pages`` slots.

        Args:
            blocks: Blocks to place (not mutated)
            max_pages: Page budget

        Returns:
            LayoutCalculation with slots, page breaks, used space and the
            first-pass overflow estimate
        """
        columns = self.distribute(blocks, max_pages)
        heights = {block.id: self.estimate_block_height(block) for block in blocks}
        overflow = self._analyze_overflow(columns, heights, max_pages)

        logger.info(
            f"Placed {len(blocks)} blocks in {len(columns)} column slots, "
            f"overflow {overflow.overflow_amount:.0f}px"
        )

        return LayoutCalculation(
            available_space=self.content_area,
            used_space=self._used_space(columns, heights),
            content_blocks=tuple(blocks),
            overflow=overflow,
            page_breaks=self.page_breaks(max_pages),
            columns=tuple(tuple(block.id for block in column) for column in columns),
        )

    def distribute(
        self,
        blocks: Sequence[ContentBlock],
        max_pages: int = 1,
    ) -> List[List[ContentBlock]]:
        """Assign blocks to slots, shortest slot first, in priority order."""
        slot_count = self.page.columns * max(1, max_pages)
        columns: List[List[ContentBlock]] = [[] for _ in range(slot_count)]
        slot_heights = np.zeros(slot_count, dtype=float)
        available = self.column_height

        # sorted() is stable, so equal priorities keep their input order
        ordered = sorted(blocks, key=lambda b: b.priority, reverse=True)

        for block in ordered:
            height = self.estimate_block_height(block)
            target = int(np.argmin(slot_heights))

            if slot_heights[target] + height > available:
                # The shortest slot is full, so every slot is
                logger.warning(
                    f"Block {block.id} ({height:.0f}px) fits no slot, "
                    f"forcing into slot {target}"
                )

            columns[target].append(block)
            slot_heights[target] += height

        return columns

    def page_breaks(self, max_pages: int) -> tuple[int, ...]:
        """Slot index at which each page after the first begins."""
        return tuple(page * self.page.columns for page in range(1, max_pages))

    def estimate_block_height(self, block: ContentBlock) -> float:
        """
        First-pass height estimate for a block.

        Caller overrides win; images use a fixed default; headings are
        measured at h2, tables at the small size, everything else at body.
        """
        if block.has_height_override:
            return float(block.estimated_height)

        sizes = self._font_sizes
        if block.type == "image":
            return BLOCK_HEIGHTS.default_image_height
        if block.type == "heading":
            font_size = sizes.h2
        elif block.type == "table":
            font_size = sizes.small
        else:
            font_size = sizes.body

        return estimate_text_height(block.content, font_size, self.text.line_height, self.column_width)

    def balance_columns(self, columns: List[List[ContentBlock]]) -> List[List[ContentBlock]]:
        """
        Move trailing blocks from the tallest to the shortest slot while
        that narrows a gap wider than the balance threshold.

        Returns:
            New slot lists (input unchanged)
        """
        balanced = [list(column) for column in columns]
        if len(balanced) < 2:
            return balanced

        heights = np.array(
            [sum(self.estimate_block_height(b) for b in column) for column in balanced],
            dtype=float,
        )

        while True:
            tallest = int(np.argmax(heights))
            shortest = int(np.argmin(heights))
            if tallest == shortest or heights[tallest] - heights[shortest] <= OVERFLOW.balance_gap_px:
                break
            if not balanced[tallest]:
                break

            candidate = balanced[tallest][-1]
            height = self.estimate_block_height(candidate)
            if heights[shortest] + height >= heights[tallest]:
                break

            balanced[tallest].pop()
            balanced[shortest].append(candidate)
            heights[tallest] -= height
            heights[shortest] += height

        return balanced

    def _analyze_overflow(
        self,
        columns: List[List[ContentBlock]],
        heights: dict[str, float],
        max_pages: int,
    ) -> OverflowAnalysis:
        available = self.column_height
        total_available = available * self.page.columns * max(1, max_pages)

        total_used = 0.0
        affected: List[str] = []
        for column in columns:
            running = 0.0
            for block in column:
                running += heights[block.id]
                if running > available:
                    affected.append(block.id)
            total_used += running

        overflow_amount = max(0.0, total_used - total_available)
        return OverflowAnalysis(
            has_overflow=overflow_amount > 0 or bool(affected),
            overflow_amount=overflow_amount,
            affected_blocks=tuple(affected),
            suggestions=tuple(self._suggestions(overflow_amount, total_available)),
        )

    def _suggestions(self, overflow_amount: float, total_available: float) -> List[OverflowSuggestion]:
        if overflow_amount <= 0:
            return []

        suggestions: List[OverflowSuggestion] = []
        percentage = overflow_amount / total_available * 100 if total_available > 0 else 100.0

        if percentage > OVERFLOW.increase_pages_percent:
            suggestions.append(OverflowSuggestion(
                type="increase-pages",
                description="Consider increasing the number of pages",
                impact="high",
                estimated_reduction=overflow_amount * OVERFLOW.increase_pages_factor,
            ))

        if percentage > OVERFLOW.smaller_text_percent:
            suggestions.append(OverflowSuggestion(
                type="smaller-text",
                description="Reduce text size to fit more content",
                impact="medium",
                estimated_reduction=overflow_amount * OVERFLOW.smaller_text_factor,
            ))

        if self.page.columns < OVERFLOW.max_suggested_columns:
            suggestions.append(OverflowSuggestion(
                type="more-columns",
                description="Add more columns to utilize space better",
                impact="medium",
                estimated_reduction=overflow_amount * OVERFLOW.more_columns_factor,
            ))

        suggestions.append(OverflowSuggestion(
            type="reduce-content",
            description="Remove or shorten some content blocks",
            impact="high",
            estimated_reduction=overflow_amount,
        ))
        return suggestions

    def _used_space(self, columns: List[List[ContentBlock]], heights: dict[str, float]) -> Dimensions:
        tallest = max((sum(heights[b.id] for b in column) for column in columns), default=0.0)
        return Dimensions(
            width=self.content_area.width,
            height=min(tallest, self.content_area.height),
            unit="px",
        )

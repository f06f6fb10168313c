"""Centralized threshold and magic number configuration for the layout engine.

This module contains the ratios, floors and cut-offs used by the geometry,
typography, overflow and prioritization code. Keeping them in one place
makes tuning easier and documents what each value controls.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TypographyThresholds:
    """Font scaling ratios, readability floors and the text-width heuristic."""

    # Scale factors applied to the base font size per element class
    h1_ratio: float = 1.6
    h2_ratio: float = 1.4
    h3_ratio: float = 1.2
    body_ratio: float = 1.0
    small_ratio: float = 0.85
    caption_ratio: float = 0.75

    # Minimum readable sizes (px)
    min_h1: float = 14
    min_h2: float = 12
    min_h3: float = 11
    min_body: float = 9
    min_small: float = 8
    min_caption: float = 8

    avg_char_width_ratio: float = 0.6  # Average glyph width as a fraction of font size
    min_line_height: float = 1.1  # Below this, lines are too tight to read


@dataclass(frozen=True)
class BlockHeightThresholds:
    """Per-type height formula constants (precise pass)."""

    heading_space_above: float = 0.5  # x heading font size
    heading_space_below: float = 0.3  # x heading font size
    paragraph_spacing: float = 0.5  # x body font size
    list_indent_ratio: float = 0.9  # Usable width after bullet indentation
    list_item_spacing: float = 0.2  # x body font size, per item
    table_min_rows: int = 3
    table_chars_per_row: int = 100  # Content-size heuristic for row count
    table_row_padding: float = 4  # px
    table_header_padding: float = 6  # px
    image_width_ratio: float = 0.6  # Default image height as a fraction of column width
    image_max_height: float = 150  # px
    image_caption_lines: float = 1.5  # x caption font size
    default_image_height: float = 100  # px, first-pass estimate


@dataclass(frozen=True)
class OverflowThresholds:
    """Thresholds for overflow suggestions and warnings."""

    # ColumnEngine baseline suggestions (percent of total budget)
    increase_pages_percent: float = 50
    smaller_text_percent: float = 20
    max_suggested_columns: int = 3

    # Precise-pass suggestions
    detailed_pages_percent: float = 20
    detailed_high_impact_percent: float = 50
    low_priority_cutoff: float = 5  # Blocks below this are reduction candidates
    low_priority_share: float = 0.3  # Fraction of low-priority blocks sized for removal

    # Estimated reduction factors per suggestion
    increase_pages_factor: float = 0.8
    smaller_text_factor: float = 0.3
    more_columns_factor: float = 0.4
    detailed_pages_factor: float = 0.9
    detailed_text_factor: float = 0.4
    detailed_columns_factor: float = 0.3

    # Partial fit cut-off search
    sentence_break_ratio: float = 0.8
    word_break_ratio: float = 0.9
    preview_chars: int = 100

    # Warnings
    high_overflow_px: float = 100
    min_comfortable_body_px: float = 10
    min_column_width_px: float = 100
    max_recommended_columns: int = 3
    max_recommended_pages: int = 10

    # Column balancing
    balance_gap_px: float = 50


@dataclass(frozen=True)
class PrioritizationThresholds:
    """Scoring weights and reduction limits for the content prioritizer."""

    base_priority: float = 5
    user_selected_bonus: float = 4
    confidence_weight: float = 2
    value_bonus: dict[str, float] = field(
        default_factory=lambda: {"high": 2, "medium": 1, "low": -1}
    )
    long_content_chars: int = 1000
    long_content_penalty: float = 1
    selected_dependency_bonus: float = 0.5
    min_priority: float = 1
    max_priority: float = 10

    # Educational value heuristic
    high_value_keywords: tuple[str, ...] = (
        "example", "formula", "equation", "theorem", "principle",
        "definition", "concept", "method", "algorithm", "process",
    )
    medium_value_keywords: tuple[str, ...] = (
        "note", "tip", "remember", "important", "key", "summary",
    )
    high_keyword_hits: int = 2
    medium_keyword_hits: int = 2

    # Dependency detection
    dependency_words: int = 5  # Leading words of a block to look for
    dependency_min_word_len: int = 4

    # Reduction planning
    protected_priority: float = 7  # Never removed at or above this
    reduction_buffer: float = 1.2  # Aim a little past the overflow
    cap_tolerance: float = 0.1  # Allowed rounding overshoot of the reduction cap
    compress_min_priority: float = 3
    compress_max_priority: float = 8
    max_compression: float = 0.6
    min_priority_factor: float = 0.2
    min_meaningful_compression: float = 0.05
    type_compression: dict[str, float] = field(
        default_factory=lambda: {
            "paragraph": 0.5,
            "list": 0.4,
            "table": 0.25,
            "heading": 0.15,
            "image": 0.1,
        }
    )
    fallback_min_height: float = 20  # px, when no height is known
    fallback_height_per_char: float = 0.1

    # Impact assessment
    significant_high_value_topics: int = 2
    significant_selected_topics: int = 1
    compromised_ratio: float = 0.4
    reduced_ratio: float = 0.2

    # Intelligent suggestions
    pages_overflow_px: float = 200
    pages_high_impact_px: float = 800
    px_per_extra_page: float = 400
    unselected_priority_ceiling: float = 6
    topic_reduction_min_px: float = 50
    topic_reduction_per_char: float = 0.15
    similar_length_ratio: float = 0.3
    merge_reduction_factor: float = 0.2
    suggested_columns: int = 3


TYPOGRAPHY = TypographyThresholds()
BLOCK_HEIGHTS = BlockHeightThresholds()
OVERFLOW = OverflowThresholds()
PRIORITIZATION = PrioritizationThresholds()

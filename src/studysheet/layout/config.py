"""
Module: layout.config

Purpose:
    Configuration value objects for the layout engine.
    Constructed once per layout session and never mutated; updates build
    a new instance with dataclasses.replace.

Key Classes:
    - Margins: Page margins in millimetres
    - PageGeometryConfig: Paper, orientation, margins and columns
    - TypographyProfile: Text size class, line height and base font size
    - PrioritizationConfig: User selections and reduction limits
    - LayoutConfig: Aggregate of the above plus max pages

Dependencies:
    - dataclasses (std)

Used By:
    - studysheet.layout.geometry: Geometry calculations
    - studysheet.layout.engine: LayoutEngine facade
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Tuple

PaperSize = Literal["a4", "letter", "legal", "a3"]
Orientation = Literal["portrait", "landscape"]
TextSize = Literal["small", "medium", "large"]

PAPER_SIZES: tuple[str, ...] = ("a4", "letter", "legal", "a3")
ORIENTATIONS: tuple[str, ...] = ("portrait", "landscape")
TEXT_SIZES: tuple[str, ...] = ("small", "medium", "large")

DEFAULT_FONT_FAMILY = "system-ui, -apple-system, sans-serif"
DEFAULT_MAX_PAGES = 2


@dataclass(frozen=True)
class Margins:
    """Page margins in millimetres."""

    top: float = 20
    right: float = 15
    bottom: float = 20
    left: float = 15

    def __post_init__(self) -> None:
        for name in ("top", "right", "bottom", "left"):
            if getattr(self, name) < 0:
                raise ValueError(f"margin {name} must be non-negative: {getattr(self, name)}")

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


@dataclass(frozen=True)
class PageGeometryConfig:
    """
    Page geometry for a layout session (immutable).

    Attributes:
        paper_size: a4, letter, legal or a3
        orientation: portrait or landscape
        margins: Page margins (mm)
        columns: Number of text columns per page
        column_gap: Gap between columns (mm)

    Example:
        >>> config = PageGeometryConfig(columns=3)
        >>> config.column_count
        3
    """

    paper_size: PaperSize = "a4"
    orientation: Orientation = "portrait"
    margins: Margins = field(default_factory=Margins)
    columns: int = 2
    column_gap: float = 10

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.paper_size not in PAPER_SIZES:
            raise ValueError(f"Unsupported paper size: {self.paper_size!r}")
        if self.orientation not in ORIENTATIONS:
            raise ValueError(f"Unsupported orientation: {self.orientation!r}")
        if self.columns < 1:
            raise ValueError(f"columns must be positive: {self.columns}")
        if self.column_gap < 0:
            raise ValueError(f"column_gap must be non-negative: {self.column_gap}")

        from .geometry import page_dimensions

        page = page_dimensions(self.paper_size, self.orientation)
        if self.margins.horizontal >= page.width:
            raise ValueError("Margins exceed page width")
        if self.margins.vertical >= page.height:
            raise ValueError("Margins exceed page height")
        if (self.columns - 1) * self.column_gap >= page.width - self.margins.horizontal:
            raise ValueError("Column gaps exceed content width")

    @property
    def column_count(self) -> int:
        return self.columns


@dataclass(frozen=True)
class TypographyProfile:
    """
    Text settings for a layout session (immutable).

    Attributes:
        size_class: small, medium or large
        line_height: Line height multiplier
        font_family: CSS font stack
        base_font_size: Body font size in px before readability clamping
    """

    size_class: TextSize = "medium"
    line_height: float = 1.3
    font_family: str = DEFAULT_FONT_FAMILY
    base_font_size: float = 12

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.size_class not in TEXT_SIZES:
            raise ValueError(f"Unsupported text size: {self.size_class!r}")
        if self.line_height <= 0:
            raise ValueError(f"line_height must be positive: {self.line_height}")
        if self.base_font_size <= 0:
            raise ValueError(f"base_font_size must be positive: {self.base_font_size}")


@dataclass(frozen=True)
class PrioritizationConfig:
    """
    Configuration for content prioritization (immutable).

    Attributes:
        user_selected_topics: Topic ids the user explicitly chose
        max_content_reduction: Upper bound on removed/compressed height,
            as a percentage of total content height
        preserve_high_value_content: Never remove blocks of topics assessed
            as high educational value (compression still allowed)
        maintain_topic_balance: Spread removals across topics instead of
            draining one topic first

    Example:
        >>> config = PrioritizationConfig(user_selected_topics=("topic-1",))
        >>> config.is_selected("topic-1")
        True
    """

    user_selected_topics: Tuple[str, ...] = ()
    max_content_reduction: float = 40
    preserve_high_value_content: bool = True
    maintain_topic_balance: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not 0 <= self.max_content_reduction <= 100:
            raise ValueError(
                f"max_content_reduction must be within [0, 100]: {self.max_content_reduction}"
            )
        # Accept any iterable of ids from callers but store a tuple
        object.__setattr__(self, "user_selected_topics", tuple(self.user_selected_topics))

    @property
    def selected_set(self) -> frozenset[str]:
        return frozenset(self.user_selected_topics)

    def is_selected(self, topic_id: str) -> bool:
        return topic_id in self.selected_set


@dataclass(frozen=True)
class LayoutConfig:
    """
    Complete configuration owned by a LayoutEngine (immutable).

    Attributes:
        page: Page geometry
        text: Typography profile
        max_pages: Page budget for the content
        prioritization: Prioritization settings for topic-aware analysis
    """

    page: PageGeometryConfig = field(default_factory=PageGeometryConfig)
    text: TypographyProfile = field(default_factory=TypographyProfile)
    max_pages: int = DEFAULT_MAX_PAGES
    prioritization: PrioritizationConfig = field(default_factory=PrioritizationConfig)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be positive: {self.max_pages}")

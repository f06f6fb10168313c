"""
Module: layout.typography

Purpose:
    Text size profiles, the derived font-size table (clamped to
    minimum-readable floors), a cheap closed-form text height estimate,
    readability validation and optimal size search.

Key Functions:
    - text_profile(): TypographyProfile for a size class
    - font_size_table(): Per-element font sizes with readability floors
    - estimate_text_height(): Wrapped text height without text shaping
    - validate_readability(): Readability warnings for a profile
    - suggest_optimal_text_size(): Largest size class that fits a budget

Dependencies:
    - layout.thresholds: Ratios and floors

Used By:
    - studysheet.layout.column_engine
    - studysheet.layout.overflow
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .config import DEFAULT_FONT_FAMILY, TextSize, TypographyProfile
from .models import LayoutWarning
from .thresholds import TYPOGRAPHY

_SIZE_PROFILES: dict[str, TypographyProfile] = {
    "small": TypographyProfile("small", 1.2, DEFAULT_FONT_FAMILY, 10),
    "medium": TypographyProfile("medium", 1.3, DEFAULT_FONT_FAMILY, 12),
    "large": TypographyProfile("large", 1.4, DEFAULT_FONT_FAMILY, 14),
}

# Largest first, for the optimal size search
_SIZE_ORDER: tuple[TextSize, ...] = ("large", "medium", "small")


@dataclass(frozen=True)
class FontSizeTable:
    """Font sizes in px per element class. Every entry is >= its floor."""

    h1: float
    h2: float
    h3: float
    body: float
    small: float
    caption: float

    def as_dict(self) -> dict[str, float]:
        return {
            "h1": self.h1,
            "h2": self.h2,
            "h3": self.h3,
            "body": self.body,
            "small": self.small,
            "caption": self.caption,
        }


def text_profile(size: TextSize) -> TypographyProfile:
    """Get the typography profile for a text size class."""
    try:
        return _SIZE_PROFILES[size]
    except KeyError:
        raise ValueError(f"Unsupported text size: {size!r}") from None


def font_size_table(profile: TypographyProfile) -> FontSizeTable:
    """
    Scale the base font size per element class and clamp to the floors.

    Example:
        >>> font_size_table(text_profile("medium")).body
        12.0
        >>> font_size_table(TypographyProfile(base_font_size=2)).body
        9
    """
    base = profile.base_font_size
    t = TYPOGRAPHY
    return FontSizeTable(
        h1=max(base * t.h1_ratio, t.min_h1),
        h2=max(base * t.h2_ratio, t.min_h2),
        h3=max(base * t.h3_ratio, t.min_h3),
        body=max(base * t.body_ratio, t.min_body),
        small=max(base * t.small_ratio, t.min_small),
        caption=max(base * t.caption_ratio, t.min_caption),
    )


def estimate_text_height(
    text: str,
    font_size: float,
    line_height: float,
    column_width: float,
) -> float:
    """
    Estimate the rendered height of wrapped text.

    chars per line = column width / (0.6 x font size); lines = ceil(length /
    chars per line). Empty text still occupies one line so nothing ever
    measures as zero height.

    Args:
        text: Text to measure
        font_size: Font size in px
        line_height: Line height multiplier
        column_width: Available width in px

    Returns:
        Estimated height in px
    """
    return estimate_length_height(len(text), font_size, line_height, column_width)


def estimate_length_height(
    length: int,
    font_size: float,
    line_height: float,
    column_width: float,
) -> float:
    """Same estimate as estimate_text_height, from a character count."""
    avg_char_width = font_size * TYPOGRAPHY.avg_char_width_ratio
    if avg_char_width <= 0:
        return 0.0
    chars_per_line = max(1, math.floor(column_width / avg_char_width))
    lines = max(1, math.ceil(length / chars_per_line))
    return lines * font_size * line_height


def validate_readability(profile: TypographyProfile) -> list[LayoutWarning]:
    """Check a profile against the readability floors."""
    warnings: list[LayoutWarning] = []
    sizes = font_size_table(profile)

    if profile.base_font_size < TYPOGRAPHY.min_body:
        warnings.append(LayoutWarning(
            type="readability",
            severity="high",
            message=f"Body text size ({sizes.body:g}px) is below minimum readable size",
            affected_elements=("body", "paragraph"),
        ))

    if profile.base_font_size * TYPOGRAPHY.h1_ratio < TYPOGRAPHY.min_h1:
        warnings.append(LayoutWarning(
            type="readability",
            severity="medium",
            message="Heading sizes may be too small for clear hierarchy",
            affected_elements=("h1", "h2", "h3"),
        ))

    if profile.line_height < TYPOGRAPHY.min_line_height:
        warnings.append(LayoutWarning(
            type="readability",
            severity="medium",
            message="Line height is too tight, may affect readability",
            affected_elements=("all-text",),
        ))

    return warnings


def text_css_variables(profile: TypographyProfile) -> dict[str, str]:
    """CSS custom properties for the typography profile."""
    sizes = font_size_table(profile)
    variables = {
        "--font-family": profile.font_family,
        "--line-height": f"{profile.line_height:g}",
    }
    for name, value in sizes.as_dict().items():
        variables[f"--font-size-{name}"] = f"{round(value, 2):g}px"
    return variables


def suggest_optimal_text_size(
    content_length: int,
    available_height: float,
    column_width: float,
) -> TextSize:
    """
    Find the largest size class whose body text fits the available height.

    Falls back to "small" when nothing fits.
    """
    for size in _SIZE_ORDER:
        profile = _SIZE_PROFILES[size]
        height = estimate_length_height(
            content_length,
            font_size_table(profile).body,
            profile.line_height,
            column_width,
        )
        if height <= available_height:
            return size
    return "small"

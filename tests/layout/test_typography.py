"""
Unit tests for typography profiles, font sizes and text height estimates.
"""

import pytest

from studysheet.layout.config import TEXT_SIZES, TypographyProfile
from studysheet.layout.thresholds import TYPOGRAPHY
from studysheet.layout.typography import (
    estimate_text_height,
    font_size_table,
    suggest_optimal_text_size,
    text_css_variables,
    text_profile,
    validate_readability,
)

# Default A4 two-column width in px
COLUMN_WIDTH = 85 * 96 / 25.4

FLOORS = {
    "h1": TYPOGRAPHY.min_h1,
    "h2": TYPOGRAPHY.min_h2,
    "h3": TYPOGRAPHY.min_h3,
    "body": TYPOGRAPHY.min_body,
    "small": TYPOGRAPHY.min_small,
    "caption": TYPOGRAPHY.min_caption,
}


class TestTextProfiles:
    @pytest.mark.parametrize("size, base, line_height", [
        ("small", 10, 1.2),
        ("medium", 12, 1.3),
        ("large", 14, 1.4),
    ])
    def test_text_profile_when_size_class_then_standard_values(self, size, base, line_height):
        profile = text_profile(size)

        assert profile.size_class == size
        assert profile.base_font_size == base
        assert profile.line_height == line_height

    def test_text_profile_when_unknown_then_raises(self):
        with pytest.raises(ValueError):
            text_profile("huge")


class TestFontSizeTable:
    def test_font_sizes_when_medium_then_scaled_from_base(self):
        sizes = font_size_table(text_profile("medium"))

        assert sizes.h1 == pytest.approx(19.2)
        assert sizes.h2 == pytest.approx(16.8)
        assert sizes.body == pytest.approx(12.0)
        assert sizes.small == pytest.approx(10.2)
        assert sizes.caption == pytest.approx(9.0)

    @pytest.mark.parametrize("base", [0.1, 1, 5, 8, 12, 40])
    def test_font_sizes_when_any_base_then_never_below_floor(self, base):
        sizes = font_size_table(TypographyProfile(base_font_size=base)).as_dict()

        for name, floor in FLOORS.items():
            assert sizes[name] >= floor

    def test_font_sizes_when_tiny_base_then_clamped_to_floors(self):
        sizes = font_size_table(TypographyProfile(base_font_size=2))

        assert sizes.as_dict() == FLOORS


class TestTextHeight:
    def test_estimate_when_empty_text_then_one_line(self):
        assert estimate_text_height("", 12, 1.3, COLUMN_WIDTH) == pytest.approx(15.6)

    def test_estimate_when_wraps_then_counts_lines(self):
        # 44 characters per line at 12px in an 85mm column
        assert estimate_text_height("x" * 100, 12, 1.3, COLUMN_WIDTH) == pytest.approx(3 * 15.6)

    def test_estimate_when_column_narrower_than_glyph_then_one_char_per_line(self):
        assert estimate_text_height("abc", 12, 1.0, 1) == pytest.approx(36.0)

    def test_estimate_when_more_text_then_never_shorter(self):
        short = estimate_text_height("x" * 50, 12, 1.3, COLUMN_WIDTH)
        longer = estimate_text_height("x" * 500, 12, 1.3, COLUMN_WIDTH)

        assert longer >= short


class TestReadability:
    def test_validate_when_standard_profiles_then_no_warnings(self):
        for size in TEXT_SIZES:
            assert validate_readability(text_profile(size)) == []

    def test_validate_when_small_base_then_body_and_heading_warnings(self):
        # Arrange
        profile = TypographyProfile(base_font_size=8)

        # Act
        warnings = validate_readability(profile)

        # Assert
        severities = {w.affected_elements[0]: w.severity for w in warnings}
        assert severities == {"body": "high", "h1": "medium"}
        assert all(w.type == "readability" for w in warnings)

    def test_validate_when_tight_line_height_then_medium_warning(self):
        warnings = validate_readability(TypographyProfile(line_height=1.0))

        assert len(warnings) == 1
        assert warnings[0].severity == "medium"
        assert warnings[0].affected_elements == ("all-text",)


class TestOptimalSize:
    def test_suggest_when_plenty_of_room_then_large(self):
        assert suggest_optimal_text_size(100, 1000, COLUMN_WIDTH) == "large"

    def test_suggest_when_nothing_fits_then_small(self):
        assert suggest_optimal_text_size(100_000, 100, COLUMN_WIDTH) == "small"

    def test_suggest_when_only_medium_fits_then_medium(self):
        # 1000 chars: large = 27 lines x 19.6px = 529.2, medium = 23 x 15.6 = 358.8
        assert suggest_optimal_text_size(1000, 400, COLUMN_WIDTH) == "medium"


class TestTextCss:
    def test_text_css_when_medium_then_px_font_sizes(self):
        variables = text_css_variables(text_profile("medium"))

        assert variables["--font-size-body"] == "12px"
        assert variables["--font-size-h1"] == "19.2px"
        assert variables["--line-height"] == "1.3"
        assert variables["--font-family"].startswith("system-ui")

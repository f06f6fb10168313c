"""
Unit tests for the OverflowDetector precise pass.

Covers the block height formulas, merged overflow analysis, the
per-block fit report, warnings and the prioritization-aware analysis.
"""

import pytest

from studysheet.layout.config import (
    LayoutConfig,
    PageGeometryConfig,
    PrioritizationConfig,
    TypographyProfile,
)
from studysheet.layout.models import ContentReductionPlan, PrioritizedOverflowAnalysis
from studysheet.layout.overflow import OverflowDetector, content_preview, estimate_cutoff_point

CONTENT_HEIGHT = 257 * 96 / 25.4


@pytest.fixture
def detector():
    return OverflowDetector(LayoutConfig())


class TestBlockHeights:
    """Type-specific height formulas at the default medium profile."""

    def test_paragraph_when_empty_then_one_line_plus_spacing(self, detector, block_factory):
        assert detector.block_height(block_factory(content="")) == pytest.approx(21.6)

    def test_heading_when_short_then_h2_line_plus_margins(self, detector, block_factory):
        block = block_factory(block_type="heading", content="Title")

        assert detector.block_height(block) == pytest.approx(21.84 + 13.44)

    def test_list_when_blank_lines_then_only_items_count(self, detector, block_factory):
        block = block_factory(block_type="list", content="a\nb\n\n")

        assert detector.block_height(block) == pytest.approx(2 * 18.0)

    def test_list_when_empty_then_one_item(self, detector, block_factory):
        block = block_factory(block_type="list", content="")

        assert detector.block_height(block) == pytest.approx(18.0)

    def test_table_when_short_then_minimum_three_rows(self, detector, block_factory):
        block = block_factory(block_type="table", content="")

        assert detector.block_height(block) == pytest.approx(21.6 + 3 * 17.26)

    def test_table_when_long_then_rows_from_length(self, detector, block_factory):
        block = block_factory(block_type="table", content="x" * 450)

        assert detector.block_height(block) == pytest.approx(21.6 + 5 * 17.26)

    def test_image_when_caption_then_adds_caption_lines(self, detector, block_factory):
        captioned = block_factory(block_type="image", content="Figure 1")
        bare = block_factory(block_type="image", content="")

        assert detector.block_height(captioned) == pytest.approx(150 + 13.5)
        assert detector.block_height(bare) == pytest.approx(150)

    def test_height_when_override_then_wins(self, detector, block_factory):
        assert detector.block_height(block_factory(block_type="table", height=12)) == 12


class TestAnalyzeOverflow:
    def test_analyze_when_two_short_paragraphs_then_no_overflow(self, detector, block_factory):
        analysis = detector.analyze_overflow([block_factory("a"), block_factory("b")])

        assert analysis.has_overflow is False
        assert analysis.overflow_amount == 0
        assert analysis.affected_blocks == ()
        assert analysis.suggestions == ()

    def test_analyze_when_thirty_long_paragraphs_then_overflow_with_suggestions(
        self, detector, long_paragraphs
    ):
        analysis = detector.analyze_overflow(long_paragraphs)

        assert analysis.has_overflow is True
        assert len(analysis.affected_blocks) > 0
        assert analysis.suggestion_types() & {"increase-pages", "smaller-text"}

    def test_analyze_when_merged_then_one_suggestion_per_type_most_impactful_first(
        self, detector, long_paragraphs
    ):
        analysis = detector.analyze_overflow(long_paragraphs)

        types = [s.type for s in analysis.suggestions]
        assert len(types) == len(set(types))
        assert analysis.suggestions[0].impact == "high"

    def test_analyze_when_called_twice_then_identical(self, detector, long_paragraphs):
        assert detector.analyze_overflow(long_paragraphs) == detector.analyze_overflow(long_paragraphs)

    def test_analyze_when_blocks_appended_then_overflow_never_decreases(self, detector, long_paragraphs):
        amounts = [
            detector.analyze_overflow(long_paragraphs[:count]).overflow_amount
            for count in range(1, len(long_paragraphs) + 1)
        ]

        assert amounts == sorted(amounts)

    def test_analyze_when_more_pages_then_overflow_not_larger(self, long_paragraphs):
        one_page = OverflowDetector(LayoutConfig(max_pages=1)).analyze_overflow(long_paragraphs)
        three_pages = OverflowDetector(LayoutConfig(max_pages=3)).analyze_overflow(long_paragraphs)

        assert three_pages.overflow_amount <= one_page.overflow_amount

    def test_analyze_when_low_priority_blocks_then_reduce_content_offered(self, block_factory):
        # Arrange
        detector = OverflowDetector(LayoutConfig(max_pages=1))
        blocks = [block_factory(f"b{i}", priority=2, height=400) for i in range(4)]

        # Act
        analysis = detector.analyze_overflow(blocks)

        # Assert
        reduce = [s for s in analysis.suggestions if s.type == "reduce-content"]
        assert len(reduce) == 1
        assert reduce[0].impact == "high"

    def test_analyze_when_empty_then_no_overflow(self, detector):
        analysis = detector.analyze_overflow([])

        assert analysis.has_overflow is False
        assert analysis.overflow_amount == 0


class TestDetailedOverflowInfo:
    def test_detailed_when_block_straddles_budget_then_partial_fit(self, block_factory):
        # Arrange
        detector = OverflowDetector(LayoutConfig(max_pages=1))
        blocks = [
            block_factory("first", height=600),
            block_factory("second", content="alpha beta gamma delta " * 10, height=600),
            block_factory("third", height=100),
        ]

        # Act
        info = detector.detailed_overflow_info(blocks)

        # Assert
        fits = {entry.block_id: entry for entry in info.affected_content}
        assert fits["first"].will_fit is True
        assert fits["second"].will_fit is False
        assert fits["third"].partial_fit is None
        partial = fits["second"].partial_fit
        assert partial.fitting_percentage == pytest.approx((CONTENT_HEIGHT - 600) / 600)
        assert blocks[1].content.startswith(partial.cutoff_point)
        assert [entry.block_id for entry in info.partial_fits()] == ["second"]

    def test_detailed_when_overflow_then_utilization_full(self, block_factory):
        detector = OverflowDetector(LayoutConfig(max_pages=1))

        info = detector.detailed_overflow_info([block_factory("a", height=2000)])

        assert info.overflow_details.total_content_height == 2000
        assert info.overflow_details.overflow_amount == pytest.approx(2000 - CONTENT_HEIGHT)
        assert info.space_utilization.efficiency == pytest.approx(1.0)
        assert info.space_utilization.wasted_space == 0

    def test_detailed_when_fits_then_reports_waste(self, block_factory):
        detector = OverflowDetector(LayoutConfig(max_pages=1))

        info = detector.detailed_overflow_info([block_factory("a", height=100)])

        assert info.overflow_details.overflow_percentage == 0
        assert info.space_utilization.wasted_space == pytest.approx(CONTENT_HEIGHT - 100)
        assert info.affected_content[0].content_preview == "Short paragraph."


class TestCutoffPoint:
    def test_cutoff_when_sentence_end_near_cut_then_sentence(self):
        assert estimate_cutoff_point("One two. Three four five six", 0.3) == "One two."

    def test_cutoff_when_no_sentence_then_word_boundary(self):
        assert estimate_cutoff_point("alpha beta gamma delta", 0.5) == "alpha beta"

    def test_cutoff_when_sentence_too_early_then_word_boundary(self):
        assert estimate_cutoff_point("A. bcdefghijklmnop qrs", 0.9) == "A. bcdefghijklmnop"

    def test_cutoff_when_single_word_then_hard_cut(self):
        assert estimate_cutoff_point("abcdefghij", 0.5) == "abcde"

    def test_cutoff_when_word_boundary_far_from_cut_then_hard_cut(self):
        content = "a " + "x" * 98

        assert estimate_cutoff_point(content, 0.5) == content[:50]

    def test_preview_when_long_then_truncated_with_ellipsis(self):
        assert content_preview("x" * 150) == "x" * 100 + "..."
        assert content_preview("short") == "short"


class TestLayoutWarnings:
    def test_warnings_when_large_overflow_then_high_severity(self, block_factory):
        detector = OverflowDetector(LayoutConfig(max_pages=1))

        warnings = detector.generate_layout_warnings([block_factory("a", height=2000)])

        overflow = [w for w in warnings if w.type == "overflow"]
        assert overflow[0].severity == "high"
        assert overflow[0].affected_elements == ("a",)

    def test_warnings_when_narrow_columns_then_spacing(self, block_factory):
        config = LayoutConfig(page=PageGeometryConfig(columns=6, column_gap=5))

        warnings = OverflowDetector(config).generate_layout_warnings([block_factory()])

        assert [w.type for w in warnings] == ["spacing"]

    def test_warnings_when_small_body_then_readability(self, block_factory):
        config = LayoutConfig(text=TypographyProfile(base_font_size=9))

        warnings = OverflowDetector(config).generate_layout_warnings([block_factory()])

        assert [(w.type, w.severity) for w in warnings] == [("readability", "high")]


class TestPrioritizedAnalysis:
    """analyze_overflow_with_prioritization"""

    def test_prioritized_when_no_topics_then_plain_fields_only(self, detector, long_paragraphs):
        analysis = detector.analyze_overflow_with_prioritization(long_paragraphs)

        assert isinstance(analysis, PrioritizedOverflowAnalysis)
        assert analysis.has_overflow is True
        assert analysis.priorities == ()
        assert analysis.reduction_plan is None

    def test_prioritized_when_no_overflow_then_priorities_and_empty_plan(
        self, detector, block_factory, topic_factory
    ):
        blocks = [block_factory("a", topic_id="topic-1")]

        analysis = detector.analyze_overflow_with_prioritization(blocks, [topic_factory("topic-1")])

        assert analysis.has_overflow is False
        assert [p.topic_id for p in analysis.priorities] == ["topic-1"]
        assert analysis.reduction_plan == ContentReductionPlan()
        assert analysis.intelligent_suggestions == ()

    def test_prioritized_when_selected_topic_then_its_block_protected(self, block_factory, topic_factory):
        # Arrange
        config = LayoutConfig(
            max_pages=1,
            prioritization=PrioritizationConfig(user_selected_topics=("topic-1",)),
        )
        detector = OverflowDetector(config)
        blocks = [
            block_factory("high", priority=9, height=1500, topic_id="topic-1"),
            block_factory("low", priority=2, height=800, topic_id="topic-2"),
        ]
        topics = [
            topic_factory("topic-1", confidence=0.9),
            topic_factory("topic-2", confidence=0.2),
        ]

        # Act
        analysis = detector.analyze_overflow_with_prioritization(blocks, topics)

        # Assert
        plan = analysis.reduction_plan
        assert "high" not in plan.removable_blocks
        assert "low" in plan.removable_blocks
        assert analysis.intelligent_suggestions
        assert set(analysis.intelligent_suggestions) <= set(analysis.suggestions)

    @pytest.mark.parametrize("max_reduction", [10, 25, 40, 60])
    def test_prioritized_when_any_cap_then_savings_within_cap(
        self, block_factory, topic_factory, max_reduction
    ):
        # Arrange
        config = LayoutConfig(
            max_pages=1,
            prioritization=PrioritizationConfig(max_content_reduction=max_reduction),
        )
        detector = OverflowDetector(config)
        blocks = [
            block_factory(f"b{i}", height=50, topic_id=f"topic-{i % 3 + 1}")
            for i in range(40)
        ]
        topics = [topic_factory(f"topic-{n}") for n in (1, 2, 3)]

        # Act
        plan = detector.analyze_overflow_with_prioritization(blocks, topics).reduction_plan

        # Assert
        total = 40 * 50
        assert plan.estimated_space_saved <= total * max_reduction / 100 * 1.1
        assert plan.removable_blocks

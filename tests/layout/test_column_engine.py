"""
Unit tests for the ColumnEngine first-pass flow.
"""

import logging

import pytest

from studysheet.layout.column_engine import ColumnEngine
from studysheet.layout.config import PageGeometryConfig, TypographyProfile
from studysheet.layout.typography import text_profile

CONTENT_HEIGHT = 257 * 96 / 25.4


@pytest.fixture
def engine():
    return ColumnEngine(PageGeometryConfig(), text_profile("medium"))


class TestBlockHeights:
    def test_estimate_when_override_then_used_verbatim(self, engine, block_factory):
        assert engine.estimate_block_height(block_factory(height=42)) == 42

    def test_estimate_when_image_then_fixed_default(self, engine, block_factory):
        assert engine.estimate_block_height(block_factory(block_type="image", content="")) == 100

    def test_estimate_when_heading_then_measured_at_h2(self, engine, block_factory):
        # 16.8px x 1.3 line height, one line
        block = block_factory(block_type="heading", content="Forces")

        assert engine.estimate_block_height(block) == pytest.approx(21.84)

    def test_estimate_when_paragraph_then_body_size(self, engine, block_factory):
        assert engine.estimate_block_height(block_factory(content="x" * 100)) == pytest.approx(46.8)


class TestDistribution:
    def test_distribute_when_priorities_differ_then_highest_placed_first(self, engine, block_factory):
        # Arrange
        blocks = [
            block_factory("low", priority=1, height=100),
            block_factory("mid", priority=5, height=100),
            block_factory("top", priority=9, height=100),
        ]

        # Act
        columns = engine.distribute(blocks, max_pages=1)

        # Assert: ties on slot height go to the lowest index
        assert [[b.id for b in column] for column in columns] == [["top", "low"], ["mid"]]

    def test_distribute_when_equal_priority_then_input_order_kept(self, engine, block_factory):
        blocks = [block_factory(f"b{i}", height=10) for i in range(4)]

        columns = engine.distribute(blocks, max_pages=1)

        assert [b.id for b in columns[0]] == ["b0", "b2"]
        assert [b.id for b in columns[1]] == ["b1", "b3"]

    def test_distribute_when_columns_fill_then_spills_onto_next_page(self, engine, block_factory):
        blocks = [block_factory(f"b{i}", height=900) for i in range(4)]

        columns = engine.distribute(blocks, max_pages=2)

        assert [[b.id for b in column] for column in columns] == [["b0"], ["b1"], ["b2"], ["b3"]]

    def test_distribute_when_nothing_fits_then_forced_and_logged(self, engine, block_factory, caplog):
        blocks = [block_factory("huge", height=5000)]

        with caplog.at_level(logging.WARNING, logger="studysheet.layout.column_engine"):
            columns = engine.distribute(blocks, max_pages=1)

        assert [b.id for b in columns[0]] == ["huge"]
        assert "fits no slot" in caplog.text

    def test_distribute_when_input_given_then_not_mutated(self, engine, block_factory):
        blocks = [block_factory("a", priority=1), block_factory("b", priority=9)]
        snapshot = list(blocks)

        engine.distribute(blocks)

        assert blocks == snapshot


class TestCalculateLayout:
    def test_layout_when_two_short_paragraphs_then_no_overflow(self, engine, block_factory):
        blocks = [block_factory("a"), block_factory("b")]

        layout = engine.calculate_layout(blocks, max_pages=2)

        assert layout.overflow.has_overflow is False
        assert layout.overflow.overflow_amount == 0
        assert layout.page_breaks == (2,)
        assert len(layout.columns) == 4
        assert layout.content_blocks == tuple(blocks)

    def test_layout_when_block_exceeds_column_then_affected(self, engine, block_factory):
        blocks = [block_factory("huge", height=5000)]

        layout = engine.calculate_layout(blocks, max_pages=1)

        assert layout.overflow.has_overflow is True
        assert layout.overflow.affected_blocks == ("huge",)
        assert layout.overflow.overflow_amount == pytest.approx(5000 - 2 * CONTENT_HEIGHT)

    def test_layout_when_large_overflow_then_baseline_suggestions(self, engine, block_factory):
        blocks = [block_factory(f"b{i}", height=900) for i in range(6)]

        layout = engine.calculate_layout(blocks, max_pages=1)

        # 5400px against 1942px is well beyond both percentage thresholds
        assert layout.overflow.suggestion_types() == {
            "increase-pages", "smaller-text", "more-columns", "reduce-content",
        }

    def test_used_space_when_tall_column_then_capped_at_content_height(self, engine, block_factory):
        layout = engine.calculate_layout([block_factory("huge", height=5000)], max_pages=1)

        assert layout.used_space.height == pytest.approx(CONTENT_HEIGHT)
        assert layout.used_space.unit == "px"

    def test_page_breaks_when_three_pages_then_every_column_count(self, engine):
        assert engine.page_breaks(3) == (2, 4)
        assert engine.page_breaks(1) == ()


class TestBalanceColumns:
    def test_balance_when_gap_large_then_moves_trailing_block(self, engine, block_factory):
        # Arrange
        a = block_factory("a", height=300)
        b = block_factory("b", height=200)

        # Act
        balanced = engine.balance_columns([[a, b], []])

        # Assert
        assert balanced == [[a], [b]]

    def test_balance_when_gap_small_then_unchanged(self, engine, block_factory):
        columns = [[block_factory("a", height=100)], [block_factory("b", height=80)]]

        assert engine.balance_columns(columns) == columns

    def test_balance_when_single_column_then_unchanged(self, block_factory):
        engine = ColumnEngine(PageGeometryConfig(columns=1), TypographyProfile())
        columns = [[block_factory("a", height=300)]]

        assert engine.balance_columns(columns) == columns

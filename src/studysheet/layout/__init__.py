"""
Module: studysheet.layout

Purpose:
    Pagination and overflow management for printable study sheets.
    Packs content blocks into a multi-column, multi-page canvas, detects
    overflow and plans the least damaging reduction.

Key Functions:
    - create_layout_engine(): Engine from LayoutConfig fields
    - create_content_block(), create_content_blocks(): Block helpers

Key Classes:
    - LayoutEngine: Facade owning the active configuration
    - ColumnEngine: First-pass column flow
    - OverflowDetector: Precise overflow analysis
    - ContentPrioritizer: Topic priorities and reduction plans

Dependencies:
    - reportlab: Paper sizes and units
    - numpy: Slot selection and fit simulation

Used By:
    - scripts/analyze_layout.py
    - Renderer collaborators
"""

from .config import (
    LayoutConfig,
    Margins,
    PageGeometryConfig,
    PrioritizationConfig,
    TypographyProfile,
)
from .models import (
    BlockFitInfo,
    CompressibleBlock,
    ContentPriority,
    ContentReductionPlan,
    DetailedOverflowInfo,
    Dimensions,
    ImpactAssessment,
    LayoutCalculation,
    LayoutWarning,
    OverflowAnalysis,
    OverflowSuggestion,
    PrioritizedOverflowAnalysis,
)
from .column_engine import ColumnEngine
from .overflow import OverflowDetector
from .prioritizer import ContentPrioritizer, EducationalValueScorer, KeywordValueScorer
from .engine import (
    LayoutEngine,
    content_block_from_html,
    create_content_block,
    create_content_blocks,
    create_layout_engine,
)

__all__ = [
    # Config
    "LayoutConfig",
    "Margins",
    "PageGeometryConfig",
    "PrioritizationConfig",
    "TypographyProfile",
    # Models
    "BlockFitInfo",
    "CompressibleBlock",
    "ContentPriority",
    "ContentReductionPlan",
    "DetailedOverflowInfo",
    "Dimensions",
    "ImpactAssessment",
    "LayoutCalculation",
    "LayoutWarning",
    "OverflowAnalysis",
    "OverflowSuggestion",
    "PrioritizedOverflowAnalysis",
    # Engines
    "ColumnEngine",
    "OverflowDetector",
    "ContentPrioritizer",
    "EducationalValueScorer",
    "KeywordValueScorer",
    "LayoutEngine",
    # Functions
    "create_layout_engine",
    "create_content_block",
    "create_content_blocks",
    "content_block_from_html",
]

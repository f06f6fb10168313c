"""
Module: layout.models

Purpose:
    Result models returned by the layout engine to its callers and to the
    renderer collaborators. Immutable dataclasses, recomputed on every call.

Key Classes:
    - Dimensions: Width/height with a unit
    - OverflowSuggestion, OverflowAnalysis: Overflow verdict + remedies
    - LayoutWarning: Overflow/readability/spacing warning
    - LayoutCalculation: Column distribution result
    - DetailedOverflowInfo: Per-block fit report
    - ContentPriority, ContentReductionPlan: Prioritization results
    - PrioritizedOverflowAnalysis: Overflow analysis + reduction plan

Dependencies:
    - dataclasses (std)

Used By:
    - All studysheet.layout engines
    - studysheet.core.utils.serialization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from studysheet.core.models import BlockType, ContentBlock

SuggestionType = Literal["reduce-content", "increase-pages", "smaller-text", "more-columns"]
Impact = Literal["low", "medium", "high"]
WarningType = Literal["overflow", "readability", "spacing"]
EducationalValue = Literal["high", "medium", "low"]
ValueLoss = Literal["minimal", "moderate", "significant"]
Coherence = Literal["maintained", "reduced", "compromised"]

IMPACT_ORDER: dict[str, int] = {"low": 1, "medium": 2, "high": 3}
VALUE_ORDER: dict[str, int] = {"low": 1, "medium": 2, "high": 3}


@dataclass(frozen=True)
class Dimensions:
    """Width/height pair with a unit. Always derived, never mutated."""

    width: float
    height: float
    unit: Literal["mm", "in", "px"] = "mm"


# ─────────────────────────────────────────────────────────────────────────────
# Overflow
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class OverflowSuggestion:
    """A remedy for overflow with its estimated saving in px."""

    type: SuggestionType
    description: str
    impact: Impact
    estimated_reduction: float


@dataclass(frozen=True)
class OverflowAnalysis:
    """
    Overflow verdict for a set of blocks.

    Attributes:
        has_overflow: True when content exceeds the page budget
        overflow_amount: Excess height in px (0 when it fits)
        affected_blocks: Ids of blocks that cross the budget
        suggestions: Remedies, most impactful first
    """

    has_overflow: bool
    overflow_amount: float
    affected_blocks: tuple[str, ...] = ()
    suggestions: tuple[OverflowSuggestion, ...] = ()

    @classmethod
    def empty(cls) -> OverflowAnalysis:
        return cls(has_overflow=False, overflow_amount=0.0)

    def suggestion_types(self) -> set[str]:
        return {s.type for s in self.suggestions}


@dataclass(frozen=True)
class LayoutWarning:
    """Advisory warning for renderers and users."""

    type: WarningType
    severity: Impact
    message: str
    affected_elements: tuple[str, ...] = ()


@dataclass(frozen=True)
class LayoutCalculation:
    """
    Result of distributing blocks over the column slots.

    Attributes:
        available_space: Content area of one page (px)
        used_space: Content width x height of the tallest column (capped)
        content_blocks: Blocks as supplied by the caller
        overflow: First-pass overflow estimate
        page_breaks: Slot index at which each subsequent page starts
        columns: Block ids per slot, slot = page * columns + column
    """

    available_space: Dimensions
    used_space: Dimensions
    content_blocks: tuple[ContentBlock, ...]
    overflow: OverflowAnalysis
    page_breaks: tuple[int, ...]
    columns: tuple[tuple[str, ...], ...] = ()


@dataclass(frozen=True)
class PartialFit:
    """How much of a straddling block still fits, and where it is cut."""

    fitting_percentage: float
    cutoff_point: str


@dataclass(frozen=True)
class BlockFitInfo:
    """Per-block entry of a detailed overflow report."""

    block_id: str
    block_type: BlockType
    content_preview: str
    estimated_height: float
    priority: float
    will_fit: bool
    partial_fit: Optional[PartialFit] = None


@dataclass(frozen=True)
class OverflowDetails:
    total_content_height: float
    available_height: float
    overflow_amount: float
    overflow_percentage: float


@dataclass(frozen=True)
class SpaceUtilization:
    """Used/available/wasted height in px and efficiency in [0, 1]."""

    used_space: float
    available_space: float
    wasted_space: float
    efficiency: float


@dataclass(frozen=True)
class DetailedOverflowInfo:
    overflow_details: OverflowDetails
    affected_content: tuple[BlockFitInfo, ...]
    space_utilization: SpaceUtilization

    def partial_fits(self) -> list[BlockFitInfo]:
        return [info for info in self.affected_content if info.partial_fit is not None]


# ─────────────────────────────────────────────────────────────────────────────
# Prioritization
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContentPriority:
    """
    Derived priority of a topic (recomputed every call).

    Attributes:
        topic_id: Topic identifier
        priority: Score in [1, 10]
        user_selected: Topic was explicitly chosen by the user
        content_length: Topic plus subtopic content length (chars)
        educational_value: Heuristic high/medium/low classification
        dependencies: Topic ids this topic's content refers to
    """

    topic_id: str
    priority: float
    user_selected: bool
    content_length: int
    educational_value: EducationalValue
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class CompressibleBlock:
    """A block to shorten, with the height the shortening is expected to free."""

    block_id: str
    original_length: int
    target_length: int
    compression_ratio: float
    space_saved: float = 0.0


@dataclass(frozen=True)
class ImpactAssessment:
    topics_affected: tuple[str, ...] = ()
    educational_value_loss: ValueLoss = "minimal"
    content_coherence: Coherence = "maintained"


@dataclass(frozen=True)
class ContentReductionPlan:
    """
    Bounded set of removals and compressions aimed at closing an overflow.

    ``estimated_space_saved`` is a reported fact, not a guarantee: callers
    must compare it with the overflow amount themselves.
    """

    removable_blocks: tuple[str, ...] = ()
    compressible_blocks: tuple[CompressibleBlock, ...] = ()
    estimated_space_saved: float = 0.0
    impact_assessment: ImpactAssessment = field(default_factory=ImpactAssessment)

    @property
    def is_empty(self) -> bool:
        return not self.removable_blocks and not self.compressible_blocks

    def resolves(self, overflow_amount: float) -> bool:
        return self.estimated_space_saved >= overflow_amount


@dataclass(frozen=True)
class PrioritizedOverflowAnalysis(OverflowAnalysis):
    """OverflowAnalysis extended with the topic-aware reduction results."""

    priorities: tuple[ContentPriority, ...] = ()
    reduction_plan: Optional[ContentReductionPlan] = None
    intelligent_suggestions: tuple[OverflowSuggestion, ...] = ()

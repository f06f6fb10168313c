"""
Module: layout.prioritizer

Purpose:
    Turn topic metadata (user selection, extraction confidence, heuristic
    educational value, inter-topic references) into per-topic priorities,
    derive a bounded reduction plan that removes or compresses the least
    valuable blocks first, assess its impact and phrase suggestions.

Key Classes:
    - EducationalValueScorer: Pluggable (topic) -> ValueAssessment
    - KeywordValueScorer: Default keyword/structure heuristic
    - ContentPrioritizer: Priorities, reduction plan, suggestions

Key Functions:
    - resolve_topic_id(): Block -> topic association

Dependencies:
    - layout.config: PrioritizationConfig
    - layout.thresholds: Scoring weights and limits

Used By:
    - studysheet.layout.overflow: analyze_overflow_with_prioritization
"""

from __future__ import annotations

import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from studysheet.core.models import ContentBlock, Topic

from .config import PrioritizationConfig
from .models import (
    IMPACT_ORDER,
    VALUE_ORDER,
    CompressibleBlock,
    ContentPriority,
    ContentReductionPlan,
    EducationalValue,
    ImpactAssessment,
    OverflowSuggestion,
)
from .thresholds import PRIORITIZATION

logger = logging.getLogger(__name__)

_TOPIC_PATTERN = re.compile(r"topic-(\d+)")


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def resolve_topic_id(block: ContentBlock, topic_ids: Iterable[str]) -> Optional[str]:
    """
    Find the topic a block belongs to.

    Order of precedence:
    1. The block's explicit ``topic_id`` (if it is a known topic)
    2. An embedded ``topic-<n>`` reference in the block id
    3. The longest known topic id contained in the block id

    Returns:
        Topic id, or None when the block matches no known topic
    """
    known = list(topic_ids)
    if block.topic_id is not None:
        return block.topic_id if block.topic_id in known else None

    match = _TOPIC_PATTERN.search(block.id)
    if match:
        candidate = f"topic-{match.group(1)}"
        if candidate in known:
            return candidate

    contained = [topic_id for topic_id in known if topic_id and topic_id in block.id]
    if contained:
        return max(contained, key=len)
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Educational value scoring
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ValueAssessment:
    value: EducationalValue
    score: float


class EducationalValueScorer(ABC):
    """Ranks a topic's pedagogical importance."""

    @abstractmethod
    def assess(self, topic: Topic) -> ValueAssessment:
        """Classify a topic as high, medium or low value."""


class KeywordValueScorer(EducationalValueScorer):
    """
    Keyword and structure heuristic.

    - high: has worked examples AND (>= 2 high-value keywords OR subtopics)
    - medium: >= 1 high-value keyword OR >= 2 medium-value keywords OR subtopics
    - low: otherwise
    """

    def __init__(
        self,
        high_keywords: Sequence[str] = PRIORITIZATION.high_value_keywords,
        medium_keywords: Sequence[str] = PRIORITIZATION.medium_value_keywords,
    ):
        self.high_keywords = tuple(high_keywords)
        self.medium_keywords = tuple(medium_keywords)

    def assess(self, topic: Topic) -> ValueAssessment:
        content = topic.content.lower()
        high_hits = sum(1 for keyword in self.high_keywords if keyword in content)
        medium_hits = sum(1 for keyword in self.medium_keywords if keyword in content)
        score = 2 * high_hits + medium_hits + 2 * topic.has_examples + topic.has_subtopics

        if topic.has_examples and (high_hits >= PRIORITIZATION.high_keyword_hits or topic.has_subtopics):
            return ValueAssessment("high", score)
        if high_hits >= 1 or medium_hits >= PRIORITIZATION.medium_keyword_hits or topic.has_subtopics:
            return ValueAssessment("medium", score)
        return ValueAssessment("low", score)


# ─────────────────────────────────────────────────────────────────────────────
# Prioritizer
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class _Candidate:
    block: ContentBlock
    priority: float
    topic_id: Optional[str]
    height: float


class ContentPrioritizer:
    """
    Content prioritization driven by user selections and topic importance.

    Holds only its configuration and scorer; every result is recomputed
    per call.

    Example:
        >>> prioritizer = ContentPrioritizer(PrioritizationConfig(user_selected_topics=("topic-1",)))
        >>> priorities = prioritizer.analyze_priorities(topics, blocks)
        >>> priorities[0].topic_id
        'topic-1'
    """

    def __init__(
        self,
        config: PrioritizationConfig,
        scorer: Optional[EducationalValueScorer] = None,
    ):
        self.config = config
        self.scorer = scorer or KeywordValueScorer()

    # ─────────────────────────────────────────────────────────────────────────
    # Priorities
    # ─────────────────────────────────────────────────────────────────────────

    def analyze_priorities(
        self,
        topics: Sequence[Topic],
        blocks: Sequence[ContentBlock],
    ) -> List[ContentPriority]:
        """
        Score every topic and sort by importance.

        Sort order: user-selected first, then priority descending, then
        educational value descending.
        """
        topic_ids = [topic.id for topic in topics]
        block_topics = {block.id: resolve_topic_id(block, topic_ids) for block in blocks}

        priorities = [self._score_topic(topic, blocks, block_topics) for topic in topics]
        priorities.sort(
            key=lambda p: (not p.user_selected, -p.priority, -VALUE_ORDER[p.educational_value])
        )
        logger.debug(f"Scored {len(priorities)} topics against {len(blocks)} blocks")
        return priorities

    def _score_topic(
        self,
        topic: Topic,
        blocks: Sequence[ContentBlock],
        block_topics: Mapping[str, Optional[str]],
    ) -> ContentPriority:
        weights = PRIORITIZATION
        selected = self.config.is_selected(topic.id)
        priority = weights.base_priority

        if selected:
            priority += weights.user_selected_bonus

        priority += _round_half_up(topic.confidence * weights.confidence_weight)

        value = self.scorer.assess(topic).value
        priority += weights.value_bonus[value]

        content_length = topic.total_content_length
        if not selected and content_length > weights.long_content_chars:
            priority -= weights.long_content_penalty

        dependencies = self.find_dependencies(topic, blocks, block_topics)
        selected_dependencies = [dep for dep in dependencies if self.config.is_selected(dep)]
        priority += len(selected_dependencies) * weights.selected_dependency_bonus

        priority = max(weights.min_priority, min(weights.max_priority, _round_half_up(priority)))

        return ContentPriority(
            topic_id=topic.id,
            priority=priority,
            user_selected=selected,
            content_length=content_length,
            educational_value=value,
            dependencies=tuple(dependencies),
        )

    def find_dependencies(
        self,
        topic: Topic,
        blocks: Sequence[ContentBlock],
        block_topics: Mapping[str, Optional[str]],
    ) -> List[str]:
        """
        Topics whose blocks this topic's content refers to.

        A reference is any of a block's first five words (longer than three
        characters) appearing verbatim in the topic content. Approximate by
        nature, not semantic.
        """
        topic_content = topic.content.lower()
        dependencies: List[str] = []

        for block in blocks:
            owner = block_topics.get(block.id)
            if owner is None or owner == topic.id or owner in dependencies:
                continue
            words = block.content.lower().split()[: PRIORITIZATION.dependency_words]
            if any(
                len(word) >= PRIORITIZATION.dependency_min_word_len and word in topic_content
                for word in words
            ):
                dependencies.append(owner)

        return dependencies

    @staticmethod
    def topic_for_block(block: ContentBlock, priorities: Sequence[ContentPriority]) -> Optional[str]:
        """Topic id of a block among the prioritized topics, if any."""
        return resolve_topic_id(block, (p.topic_id for p in priorities))

    def block_priority(self, block: ContentBlock, priorities: Sequence[ContentPriority]) -> float:
        """Priority of the block's topic; baseline 5 when it has none."""
        topic_id = self.topic_for_block(block, priorities)
        for priority in priorities:
            if priority.topic_id == topic_id:
                return priority.priority
        return PRIORITIZATION.base_priority

    # ─────────────────────────────────────────────────────────────────────────
    # Reduction plan
    # ─────────────────────────────────────────────────────────────────────────

    def create_reduction_plan(
        self,
        overflow_amount: float,
        blocks: Sequence[ContentBlock],
        priorities: Sequence[ContentPriority],
        block_heights: Optional[Mapping[str, float]] = None,
    ) -> ContentReductionPlan:
        """
        Build a bounded plan of removals and compressions.

        Phase 1 removes the lowest-priority blocks, never touching blocks
        whose topic priority is >= 7. Phase 2 compresses blocks with
        priority in [3, 8] if the target is still not met. The total saving
        stays within max_content_reduction percent of the content height
        (plus a small rounding tolerance).

        Args:
            overflow_amount: Overflow to close (px)
            blocks: All content blocks
            priorities: Output of analyze_priorities
            block_heights: Precise heights by block id; falls back to the
                caller override or a length-based estimate

        Returns:
            ContentReductionPlan; estimated_space_saved may fall short of
            the overflow when not enough low-priority content exists
        """
        if not blocks or overflow_amount <= 0:
            return ContentReductionPlan()

        weights = PRIORITIZATION
        by_topic = {p.topic_id: p for p in priorities}
        candidates = [
            self._candidate(block, by_topic, block_heights) for block in blocks
        ]
        ordered = self._removal_order(candidates)

        total_height = sum(c.height for c in candidates)
        max_allowed = total_height * self.config.max_content_reduction / 100
        limit = max_allowed * (1 + weights.cap_tolerance)
        target = min(overflow_amount * weights.reduction_buffer, max_allowed)

        removed: List[str] = []
        topics_affected: List[str] = []
        saved = 0.0

        # Phase 1: remove lowest priority blocks
        for candidate in ordered:
            if saved >= target:
                break
            if not self._removable(candidate, by_topic):
                continue
            if saved + candidate.height > limit:
                continue
            saved += self._remove(candidate, removed, topics_affected)

        # Phase 2: compress medium priority blocks
        compressible: List[CompressibleBlock] = []
        if saved < target:
            removed_set = set(removed)
            for candidate in ordered:
                if saved >= target:
                    break
                if not weights.compress_min_priority <= candidate.priority <= weights.compress_max_priority:
                    continue
                if candidate.block.id in removed_set:
                    continue

                ratio = self.compression_ratio(candidate.block, candidate.priority)
                if ratio <= weights.min_meaningful_compression:
                    continue
                saving = candidate.height * ratio
                if saved + saving > limit:
                    continue

                length = len(candidate.block.content)
                compressible.append(CompressibleBlock(
                    block_id=candidate.block.id,
                    original_length=length,
                    target_length=round(length * (1 - ratio)),
                    compression_ratio=ratio,
                    space_saved=saving,
                ))
                saved += saving
                logger.debug(f"Compress {candidate.block.id} by {ratio:.0%} ({saving:.0f}px)")

        draft = ContentReductionPlan(
            removable_blocks=tuple(removed),
            compressible_blocks=tuple(compressible),
            estimated_space_saved=saved,
            impact_assessment=ImpactAssessment(topics_affected=tuple(topics_affected)),
        )
        plan = replace(draft, impact_assessment=self.assess_impact(draft, priorities))

        logger.info(
            f"Reduction plan: target {target:.0f}px, saved {saved:.0f}px "
            f"({len(removed)} removed, {len(compressible)} compressed)"
        )
        return plan

    def _candidate(
        self,
        block: ContentBlock,
        by_topic: Mapping[str, ContentPriority],
        block_heights: Optional[Mapping[str, float]],
    ) -> _Candidate:
        topic_id = resolve_topic_id(block, by_topic.keys())
        priority = by_topic[topic_id].priority if topic_id is not None else PRIORITIZATION.base_priority
        return _Candidate(block, priority, topic_id, self._height(block, block_heights))

    @staticmethod
    def _height(block: ContentBlock, block_heights: Optional[Mapping[str, float]]) -> float:
        if block_heights is not None and block.id in block_heights:
            return float(block_heights[block.id])
        if block.has_height_override:
            return float(block.estimated_height)
        return max(
            PRIORITIZATION.fallback_min_height,
            len(block.content) * PRIORITIZATION.fallback_height_per_char,
        )

    def _removal_order(self, candidates: List[_Candidate]) -> List[_Candidate]:
        """Lowest priority first; with topic balance, interleave topics."""
        if not self.config.maintain_topic_balance:
            return sorted(candidates, key=lambda c: c.priority)

        seen: Dict[tuple, int] = {}
        keyed = []
        for candidate in sorted(candidates, key=lambda c: c.priority):
            group = (candidate.priority, candidate.topic_id or candidate.block.id)
            ordinal = seen.get(group, 0)
            seen[group] = ordinal + 1
            keyed.append((candidate.priority, ordinal, candidate))
        return [c for _, _, c in sorted(keyed, key=lambda item: (item[0], item[1]))]

    def _removable(self, candidate: _Candidate, by_topic: Mapping[str, ContentPriority]) -> bool:
        if candidate.priority >= PRIORITIZATION.protected_priority:
            return False
        if self.config.preserve_high_value_content and candidate.topic_id is not None:
            if by_topic[candidate.topic_id].educational_value == "high":
                return False
        return True

    @staticmethod
    def _remove(candidate: _Candidate, removed: List[str], topics_affected: List[str]) -> float:
        removed.append(candidate.block.id)
        if candidate.topic_id is not None and candidate.topic_id not in topics_affected:
            topics_affected.append(candidate.topic_id)
        logger.debug(f"Remove {candidate.block.id} (priority {candidate.priority:g}, {candidate.height:.0f}px)")
        return candidate.height

    @staticmethod
    def compression_ratio(block: ContentBlock, priority: float) -> float:
        """
        Compression ratio in (0, 0.6]: lower priority and prose-like blocks
        compress more; images and headings barely.
        """
        weights = PRIORITIZATION
        priority_factor = max(weights.min_priority_factor, (10 - priority) / 10)
        type_factor = weights.type_compression.get(block.type, 0.4)
        return min(weights.max_compression, priority_factor * type_factor)

    def assess_impact(
        self,
        plan: ContentReductionPlan,
        priorities: Sequence[ContentPriority],
    ) -> ImpactAssessment:
        """Educational value loss and coherence of a plan."""
        weights = PRIORITIZATION
        affected_ids = set(plan.impact_assessment.topics_affected)
        affected = [p for p in priorities if p.topic_id in affected_ids]
        high_value = sum(1 for p in affected if p.educational_value == "high")
        selected = sum(1 for p in affected if p.user_selected)

        if high_value > weights.significant_high_value_topics or selected > weights.significant_selected_topics:
            loss = "significant"
        elif high_value > 0 or selected > 0:
            loss = "moderate"
        else:
            loss = "minimal"

        touched = len(plan.removable_blocks) + len(plan.compressible_blocks)
        removal_ratio = len(plan.removable_blocks) / touched if touched else 0.0
        if removal_ratio > weights.compromised_ratio:
            coherence = "compromised"
        elif removal_ratio > weights.reduced_ratio:
            coherence = "reduced"
        else:
            coherence = "maintained"

        return ImpactAssessment(
            topics_affected=plan.impact_assessment.topics_affected,
            educational_value_loss=loss,
            content_coherence=coherence,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Suggestions
    # ─────────────────────────────────────────────────────────────────────────

    def generate_intelligent_suggestions(
        self,
        overflow_amount: float,
        priorities: Sequence[ContentPriority],
        plan: ContentReductionPlan,
    ) -> List[OverflowSuggestion]:
        """Human-readable suggestions, lowest impact first."""
        weights = PRIORITIZATION
        suggestions: List[OverflowSuggestion] = []

        if overflow_amount > weights.pages_overflow_px:
            extra_pages = math.ceil(overflow_amount / weights.px_per_extra_page)
            suggestions.append(OverflowSuggestion(
                type="increase-pages",
                description=f"Add {extra_pages} more page(s) to accommodate all content",
                impact="high" if overflow_amount > weights.pages_high_impact_px else "medium",
                estimated_reduction=overflow_amount * 0.9,
            ))

        suggestions.append(OverflowSuggestion(
            type="smaller-text",
            description="Reduce text size to fit more content per page",
            impact="medium",
            estimated_reduction=overflow_amount * 0.4,
        ))

        suggestions.append(OverflowSuggestion(
            type="more-columns",
            description=f"Increase to {weights.suggested_columns} columns for better space utilization",
            impact="medium",
            estimated_reduction=overflow_amount * 0.3,
        ))

        unselected = [
            p for p in priorities
            if not p.user_selected and p.priority <= weights.unselected_priority_ceiling
        ]
        if unselected:
            suggestions.append(OverflowSuggestion(
                type="reduce-content",
                description=f"Consider removing {len(unselected)} low-priority topics that weren't selected",
                impact="medium",
                estimated_reduction=sum(
                    max(weights.topic_reduction_min_px, p.content_length * weights.topic_reduction_per_char)
                    for p in unselected
                ),
            ))

        similar = self.find_similar_topics(priorities)
        if similar:
            suggestions.append(OverflowSuggestion(
                type="reduce-content",
                description=f"Merge {len(similar)} similar topics to reduce redundancy",
                impact="low",
                estimated_reduction=overflow_amount * weights.merge_reduction_factor,
            ))

        if plan.compressible_blocks:
            average = sum(b.compression_ratio for b in plan.compressible_blocks) / len(plan.compressible_blocks)
            suggestions.append(OverflowSuggestion(
                type="reduce-content",
                description=(
                    f"Compress {len(plan.compressible_blocks)} content blocks "
                    f"by {round(average * 100)}% on average"
                ),
                impact="low" if plan.impact_assessment.educational_value_loss == "minimal" else "medium",
                estimated_reduction=sum(b.space_saved for b in plan.compressible_blocks),
            ))

        return sorted(suggestions, key=lambda s: IMPACT_ORDER[s.impact])

    @staticmethod
    def find_similar_topics(priorities: Sequence[ContentPriority]) -> List[str]:
        """Topics of similar length that share at least one dependency."""
        similar: List[str] = []
        for i, first in enumerate(priorities):
            for second in priorities[i + 1:]:
                shorter = min(first.content_length, second.content_length)
                length_similar = (
                    abs(first.content_length - second.content_length)
                    < shorter * PRIORITIZATION.similar_length_ratio
                )
                shared = set(first.dependencies) & set(second.dependencies)
                if length_similar and shared:
                    for topic_id in (first.topic_id, second.topic_id):
                        if topic_id not in similar:
                            similar.append(topic_id)
        return similar

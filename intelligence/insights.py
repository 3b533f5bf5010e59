"""
Context Bridge Insight Generator

Turns a set of context ids into ranked insights:
- Related-work patterns around each anchor context
- Active-topic trends when related contexts are recent
- Cross-context patterns for larger selections
- Organisation recommendations

Also serves queries over every stored insight (seeded and generated).

Usage:
    from intelligence.insights import InsightGenerator

    generator = InsightGenerator(store)

    insights = generator.generate(['1', '2', '3'], min_confidence=0.7)
    top = generator.get_top_insights(5)
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from core.errors import NotFoundError
from core.models import Context, Insight, InsightType, new_id, utcnow
from intelligence.similarity import SimilarityEngine

logger = logging.getLogger('context_bridge.insights')

DEFAULT_MIN_CONFIDENCE = 0.7
DEFAULT_TOP_LIMIT = 5
RECENT_WINDOW = timedelta(hours=24)


def _confidence(value: float) -> float:
    """Clamp to [0, 1] and round off float noise."""
    return round(max(0.0, min(1.0, value)), 4)


def _sorted_by_confidence(insights: List[Insight]) -> List[Insight]:
    # list.sort is stable, so ties keep insertion order
    return sorted(insights, key=lambda i: i.confidence, reverse=True)


class InsightGenerator:
    """
    Generates insights over the contexts held in a ContextStore.

    Generated insights are appended to the store and show up in every later
    query. generate() itself merges only the seeded insights, so repeating a
    call never returns the records an earlier call produced.
    """

    PATTERN_BASE = 0.6
    PATTERN_STEP = 0.1
    PATTERN_CAP = 0.9
    CROSS_CONTEXT_STEP = 0.05
    CROSS_CONTEXT_MIN = 3
    TREND_CONFIDENCE = 0.75
    RECOMMENDATION_CONFIDENCE = 0.75

    def __init__(
        self,
        store,
        similarity: Optional[SimilarityEngine] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        """
        Initialize insight generator.

        Args:
            store: ContextStore holding contexts and insights
            similarity: Relatedness scorer (default SimilarityEngine())
            clock: Returns the current UTC time; swapped in tests
        """
        self.store = store
        self.similarity = similarity or SimilarityEngine()
        self.clock = clock

    # =========================================================================
    # Generation
    # =========================================================================

    def generate(
        self,
        context_ids: Sequence[str],
        type: Optional[Union[InsightType, str]] = None,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE
    ) -> List[Insight]:
        """
        Generate insights for a selection of contexts.

        Unknown ids are dropped. Seeded insights that mention any of the
        requested ids are merged in, then the type and confidence filters are
        applied to the whole result.

        Args:
            context_ids: Context ids, order preserved
            type: Only return insights of this type
            min_confidence: Inclusive confidence threshold

        Returns:
            Insights sorted by confidence, highest first
        """
        context_ids = [str(cid) for cid in context_ids]
        insight_type = InsightType(type) if type is not None else None
        now = self.clock()

        with self.store.lock:
            seeded = self.store.get_seed_insights()
            all_contexts = self.store.get_all()

            generated = []
            for anchor in self._resolve_anchors(context_ids):
                related = self.similarity.find_related(anchor, all_contexts)
                generated.extend(self.derive_anchor_insights(anchor, related, now))

            generated.extend(self._selection_insights(context_ids, now))

            for insight in generated:
                self.store.append_insight(insight)

        requested = set(context_ids)
        relevant = [i for i in seeded if requested.intersection(i.related_contexts)]

        results = [
            i for i in relevant + generated
            if (insight_type is None or i.type == insight_type)
            and i.confidence >= min_confidence
        ]

        logger.info(
            f'Generated {len(generated)} insights for {len(context_ids)} contexts',
            extra={
                'requested': len(context_ids),
                'generated': len(generated),
                'merged_seeded': len(relevant),
                'returned': len(results)
            }
        )
        return _sorted_by_confidence(results)

    def _resolve_anchors(self, context_ids: List[str]) -> List[Context]:
        anchors = []
        seen = set()
        for cid in context_ids:
            if cid in seen:
                continue
            seen.add(cid)

            ctx = self.store.find(cid)
            if ctx is None:
                logger.debug(f'Dropping unknown context id {cid}')
                continue
            anchors.append(ctx)
        return anchors

    def derive_anchor_insights(
        self,
        anchor: Context,
        related: List[Context],
        now: Optional[datetime] = None
    ) -> List[Insight]:
        """
        Pattern and trend insights around a single anchor context.

        Args:
            anchor: The context the insights are about
            related: Contexts related to the anchor (anchor excluded)
            now: Reference time for the trend window

        Returns:
            Zero, one or two new insights (not stored)
        """
        now = now or self.clock()
        insights = []

        if len(related) >= 2:
            insights.append(Insight(
                id=new_id('insight'),
                title='Related Work Pattern',
                description=(
                    f'This context is part of a larger work pattern involving '
                    f'{len(related)} related items.'
                ),
                type=InsightType.PATTERN,
                confidence=_confidence(min(
                    self.PATTERN_CAP,
                    self.PATTERN_BASE + self.PATTERN_STEP * len(related)
                )),
                related_contexts=(anchor.id,) + tuple(r.id for r in related),
                timestamp=now,
                metadata={'anchorId': anchor.id, 'relatedCount': len(related)},
            ))

        recent = [r for r in related if now - r.timestamp < RECENT_WINDOW]
        if recent:
            topics = list(anchor.tags[:3])
            insights.append(Insight(
                id=new_id('insight'),
                title='Active Topic Trend',
                description=f'High activity detected around topics: {", ".join(topics)}',
                type=InsightType.TREND,
                confidence=_confidence(self.TREND_CONFIDENCE),
                related_contexts=(anchor.id,) + tuple(r.id for r in recent),
                timestamp=now,
                metadata={'anchorId': anchor.id, 'topics': topics, 'recentCount': len(recent)},
            ))

        return insights

    def _selection_insights(self, context_ids: List[str], now: datetime) -> List[Insight]:
        """Insights about the requested selection as a whole."""
        insights = []
        if not context_ids:
            return insights

        count = len(context_ids)
        if count >= self.CROSS_CONTEXT_MIN:
            insights.append(Insight(
                id=new_id('insight'),
                title='Multi-Context Pattern Detected',
                description=(
                    f'Analysis of {count} related contexts reveals a consistent pattern '
                    f'of work focused on integrated development approach.'
                ),
                type=InsightType.PATTERN,
                confidence=_confidence(min(
                    self.PATTERN_CAP,
                    self.PATTERN_BASE + self.CROSS_CONTEXT_STEP * count
                )),
                related_contexts=tuple(context_ids),
                timestamp=now,
                metadata={
                    'contextCount': count,
                    'patternStrength': 'strong',
                    'analysisType': 'multi-context'
                },
            ))

        insights.append(Insight(
            id=new_id('insight'),
            title='Context Organization Recommendation',
            description=(
                'Consider creating a project workspace to better organize these related '
                'contexts and enable more efficient cross-referencing.'
            ),
            type=InsightType.RECOMMENDATION,
            confidence=_confidence(self.RECOMMENDATION_CONFIDENCE),
            related_contexts=tuple(context_ids),
            timestamp=now,
            metadata={
                'actionType': 'organization',
                'priority': 'medium',
                'estimatedEffort': 'low'
            },
        ))
        return insights

    def add_insight(
        self,
        title: str,
        description: str,
        type: Union[InsightType, str],
        confidence: float,
        related_contexts: Sequence[str] = (),
        metadata: Optional[Dict[str, Any]] = None
    ) -> Insight:
        """Store a caller-supplied insight with a fresh id and timestamp."""
        insight = Insight(
            id=new_id('insight'),
            title=title,
            description=description,
            type=InsightType(type),
            confidence=_confidence(confidence),
            related_contexts=tuple(str(c) for c in related_contexts),
            timestamp=self.clock(),
            metadata=dict(metadata) if metadata else None,
        )
        return self.store.append_insight(insight)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_all_insights(self) -> List[Insight]:
        """Every stored insight in insertion order."""
        return self.store.get_insights()

    def get_insights_by_type(self, type: Union[InsightType, str]) -> List[Insight]:
        insight_type = InsightType(type)
        return [i for i in self.store.get_insights() if i.type == insight_type]

    def get_insights_by_confidence(self, min_confidence: float) -> List[Insight]:
        """Insights at or above the threshold, highest confidence first."""
        return _sorted_by_confidence([
            i for i in self.store.get_insights() if i.confidence >= min_confidence
        ])

    def get_top_insights(self, limit: int = DEFAULT_TOP_LIMIT) -> List[Insight]:
        return _sorted_by_confidence(self.store.get_insights())[:max(0, limit)]

    def get_insight(self, insight_id: str) -> Insight:
        """
        Insight by id.

        Raises:
            NotFoundError: if no insight has this id
        """
        for insight in self.store.get_insights():
            if insight.id == insight_id:
                return insight
        raise NotFoundError(f'Insight with id {insight_id} not found', insight_id=insight_id)

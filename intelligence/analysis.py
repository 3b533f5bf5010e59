"""
Single-context analysis.

Combines the similarity engine and both generators to describe one context:
related-work insights, candidate connections and keyword tags. Results are
returned to the caller and never stored.
"""

import logging
from enum import Enum
from typing import Optional, Union

from core.models import AnalysisResult
from intelligence.connections import ConnectionGenerator
from intelligence.insights import InsightGenerator
from intelligence.similarity import SimilarityEngine

logger = logging.getLogger('context_bridge.analysis')


class AnalysisType(Enum):
    FULL = 'full'
    QUICK = 'quick'
    CONNECTIONS_ONLY = 'connections-only'


class ContextAnalyzer:
    """Analyses one stored context against all others."""

    ANALYSIS_CONFIDENCE = 0.85

    def __init__(
        self,
        store,
        similarity: Optional[SimilarityEngine] = None,
        insight_generator: Optional[InsightGenerator] = None,
        connection_generator: Optional[ConnectionGenerator] = None
    ):
        self.store = store
        self.similarity = similarity or SimilarityEngine()
        self.insights = insight_generator or InsightGenerator(store, self.similarity)
        self.connections = connection_generator or ConnectionGenerator(store, self.similarity)

    def analyze(
        self,
        context_id: str,
        analysis_type: Union[AnalysisType, str] = AnalysisType.FULL
    ) -> AnalysisResult:
        """
        Analyse a context.

        Args:
            context_id: Context to analyse
            analysis_type: 'full', 'quick' (no connections) or
                'connections-only' (no insights)

        Returns:
            AnalysisResult

        Raises:
            NotFoundError: if the context does not exist
        """
        mode = AnalysisType(analysis_type)
        context = self.store.get_by_id(context_id)
        related = self.similarity.find_related(context, self.store.get_all())

        result = AnalysisResult(
            tags=self.similarity.extract_keywords(context.content),
            confidence=self.ANALYSIS_CONFIDENCE,
        )
        if mode != AnalysisType.CONNECTIONS_ONLY:
            result.insights = self.insights.derive_anchor_insights(context, related)
        if mode != AnalysisType.QUICK:
            result.connections = self.connections.candidate_connections(context, related)

        logger.info(
            f'Analysed context {context_id}',
            extra={
                'context_id': context_id,
                'analysis_type': mode.value,
                'related': len(related),
                'insights': len(result.insights),
                'connections': len(result.connections)
            }
        )
        return result

"""
Context Bridge Intelligence Layer

Derived records over the contexts in a ContextStore:
- Lexical similarity and the relatedness predicate
- Insight generation and queries
- Deduplicated connection generation and queries
- Single-context analysis

Usage:
    from intelligence import InsightGenerator, ConnectionGenerator

    insights = InsightGenerator(store).generate(['1', '2', '3'])
    edges = ConnectionGenerator(store).generate_between(['1', '3'])
"""

from .similarity import SimilarityEngine, SimilarityBreakdown
from .insights import InsightGenerator
from .connections import ConnectionGenerator, pair_key
from .analysis import ContextAnalyzer, AnalysisType

__all__ = [
    'SimilarityEngine',
    'SimilarityBreakdown',
    'InsightGenerator',
    'ConnectionGenerator',
    'pair_key',
    'ContextAnalyzer',
    'AnalysisType',
]

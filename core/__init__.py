"""
Core types for Context Bridge: records, enums, errors and configuration.
"""

from .errors import ContextBridgeError, NotFoundError, ValidationError
from .models import (
    AnalysisResult, Connection, ConnectionType, Context, ContextSource,
    ContextStats, Insight, InsightType,
)

__all__ = [
    'ContextBridgeError',
    'NotFoundError',
    'ValidationError',
    'AnalysisResult',
    'Connection',
    'ConnectionType',
    'Context',
    'ContextSource',
    'ContextStats',
    'Insight',
    'InsightType',
]

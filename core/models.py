"""
Context Bridge Data Models

Immutable records shared by the store, the analysis engine and the API:
- Context: a recorded note with provenance and tags
- Insight: a derived observation with a confidence score
- Connection: a derived edge between two contexts with a strength

All records serialise to the camelCase JSON shape used by the web client.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


# =============================================================================
# Enums
# =============================================================================

class ContextSource(Enum):
    """Platforms a context can be captured from."""
    WINDOWS = "windows"
    MACOS = "macos"
    WEB = "web"


class InsightType(Enum):
    """Kinds of derived insight."""
    PATTERN = "pattern"
    CONNECTION = "connection"
    TREND = "trend"
    RECOMMENDATION = "recommendation"


class ConnectionType(Enum):
    """Kinds of edge between two contexts."""
    SEMANTIC = "semantic"
    TEMPORAL = "temporal"
    SOURCE = "source"
    USER_DEFINED = "user-defined"


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    """Generate a unique record id, e.g. ``ctx-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex}"


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 in UTC with a trailing Z, matching the client's Date parsing."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts.isoformat(timespec='milliseconds') + 'Z'


def parse_timestamp(value: Any) -> datetime:
    """Parse a datetime or ISO-8601 string into an aware UTC datetime."""
    if isinstance(value, datetime):
        ts = value
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        ts = datetime.fromisoformat(text)

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class Context:
    """A single recorded note with its source platform and tags."""
    id: str
    title: str
    content: str
    source: ContextSource
    platform: str
    timestamp: datetime
    tags: Tuple[str, ...] = ()
    application: Optional[str] = None
    url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> dict:
        data = {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'source': self.source.value,
            'platform': self.platform,
            'timestamp': format_timestamp(self.timestamp),
            'tags': list(self.tags),
        }
        if self.application:
            data['application'] = self.application
        if self.url:
            data['url'] = self.url
        if self.metadata is not None:
            data['metadata'] = dict(self.metadata)
        return data


@dataclass(frozen=True)
class Insight:
    """A derived observation about one or more contexts."""
    id: str
    title: str
    description: str
    type: InsightType
    confidence: float
    related_contexts: Tuple[str, ...]
    timestamp: datetime
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> dict:
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'type': self.type.value,
            'confidence': self.confidence,
            'relatedContexts': list(self.related_contexts),
            'timestamp': format_timestamp(self.timestamp),
        }
        if self.metadata is not None:
            data['metadata'] = dict(self.metadata)
        return data


@dataclass(frozen=True)
class Connection:
    """A typed edge between two contexts."""
    id: str
    source_id: str
    target_id: str
    type: ConnectionType
    strength: float
    description: str
    timestamp: datetime

    @property
    def pair(self) -> frozenset:
        """Direction-insensitive key for the linked pair."""
        return frozenset((self.source_id, self.target_id))

    def links(self, context_id: str) -> bool:
        return context_id in (self.source_id, self.target_id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'sourceId': self.source_id,
            'targetId': self.target_id,
            'type': self.type.value,
            'strength': self.strength,
            'description': self.description,
            'timestamp': format_timestamp(self.timestamp),
        }


@dataclass
class AnalysisResult:
    """Outcome of analysing a single context."""
    insights: List[Insight] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    confidence: float = 0.0

    def to_dict(self) -> dict:
        return {
            'insights': [i.to_dict() for i in self.insights],
            'connections': [c.to_dict() for c in self.connections],
            'tags': list(self.tags),
            'confidence': self.confidence,
        }


@dataclass
class ContextStats:
    """Aggregate counts over the store."""
    total_contexts: int
    total_insights: int
    total_connections: int
    platform_breakdown: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'totalContexts': self.total_contexts,
            'totalInsights': self.total_insights,
            'totalConnections': self.total_connections,
            'platformBreakdown': dict(self.platform_breakdown),
        }

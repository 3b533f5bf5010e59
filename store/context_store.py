"""
In-Memory Context Store for Context Bridge

Owns the canonical record sets for one process:
- Contexts (create, read, stats)
- Insights (seeded at construction, then append-only)
- Connections (append-only)

One store is constructed at startup and handed to every component that needs
it. Each public method holds the store lock for its whole body, so a single
call is atomic with respect to other request threads; sequences of calls are
not transactional.

Usage:
    from store import ContextStore, load_seed

    store = ContextStore.from_seed(load_seed())
    ctx = store.add({'title': 'Notes', 'content': '...', 'source': 'web'})
    store.get_by_id(ctx.id)
"""

import dataclasses
import logging
import threading
from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.errors import NotFoundError, ValidationError
from core.models import (
    Connection, Context, ContextSource, ContextStats, Insight,
    new_id, utcnow,
)

logger = logging.getLogger('context_bridge.store')

REQUIRED_FIELDS = ('title', 'content', 'source')
VALID_SOURCES = tuple(s.value for s in ContextSource)


def normalize_tags(tags: Optional[Iterable[Any]]) -> tuple:
    """Strip and lowercase tags, dropping blanks."""
    if not tags:
        return ()
    if isinstance(tags, str):
        tags = [tags]

    normalized = []
    for tag in tags:
        text = str(tag).strip().lower()
        if text:
            normalized.append(text)
    return tuple(normalized)


def validate_context_input(data: Mapping[str, Any]) -> ContextSource:
    """
    Check a create-context payload.

    Returns:
        The parsed source enum

    Raises:
        ValidationError: missing required field or unknown source
    """
    if not isinstance(data, Mapping):
        raise ValidationError('Context payload must be an object')

    missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or '').strip()]
    if missing:
        raise ValidationError(
            'Title, content, and source are required fields',
            missing_fields=missing
        )

    try:
        return ContextSource(str(data['source']).strip().lower())
    except ValueError:
        raise ValidationError(
            f'Source must be one of: {", ".join(VALID_SOURCES)}',
            source=data['source']
        )


def _copy_context(ctx: Context) -> Context:
    if ctx.metadata is None:
        return ctx
    return dataclasses.replace(ctx, metadata=dict(ctx.metadata))


def _copy_insight(insight: Insight) -> Insight:
    if insight.metadata is None:
        return insight
    return dataclasses.replace(insight, metadata=dict(insight.metadata))


class ContextStore:
    """
    Process-wide record store.

    Contexts are never updated or deleted. Insights and connections are only
    appended; the generators decide what gets appended.
    """

    def __init__(
        self,
        contexts: Iterable[Context] = (),
        insights: Iterable[Insight] = (),
        connections: Iterable[Connection] = ()
    ):
        self._lock = threading.RLock()
        self._contexts: List[Context] = []
        self._index: Dict[str, Context] = {}
        self._insights: List[Insight] = list(insights)
        # insights present at construction; generation merges only these
        self._seed_insight_ids = frozenset(i.id for i in self._insights)
        self._connections: List[Connection] = list(connections)

        for ctx in contexts:
            self._insert(ctx)

    @classmethod
    def from_seed(cls, seed) -> 'ContextStore':
        """Build a store populated from a SeedData fixture."""
        store = cls(seed.contexts, seed.insights, seed.connections)
        logger.info(
            'Store initialised from seed',
            extra={
                'contexts': len(seed.contexts),
                'insights': len(seed.insights),
                'connections': len(seed.connections)
            }
        )
        return store

    def _insert(self, ctx: Context):
        if ctx.id in self._index:
            raise ValidationError(f'Duplicate context id {ctx.id}', context_id=ctx.id)
        self._contexts.append(ctx)
        self._index[ctx.id] = ctx

    # -------------------------------------------------------------------------
    # Contexts
    # -------------------------------------------------------------------------

    def add(self, data: Mapping[str, Any]) -> Context:
        """
        Validate and store a new context.

        Args:
            data: Mapping with title, content, source and optional platform,
                application, url, tags, metadata

        Returns:
            The stored Context

        Raises:
            ValidationError: if required fields are missing or source is invalid
        """
        source = validate_context_input(data)
        metadata = data.get('metadata')

        ctx = Context(
            id=new_id('ctx'),
            title=str(data['title']).strip(),
            content=str(data['content']),
            source=source,
            platform=str(data.get('platform') or source.value),
            timestamp=utcnow(),
            tags=normalize_tags(data.get('tags')),
            application=data.get('application') or None,
            url=data.get('url') or None,
            metadata=dict(metadata) if metadata else None,
        )

        with self._lock:
            self._insert(ctx)

        logger.info(
            f'Context added: {ctx.id}',
            extra={'context_id': ctx.id, 'source': ctx.source.value, 'tag_count': len(ctx.tags)}
        )
        return _copy_context(ctx)

    add_context = add

    def get_all(self) -> List[Context]:
        """All contexts in insertion order."""
        with self._lock:
            return [_copy_context(c) for c in self._contexts]

    def find(self, context_id: str) -> Optional[Context]:
        """Context by id, or None."""
        with self._lock:
            ctx = self._index.get(context_id)
        return _copy_context(ctx) if ctx is not None else None

    def get_by_id(self, context_id: str) -> Context:
        """
        Context by id.

        Raises:
            NotFoundError: if no context has this id
        """
        ctx = self.find(context_id)
        if ctx is None:
            raise NotFoundError(f'Context with id {context_id} not found', context_id=context_id)
        return ctx

    def __len__(self) -> int:
        with self._lock:
            return len(self._contexts)

    def __contains__(self, context_id) -> bool:
        with self._lock:
            return context_id in self._index

    # -------------------------------------------------------------------------
    # Derived records
    # -------------------------------------------------------------------------

    def append_insight(self, insight: Insight) -> Insight:
        with self._lock:
            self._insights.append(insight)
        return _copy_insight(insight)

    def get_insights(self) -> List[Insight]:
        with self._lock:
            return [_copy_insight(i) for i in self._insights]

    def get_seed_insights(self) -> List[Insight]:
        """Insights the store was constructed with, in seed order."""
        with self._lock:
            return [_copy_insight(i) for i in self._insights if i.id in self._seed_insight_ids]

    def append_connection(self, connection: Connection) -> Connection:
        with self._lock:
            self._connections.append(connection)
        return connection

    def get_connections(self) -> List[Connection]:
        with self._lock:
            return list(self._connections)

    @property
    def lock(self) -> threading.RLock:
        """Re-entrant lock for multi-step read-then-append operations."""
        return self._lock

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def stats(self) -> ContextStats:
        """Totals plus a per-source breakdown of contexts."""
        with self._lock:
            breakdown = Counter(c.source.value for c in self._contexts)
            return ContextStats(
                total_contexts=len(self._contexts),
                total_insights=len(self._insights),
                total_connections=len(self._connections),
                platform_breakdown=dict(breakdown),
            )

"""
Context Bridge Connection Generator

Derives typed edges between contexts and serves queries over stored edges.
A pair of contexts is linked at most once regardless of direction.

Strength of a generated edge is 0.5 + 0.4 * similarity score, so it always
falls in [0.5, 0.88] and the same pair always gets the same strength.

Usage:
    from intelligence.connections import ConnectionGenerator

    generator = ConnectionGenerator(store)
    created = generator.generate_between(['1', '3', '4'])
    edges = generator.connections_for('1')
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from core.models import Connection, ConnectionType, Context, new_id, utcnow
from intelligence.similarity import SimilarityEngine

logger = logging.getLogger('context_bridge.connections')


def pair_key(a: str, b: str) -> frozenset:
    """Direction-insensitive identity of a context pair."""
    return frozenset((a, b))


class ConnectionGenerator:
    """Generates and queries connections held in a ContextStore."""

    STRENGTH_BASE = 0.5
    STRENGTH_RANGE = 0.4
    GENERATED_DESCRIPTION = 'Generated semantic connection based on context analysis'

    def __init__(
        self,
        store,
        similarity: Optional[SimilarityEngine] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.store = store
        self.similarity = similarity or SimilarityEngine()
        self.clock = clock

    # =========================================================================
    # Queries
    # =========================================================================

    def all_connections(self) -> List[Connection]:
        return self.store.get_connections()

    def connections_for(self, context_id: str) -> List[Connection]:
        """Connections where the context is either endpoint."""
        return [c for c in self.store.get_connections() if c.links(context_id)]

    def find_between(self, a: str, b: str) -> Optional[Connection]:
        """Stored connection linking a and b in either direction."""
        key = pair_key(a, b)
        for conn in self.store.get_connections():
            if conn.pair == key:
                return conn
        return None

    # =========================================================================
    # Generation
    # =========================================================================

    def strength_for(self, a: Optional[Context], b: Optional[Context]) -> float:
        """Edge strength from the pair's similarity; base strength if either is unknown."""
        if a is None or b is None:
            return self.STRENGTH_BASE
        return round(self.STRENGTH_BASE + self.STRENGTH_RANGE * self.similarity.score(a, b), 4)

    def generate_between(self, context_ids: Sequence[str]) -> List[Connection]:
        """
        Link every not-yet-connected pair in the selection.

        Pairs are visited in list order (i < j). Pairs already linked in the
        store, including ones created earlier in this call, are skipped, so
        repeating the call creates nothing new.

        Args:
            context_ids: Context ids to connect

        Returns:
            Newly created connections
        """
        context_ids = [str(cid) for cid in context_ids]
        created = []

        with self.store.lock:
            linked = {c.pair for c in self.store.get_connections()}
            resolved = {cid: self.store.find(cid) for cid in set(context_ids)}
            now = self.clock()

            for i, source_id in enumerate(context_ids):
                for target_id in context_ids[i + 1:]:
                    if source_id == target_id:
                        continue

                    key = pair_key(source_id, target_id)
                    if key in linked:
                        continue

                    conn = Connection(
                        id=new_id('conn'),
                        source_id=source_id,
                        target_id=target_id,
                        type=ConnectionType.SEMANTIC,
                        strength=self.strength_for(resolved[source_id], resolved[target_id]),
                        description=self.GENERATED_DESCRIPTION,
                        timestamp=now,
                    )
                    self.store.append_connection(conn)
                    linked.add(key)
                    created.append(conn)

        logger.info(
            f'Generated {len(created)} connections for {len(context_ids)} contexts',
            extra={'requested': len(context_ids), 'created': len(created)}
        )
        return created

    def candidate_connections(self, context: Context, related: List[Context]) -> List[Connection]:
        """
        Unsaved semantic edges from a context to each related context.

        Strength is the raw similarity score.
        """
        now = self.clock()
        return [
            Connection(
                id=new_id('conn'),
                source_id=context.id,
                target_id=other.id,
                type=ConnectionType.SEMANTIC,
                strength=round(self.similarity.score(context, other), 4),
                description='Semantic connection based on shared topics',
                timestamp=now,
            )
            for other in related
            if other.id != context.id
        ]

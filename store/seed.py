"""
Seed fixture loading.

The initial contexts, insights and connections live in a YAML file so that
production and tests build their stores the same way. The bundled fixture is
store/seed_data.yaml; SEED_DATA_PATH points the server at another one.

Usage:
    from store.seed import load_seed

    seed = load_seed()                  # bundled fixture
    seed = load_seed('my_seed.yaml')    # custom fixture
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from core.errors import ValidationError
from core.models import (
    Connection, ConnectionType, Context, ContextSource, Insight, InsightType,
    parse_timestamp,
)
from store.context_store import normalize_tags

logger = logging.getLogger('context_bridge.seed')

BUNDLED_SEED_PATH = Path(__file__).parent / 'seed_data.yaml'


@dataclass
class SeedData:
    """Records to pre-populate a store with."""
    contexts: List[Context] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)


def _bounded(value: Any, name: str, record_id: str) -> float:
    score = float(value)
    if not 0.0 <= score <= 1.0:
        raise ValidationError(f'{name} must be between 0 and 1', record_id=record_id)
    return score


def context_from_dict(raw: Dict[str, Any]) -> Context:
    source = ContextSource(raw['source'])
    return Context(
        id=str(raw['id']),
        title=raw['title'],
        content=raw['content'],
        source=source,
        platform=raw.get('platform') or source.value,
        timestamp=parse_timestamp(raw['timestamp']),
        tags=normalize_tags(raw.get('tags')),
        application=raw.get('application'),
        url=raw.get('url'),
        metadata=raw.get('metadata'),
    )


def insight_from_dict(raw: Dict[str, Any]) -> Insight:
    insight_id = str(raw['id'])
    return Insight(
        id=insight_id,
        title=raw['title'],
        description=raw['description'],
        type=InsightType(raw['type']),
        confidence=_bounded(raw['confidence'], 'confidence', insight_id),
        related_contexts=tuple(str(c) for c in raw.get('relatedContexts', [])),
        timestamp=parse_timestamp(raw['timestamp']),
        metadata=raw.get('metadata'),
    )


def connection_from_dict(raw: Dict[str, Any]) -> Connection:
    connection_id = str(raw['id'])
    return Connection(
        id=connection_id,
        source_id=str(raw['sourceId']),
        target_id=str(raw['targetId']),
        type=ConnectionType(raw['type']),
        strength=_bounded(raw['strength'], 'strength', connection_id),
        description=raw.get('description', ''),
        timestamp=parse_timestamp(raw['timestamp']),
    )


def parse_seed(data: Optional[Dict[str, Any]]) -> SeedData:
    """
    Convert a parsed fixture document into records.

    Connections that repeat an already-seen unordered pair are skipped so the
    store starts with the one-connection-per-pair invariant intact.
    """
    data = data or {}
    seed = SeedData(
        contexts=[context_from_dict(c) for c in data.get('contexts') or []],
        insights=[insight_from_dict(i) for i in data.get('insights') or []],
    )

    seen_pairs = set()
    for raw in data.get('connections') or []:
        conn = connection_from_dict(raw)
        if conn.pair in seen_pairs:
            logger.warning(
                f'Skipping duplicate seed connection {conn.id}',
                extra={'source_id': conn.source_id, 'target_id': conn.target_id}
            )
            continue
        seen_pairs.add(conn.pair)
        seed.connections.append(conn)

    return seed


def load_seed(path: Optional[Union[str, Path]] = None) -> SeedData:
    """
    Load a seed fixture from YAML.

    Args:
        path: Fixture file (default: bundled seed_data.yaml)

    Returns:
        SeedData with parsed records
    """
    seed_path = Path(path) if path else BUNDLED_SEED_PATH

    with open(seed_path, encoding='utf-8') as f:
        seed = parse_seed(yaml.safe_load(f))

    logger.debug(f'Loaded seed fixture from {seed_path}')
    return seed

"""
Shared fixtures for the Context Bridge test suite.

Every test builds its own store so no state leaks between tests.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.models import Context, ContextSource
from store import ContextStore, load_seed


FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
LONG_AGO = FIXED_NOW - timedelta(days=30)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    """Deterministic clock for generators."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_context():
    """Factory for Context records with sensible defaults."""
    def _make(
        context_id,
        tags=(),
        content='',
        title=None,
        source=ContextSource.WEB,
        timestamp=LONG_AGO
    ):
        return Context(
            id=context_id,
            title=title or f'Context {context_id}',
            content=content,
            source=source,
            platform=source.value,
            timestamp=timestamp,
            tags=tuple(tags),
        )
    return _make


@pytest.fixture
def empty_store():
    return ContextStore()


@pytest.fixture
def seeded_store():
    """Store populated from the bundled YAML fixture."""
    return ContextStore.from_seed(load_seed())


@pytest.fixture
def triangle_store(make_context):
    """Three old contexts that all share at least one tag with each other."""
    return ContextStore([
        make_context('1', tags=['ai', 'research'], content='ai research context'),
        make_context('2', tags=['ai', 'architecture'], content='ai architecture design'),
        make_context('3', tags=['research', 'architecture'], content='meeting notes'),
    ])

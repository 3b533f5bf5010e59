"""
Storage Layer for Context Bridge

Memory-resident record store plus the YAML seed fixture that populates it.
Nothing is persisted; data lives as long as the process.

Usage:
    from store import ContextStore, load_seed

    store = ContextStore.from_seed(load_seed())
    ctx = store.add({'title': 'Notes', 'content': 'text', 'source': 'web'})
"""

from .context_store import ContextStore, normalize_tags, validate_context_input
from .seed import SeedData, load_seed, parse_seed

__all__ = [
    'ContextStore',
    'SeedData',
    'load_seed',
    'parse_seed',
    'normalize_tags',
    'validate_context_input',
]

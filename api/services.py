"""
Engine wiring shared by the blueprints.

One BridgeServices instance is attached to each app under
``app.extensions['context_bridge']``; handlers reach it via get_services().
"""

from dataclasses import dataclass
from typing import Optional

from flask import current_app, jsonify

from intelligence import ConnectionGenerator, ContextAnalyzer, InsightGenerator, SimilarityEngine
from store import ContextStore


@dataclass
class BridgeServices:
    """The engine components sharing one store."""
    store: ContextStore
    similarity: SimilarityEngine
    insights: InsightGenerator
    connections: ConnectionGenerator
    analyzer: ContextAnalyzer

    @classmethod
    def build(cls, store: ContextStore) -> 'BridgeServices':
        similarity = SimilarityEngine()
        insights = InsightGenerator(store, similarity)
        connections = ConnectionGenerator(store, similarity)
        analyzer = ContextAnalyzer(store, similarity, insights, connections)
        return cls(store, similarity, insights, connections, analyzer)


def get_services() -> BridgeServices:
    """Engine components attached to the current app."""
    return current_app.extensions['context_bridge']


def api_response(data=None, message: Optional[str] = None, status: int = 200):
    """Render the {success, data, message} envelope."""
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return jsonify(body), status

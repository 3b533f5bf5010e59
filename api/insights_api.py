"""
Context Bridge Insights API

Flask Blueprint for insights and connections:
- Query insights by type, confidence or top-N
- Generate insights for a set of contexts
- Generate and query connections

Usage:
    from api.insights_api import insights_api
    app.register_blueprint(insights_api, url_prefix='/api/insights')
"""

from flask import Blueprint, request

from api.services import api_response, get_services
from api.error_handlers import (
    get_json_body, parse_confidence, parse_insight_type, parse_limit,
    require_context_ids,
)
from intelligence.insights import DEFAULT_MIN_CONFIDENCE, DEFAULT_TOP_LIMIT

insights_api = Blueprint('insights', __name__)


def _dump(records):
    return [r.to_dict() for r in records]


# =============================================================================
# Insight Endpoints
# =============================================================================

@insights_api.route('', methods=['GET'])
@insights_api.route('/', methods=['GET'])
def list_insights():
    """
    List insights.

    Query params (first one present wins):
        type: pattern | connection | trend | recommendation
        minConfidence: 0..1, highest confidence first
        limit: top N by confidence
    """
    generator = get_services().insights
    insight_type = request.args.get('type')
    min_confidence = request.args.get('minConfidence')
    limit = request.args.get('limit')

    if insight_type:
        insights = generator.get_insights_by_type(parse_insight_type(insight_type))
    elif min_confidence:
        insights = generator.get_insights_by_confidence(parse_confidence(min_confidence))
    elif limit:
        insights = generator.get_top_insights(parse_limit(limit))
    else:
        insights = generator.get_all_insights()

    return api_response(_dump(insights), message=f'Retrieved {len(insights)} insights')


@insights_api.route('/top', methods=['GET'])
@insights_api.route('/top/<limit>', methods=['GET'])
def top_insights(limit=None):
    count = parse_limit(limit) if limit is not None else DEFAULT_TOP_LIMIT
    insights = get_services().insights.get_top_insights(count)
    return api_response(_dump(insights), message=f'Retrieved top {len(insights)} insights')


@insights_api.route('/generate', methods=['POST'])
def generate_insights():
    """
    Generate insights for specific contexts.

    Body:
        contextIds: non-empty list of context ids
        type: optional insight type filter
        minConfidence: optional threshold (default 0.7)
    """
    data = get_json_body()
    context_ids = require_context_ids(data)

    insight_type = None
    if data.get('type'):
        insight_type = parse_insight_type(data['type'])

    min_confidence = DEFAULT_MIN_CONFIDENCE
    if data.get('minConfidence') is not None:
        min_confidence = parse_confidence(data['minConfidence'])

    insights = get_services().insights.generate(
        context_ids, type=insight_type, min_confidence=min_confidence
    )
    return api_response(
        _dump(insights),
        message=f'Generated {len(insights)} insights for {len(context_ids)} contexts'
    )


@insights_api.route('/<insight_id>', methods=['GET'])
def get_insight(insight_id):
    return api_response(get_services().insights.get_insight(insight_id).to_dict())


# =============================================================================
# Connection Endpoints
# =============================================================================

@insights_api.route('/connections/all', methods=['GET'])
def all_connections():
    return api_response(_dump(get_services().connections.all_connections()))


@insights_api.route('/connections/generate', methods=['POST'])
def generate_connections():
    """
    Connect every not-yet-connected pair among the given contexts.

    Body:
        contextIds: non-empty list of context ids
    """
    context_ids = require_context_ids(get_json_body())
    created = get_services().connections.generate_between(context_ids)
    return api_response(
        _dump(created),
        message=f'Generated {len(created)} connections for {len(context_ids)} contexts'
    )


@insights_api.route('/connections/<context_id>', methods=['GET'])
def connections_for_context(context_id):
    connections = get_services().connections.connections_for(context_id)
    return api_response(
        _dump(connections),
        message=f'Retrieved {len(connections)} connections for context {context_id}'
    )

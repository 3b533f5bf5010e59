"""
Context Bridge Context API

Flask Blueprint for contexts:
- List, fetch and create contexts
- Analyse a single context
- Store statistics
- All connections

Usage:
    from api.context_api import context_api
    app.register_blueprint(context_api, url_prefix='/api/context')
"""

from flask import Blueprint

from api.services import api_response, get_services
from api.error_handlers import get_json_body
from core.errors import ValidationError
from intelligence.analysis import AnalysisType

context_api = Blueprint('context', __name__)

ANALYSIS_TYPES = tuple(t.value for t in AnalysisType)


@context_api.route('', methods=['GET'])
@context_api.route('/', methods=['GET'])
def list_contexts():
    contexts = get_services().store.get_all()
    return api_response(
        [c.to_dict() for c in contexts],
        message=f'Retrieved {len(contexts)} contexts'
    )


@context_api.route('', methods=['POST'])
@context_api.route('/', methods=['POST'])
def add_context():
    """
    Create a context.

    Body:
        title, content, source (windows|macos|web) required;
        platform (defaults to source), application, url, tags optional
    """
    data = get_json_body()
    payload = {
        'title': data.get('title'),
        'content': data.get('content'),
        'source': data.get('source'),
        'platform': data.get('platform') or data.get('source'),
        'application': data.get('application'),
        'url': data.get('url'),
        'tags': data.get('tags') or [],
        'metadata': data.get('metadata'),
    }

    context = get_services().store.add(payload)
    return api_response(context.to_dict(), message='Context added successfully', status=201)


@context_api.route('/<context_id>', methods=['GET'])
def get_context(context_id):
    context = get_services().store.get_by_id(context_id)
    return api_response(context.to_dict())


@context_api.route('/<context_id>/analyze', methods=['POST'])
def analyze_context(context_id):
    """
    Analyse one context against the rest of the store.

    Body (optional):
        analysisType: full | quick | connections-only
    """
    data = get_json_body()
    analysis_type = data.get('analysisType') or AnalysisType.FULL.value
    if analysis_type not in ANALYSIS_TYPES:
        raise ValidationError(
            f'analysisType must be one of: {", ".join(ANALYSIS_TYPES)}',
            param='analysisType'
        )

    result = get_services().analyzer.analyze(context_id, analysis_type)
    return api_response(result.to_dict(), message='Context analysis completed')


@context_api.route('/stats', methods=['GET'])
@context_api.route('/api/stats', methods=['GET'])
def get_stats():
    return api_response(get_services().store.stats().to_dict())


@context_api.route('/connections/all', methods=['GET'])
def get_all_connections():
    connections = get_services().connections.all_connections()
    return api_response([c.to_dict() for c in connections])

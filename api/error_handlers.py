"""
Context Bridge Error Handling

Provides:
- Flask error handlers rendering the {success, error} response envelope
- Request validation helpers for query and body parameters

Usage:
    from api.error_handlers import setup_error_handlers, parse_limit

    setup_error_handlers(app)

    limit = parse_limit(request.args.get('limit'))
"""

import logging
import math
import traceback

from flask import current_app, jsonify, request

from core.errors import ContextBridgeError, ValidationError
from core.models import InsightType

logger = logging.getLogger('context_bridge.errors')

INSIGHT_TYPES = tuple(t.value for t in InsightType)


# =============================================================================
# Error Handlers
# =============================================================================

def setup_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(ContextBridgeError)
    def handle_bridge_error(error):
        """Handle NotFoundError, ValidationError and friends."""
        logger.warning(
            f'{error.error_type}: {error.message}',
            extra={
                'error_type': error.error_type,
                'details': error.details,
                'path': request.path
            }
        )

        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response

    @app.errorhandler(400)
    def handle_bad_request(error):
        """Handle bad request errors (e.g. unparseable JSON)."""
        return jsonify({
            'success': False,
            'error': str(error.description) if hasattr(error, 'description') else 'Bad request'
        }), 400

    @app.errorhandler(404)
    def handle_not_found(error):
        """Handle unknown routes."""
        return jsonify({
            'success': False,
            'error': f'Resource not found: {request.path}'
        }), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({
            'success': False,
            'error': f'Method {request.method} not allowed for {request.path}'
        }), 405

    @app.errorhandler(500)
    def handle_internal_error(error):
        """Handle internal server errors."""
        logger.exception(
            f'Internal server error: {str(error)}',
            extra={'path': request.path}
        )

        # Don't expose internal error details in production
        message = str(error) if current_app.debug else 'An internal error occurred'
        return jsonify({'success': False, 'error': message}), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Handle any unexpected errors."""
        # Let Flask render its own HTTP errors (404 for unknown routes etc.)
        code = getattr(error, 'code', None)
        if isinstance(code, int) and code < 500:
            return jsonify({
                'success': False,
                'error': getattr(error, 'description', str(error))
            }), code

        logger.exception(
            f'Unexpected error: {type(error).__name__}: {str(error)}',
            extra={
                'error_type': type(error).__name__,
                'path': request.path
            }
        )

        if current_app.debug:
            return jsonify({
                'success': False,
                'error': str(error) or 'Unknown error occurred',
                'type': type(error).__name__,
                'traceback': traceback.format_exc()
            }), 500

        return jsonify({
            'success': False,
            'error': 'An unexpected error occurred'
        }), 500


# =============================================================================
# Request Validation
# =============================================================================

def parse_insight_type(value) -> InsightType:
    """
    Parse an insight type parameter.

    Raises:
        ValidationError: if the value is not one of the known types
    """
    try:
        return InsightType(value)
    except ValueError:
        raise ValidationError(
            f'Invalid insight type. Must be one of: {", ".join(INSIGHT_TYPES)}',
            param='type',
            value=value
        )


def parse_confidence(value, param='minConfidence') -> float:
    """Parse a confidence threshold in [0, 1]."""
    if isinstance(value, bool):
        value = None
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        confidence = None

    if confidence is None or math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
        raise ValidationError(
            f'{param} must be a number between 0 and 1',
            param=param,
            value=value
        )
    return confidence


def parse_limit(value, param='limit') -> int:
    """Parse a positive integer limit."""
    try:
        limit = int(str(value).strip())
    except (TypeError, ValueError):
        limit = 0

    if limit < 1:
        raise ValidationError(
            f'Invalid {param} value. Must be a positive number',
            param=param,
            value=value
        )
    return limit


def get_json_body() -> dict:
    """Request JSON body as a dict; an absent body reads as {}."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def require_context_ids(data: dict) -> list:
    """
    Extract a non-empty contextIds list from a request body.

    Raises:
        ValidationError: if missing, not a list, empty, or holding non-strings
    """
    context_ids = data.get('contextIds')
    if not isinstance(context_ids, list) or not context_ids:
        raise ValidationError('contextIds array is required and must not be empty')

    if not all(isinstance(cid, (str, int)) and not isinstance(cid, bool) for cid in context_ids):
        raise ValidationError('contextIds must contain only string ids')

    return [str(cid) for cid in context_ids]

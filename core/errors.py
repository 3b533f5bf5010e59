"""
Context Bridge Exceptions

The engine raises only ValidationError and NotFoundError. The Flask layer
(api.error_handlers) turns any ContextBridgeError into a JSON response using
its status_code.

Usage:
    from core.errors import NotFoundError

    if context is None:
        raise NotFoundError(f"Context with id {context_id} not found", context_id=context_id)
"""


class ContextBridgeError(Exception):
    """Base exception for Context Bridge errors."""

    status_code = 500
    error_type = 'internal_error'
    message = 'An unexpected error occurred'

    def __init__(self, message=None, **kwargs):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = kwargs

    def to_dict(self):
        return {
            'success': False,
            'error': self.message,
            'errorType': self.error_type,
            'details': self.details
        }


class NotFoundError(ContextBridgeError):
    """Context or insight lookup found no record."""
    status_code = 404
    error_type = 'not_found'
    message = 'Resource not found'


class ValidationError(ContextBridgeError):
    """Malformed input data."""
    status_code = 400
    error_type = 'validation_error'
    message = 'Invalid input'

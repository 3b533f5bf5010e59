"""
HTTP layer for Context Bridge.

Usage:
    from api import create_app

    app = create_app()
    app.run(port=5000)
"""

from .app import create_app
from .services import BridgeServices, get_services

__all__ = [
    'BridgeServices',
    'create_app',
    'get_services',
]

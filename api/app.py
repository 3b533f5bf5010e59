#!/usr/bin/env python3
"""
Context Bridge Web Server

Flask application exposing the context analysis engine:
- /api/context   contexts, stats, analysis, connections
- /api/insights  insight queries and generation, connection generation
- /api/health, /health, /ready  health checks

Start with:
    python -m api.app
    context-bridge
"""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from api.services import BridgeServices
from core.config import AppConfig, load_config
from store import ContextStore, load_seed

logger = logging.getLogger('context_bridge.app')

VERSION = '1.0.0'


def build_store(config: AppConfig) -> ContextStore:
    if config.seed_data_path is None:
        logger.info('Seeding disabled; starting with an empty store')
        return ContextStore()
    return ContextStore.from_seed(load_seed(config.seed_data_path))


def create_app(config: Optional[AppConfig] = None, store: Optional[ContextStore] = None) -> Flask:
    """
    Application factory.

    Args:
        config: Settings (default: load_config())
        store: Pre-built store; built from the seed fixture when omitted

    Returns:
        Configured Flask app
    """
    config = config or load_config()

    app = Flask(__name__)
    app.config['VERSION'] = VERSION
    app.config['BRIDGE_CONFIG'] = config

    from api.logging_config import setup_logging, setup_request_logging
    setup_logging(app, level=config.log_level, json_format=config.is_production)
    setup_request_logging(app)

    CORS(app, origins=config.cors_origins)

    services = BridgeServices.build(store if store is not None else build_store(config))
    app.extensions['context_bridge'] = services

    from api.error_handlers import setup_error_handlers
    setup_error_handlers(app)

    from api.health import health_bp
    from api.context_api import context_api
    from api.insights_api import insights_api

    app.register_blueprint(health_bp)
    app.register_blueprint(context_api, url_prefix='/api/context')
    app.register_blueprint(insights_api, url_prefix='/api/insights')

    logger.info(
        'Context Bridge app created',
        extra={'contexts': len(services.store), 'env': config.env}
    )
    return app


def main():
    config = load_config()
    app = create_app(config)
    logger.info(f'Context Bridge server running on port {config.port}')
    app.run(host=config.host, port=config.port, debug=not config.is_production, threaded=True)


if __name__ == '__main__':
    main()

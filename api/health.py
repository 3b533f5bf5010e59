"""
Context Bridge Health Checks

Endpoints:
- /api/health - status line used by the web client
- /health - liveness probe (is the process alive?)
- /ready - readiness probe (is the store initialised?)
- /health/detailed - store counts, dependencies and process resources
"""

import sys
import time
from datetime import datetime, timezone

import psutil
from flask import Blueprint, current_app, jsonify

health_bp = Blueprint('health', __name__)

STARTUP_TIME = time.time()


def check_store():
    """Report whether the engine store is attached and what it holds."""
    services = current_app.extensions.get('context_bridge')
    if services is None:
        return {'status': 'error', 'error': 'Context store not initialised'}

    stats = services.store.stats()
    return {
        'status': 'ok',
        'contexts': stats.total_contexts,
        'insights': stats.total_insights,
        'connections': stats.total_connections,
    }


def check_dependencies():
    """Check if required dependencies are importable."""
    deps = {}
    for module in ['flask', 'flask_cors', 'yaml', 'dotenv', 'psutil']:
        try:
            __import__(module)
            deps[module] = {'status': 'ok'}
        except ImportError:
            deps[module] = {'status': 'missing'}
    return deps


def get_system_resources():
    """Get current process resource usage."""
    try:
        process = psutil.Process()
        return {
            'memory': {
                'rss_mb': round(process.memory_info().rss / 1024 / 1024, 2),
                'percent': round(process.memory_percent(), 2)
            },
            'cpu': {
                'num_threads': process.num_threads()
            }
        }
    except psutil.Error as e:
        return {'status': 'error', 'error': str(e)}


@health_bp.route('/api/health')
def api_health():
    return jsonify({
        'status': 'Context Bridge API is running',
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
    })


@health_bp.route('/health')
def liveness():
    """Returns 200 while the process can respond."""
    return jsonify({
        'status': 'ok',
        'uptime_seconds': int(time.time() - STARTUP_TIME)
    })


@health_bp.route('/ready')
def readiness():
    """Returns 200 once the store is attached to the app."""
    store_check = check_store()
    is_ready = store_check.get('status') == 'ok'

    response = {
        'status': 'ready' if is_ready else 'not_ready',
        'checks': {'store': store_check.get('status')}
    }
    return jsonify(response), 200 if is_ready else 503


@health_bp.route('/health/detailed')
def detailed_health():
    """Full diagnostic report."""
    return jsonify({
        'status': 'ok',
        'version': current_app.config.get('VERSION', 'unknown'),
        'uptime_seconds': int(time.time() - STARTUP_TIME),
        'python_version': sys.version,
        'checks': {
            'store': check_store(),
            'dependencies': check_dependencies()
        },
        'resources': get_system_resources()
    })

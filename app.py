"""
Flask Web API for administrative unit search.
Autocomplete / address-validation front-ends call these endpoints.

The engine is built once in create_app(), before any request is served:
    flask --app app run
"""
from flask import Flask, request, jsonify, current_app
from werkzeug.exceptions import InternalServerError
import logging
import time

from admin_search.config import LEVELS, DEFAULT_LIMIT, DATA_DIR
from admin_search.pipeline import AdminSearchEngine

logger = logging.getLogger(__name__)


def get_engine() -> AdminSearchEngine:
    return current_app.config['ENGINE']


def _error(message: str, status: int):
    return jsonify({
        'success': False,
        'error': message
    }), status


def internal_error(error: InternalServerError):
    """Unhandled errors still answer with the JSON envelope"""
    original = getattr(error, 'original_exception', None)
    logger.error(f"Unhandled error on {request.method} {request.path}: {original or error}")
    return _error('Internal server error', 500)


def health():
    """Health check with unit counts"""
    engine = get_engine()
    return jsonify({
        'success': True,
        'status': 'ok',
        'stats': engine.get_stats()
    })


def search():
    """Fuzzy search: /search?q=Nakawa, Kampala&limit=10"""
    query = (request.args.get('q') or '').strip()
    if not query:
        return _error('Query parameter "q" is required', 400)

    limit_raw = request.args.get('limit', str(DEFAULT_LIMIT))
    try:
        limit = int(limit_raw)
    except ValueError:
        return _error(f'Invalid limit: {limit_raw}', 400)

    start_time = time.time()
    results = get_engine().search(query, limit)
    elapsed = (time.time() - start_time) * 1000

    return jsonify({
        'success': True,
        'query': query,
        'count': len(results),
        'results': results,
        'metadata': {'total_time_ms': round(elapsed, 3)}
    })


def exact():
    """Exact substring search: /exact?q=gulu"""
    query = (request.args.get('q') or '').strip()
    if not query:
        return _error('Query parameter "q" is required', 400)

    results = get_engine().exact_search(query)
    return jsonify({
        'success': True,
        'query': query,
        'count': len(results),
        'results': results
    })


def hierarchy(level, unit_id):
    """Ancestor ids and names of one unit"""
    if level not in LEVELS:
        return _error(f'Unknown level: {level}', 404)

    engine = get_engine()
    names = engine.hierarchy_names(level, unit_id)
    if not names:
        return _error(f'{level} {unit_id} not found', 404)

    return jsonify({
        'success': True,
        'level': level,
        'id': unit_id,
        'chain': engine.chain_of(level, unit_id),
        'names': names
    })


def create_app(engine: AdminSearchEngine = None, data_dir=DATA_DIR) -> Flask:
    """
    Create the app with a ready engine.

    Args:
        engine: Prebuilt engine (tests inject their own)
        data_dir: JSON data directory used when no engine is given

    Raises:
        FileNotFoundError: If data_dir lacks a data file
    """
    if engine is None:
        logger.info(f"Loading reference data from {data_dir}")
        engine = AdminSearchEngine.from_json(data_dir)

    app = Flask(__name__)
    app.config['ENGINE'] = engine
    app.json.sort_keys = False

    app.add_url_rule('/health', view_func=health)
    app.add_url_rule('/search', view_func=search)
    app.add_url_rule('/exact', view_func=exact)
    app.add_url_rule('/hierarchy/<level>/<unit_id>', view_func=hierarchy)
    app.register_error_handler(InternalServerError, internal_error)

    return app


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    create_app().run(debug=True, host='0.0.0.0', port=9797)

# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
from config import Config
from database import Base, create_db_engine, make_session_factory
from routes.bible import bible_bp
from routes.comments import comments_bp
from utils.errors import InvalidInput, StoreFailure
from utils.store import TIE_BREAKS, CorpusStore
import models  # noqa: F401  registers ORM tables on Base
import logging
import time
import sys

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "/api/books",
    "/api/books/:book",
    "/api/chapters/:book",
    "/api/verses/:book/:chapter",
    "/api/verse/:book/:chapter/:verse",
    "/api/nav/book/:book",
    "/api/nav/chapter/:book/:chapter",
    "/api/nav/verse/:book/:chapter/:verse",
    "/api/search?q=...&mode=substring|exact",
    "/api/tokens/:verseId",
    "/api/lexicon/:strong",
    "/api/comments",
]


def configure_logging(level='INFO'):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def _check_config(config):
    for key in ('SEARCH_LIMIT', 'EXACT_SEARCH_LIMIT'):
        if int(config[key]) < 0:
            raise ValueError(f"{key} must not be negative")
    if config['BOOK_TIE_BREAK'] not in TIE_BREAKS:
        raise ValueError(f"BOOK_TIE_BREAK must be one of {sorted(TIE_BREAKS)}")


def create_app(config_object=Config, engine=None):
    """Build the Flask app around an explicitly owned store.

    Pass ``engine`` to reuse an existing SQLAlchemy engine (tests do);
    otherwise one is created from DATABASE_URL.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    _check_config(app.config)
    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Use ProxyFix to handle proxy headers properly behind a hosting proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.json.compact = True
    app.url_map.strict_slashes = False

    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    if engine is None:
        engine = create_db_engine(app.config['DATABASE_URL'])
    store = CorpusStore(
        engine,
        tie_break=app.config['BOOK_TIE_BREAK'],
        use_fts=app.config['SEARCH_USE_FTS'],
    )

    try:
        Base.metadata.create_all(engine)
        logger.info(f"DB tables/views: {store.list_tables()}")
    except Exception as e:
        logger.error(f"Failed to open the corpus database: {e}")
        raise

    app.extensions['db_engine'] = engine
    app.extensions['db_session_factory'] = make_session_factory(engine)
    app.extensions['corpus_store'] = store

    app.register_blueprint(bible_bp, url_prefix='/api')
    app.register_blueprint(comments_bp, url_prefix='/api')
    register_hooks(app)
    register_error_handlers(app)
    register_service_routes(app)
    return app


def register_hooks(app):
    @app.before_request
    def before_request():
        g.start_time = time.time()
        logger.info(f"[REQ] {request.method} {request.path}")

    @app.after_request
    def after_request(response):
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"Request to {request.path} took {duration:.2f} seconds")
        return response


def register_error_handlers(app):
    @app.errorhandler(InvalidInput)
    def handle_invalid_input(err):
        logger.warning(f"Invalid input on {request.path}: {err}")
        return jsonify({"error": str(err)}), 400

    @app.errorhandler(StoreFailure)
    def handle_store_failure(err):
        logger.error(f"Store failure on {request.path}: {err} (cause: {err.cause})")
        return jsonify({"error": "store failure"}), 500

    @app.errorhandler(404)
    def handle_not_found(err):
        return jsonify({"error": "Not Found", "path": request.path}), 404


def register_service_routes(app):
    @app.route('/', methods=['GET'])
    def index():
        return jsonify({
            'message': 'Eden Bible API - healthy',
            'note': 'Use /api/* endpoints',
            'endpoints': ENDPOINTS,
        })

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint that also verifies the store connection"""
        try:
            app.extensions['corpus_store'].ping()
            return jsonify({
                'status': 'healthy',
                'database': 'connected',
                'timestamp': time.time()
            })
        except StoreFailure as e:
            logger.error(f"Health check failed: {e}")
            return jsonify({
                'status': 'unhealthy',
                'error': str(e),
                'timestamp': time.time()
            }), 500


if __name__ == '__main__':
    application = create_app()
    port = application.config['PORT']
    logger.info(f"Eden Bible API running on http://localhost:{port}")
    application.run(debug=True, port=port)

import os
import logging
from datetime import datetime
from typing import Any, Mapping, Optional
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Flask specific imports ---
from flask import Flask, request, g
from flask_cors import CORS

from config import Config
from songlib.database.db_manager import initialize_database
from songlib.domain.catalog import SongDetailClient, SongService
from songlib.interfaces.http.routes import songs_bp, health_bp, openapi_bp
from songlib.observability import (
    JsonFormatter,
    RequestContextFilter,
    configure_structured_logging,
    init_tracing,
    metrics_blueprint,
)


logger = logging.getLogger(__name__)


def configure_logging(log_dir: str) -> str:
    """Write this run's song service logs to ``<log_dir>/songlib-<timestamp>.log``.

    The file gets the same JSON records as stdout, so request ids and song
    fields (``song_id``, ``operation``, ``outcome``) can be grepped per run.
    A plain WARNING+ console handler is added when ENABLE_CONSOLE_LOGS is set.
    Calling it again swaps the file handler rather than stacking another.
    """
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f"songlib-{datetime.now():%Y%m%d-%H%M%S}.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    for handler in [h for h in root.handlers if isinstance(h, logging.FileHandler)]:
        root.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(JsonFormatter())
    file_handler.addFilter(RequestContextFilter())
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
        root.addHandler(console_handler)

    # Werkzeug access lines go through root so they land in the same file
    werkzeug_logger = logging.getLogger("werkzeug")
    werkzeug_logger.handlers = []
    werkzeug_logger.propagate = True

    return log_path


def create_app(test_config: Optional[Mapping[str, Any]] = None, *, detail_client=None):
    """Build the Flask app.

    ``test_config`` overrides values loaded from ``Config``; ``detail_client``
    replaces the HTTP client for the external song detail service.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    configure_structured_logging(app)
    init_tracing(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid4().hex

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault('X-Request-ID', g.request_id)
        return response

    allowed_origins = sorted({
        origin.strip()
        for origin in app.config.get('CORS_ALLOWED_ORIGINS', ())
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(app, resources={r"/songs.*": {"origins": allowed_origins}})

    # Initialize database
    initialize_database(app)

    if detail_client is None:
        detail_client = SongDetailClient(
            app.config.get('EXTERNAL_API_URL', ''),
            timeout=app.config.get('EXTERNAL_API_TIMEOUT_SECONDS', 10.0),
        )
        if not detail_client.configured:
            app.logger.warning("EXTERNAL_API_URL is not set; song creation will fail until it is configured.")
    app.extensions['detail_client'] = detail_client

    # Orchestrator with explicit dependencies; routes reach it via current_app.extensions
    app.extensions['song_service'] = SongService(detail_client)

    # --- Register Blueprints ---
    app.register_blueprint(songs_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(metrics_blueprint)
    app.register_blueprint(openapi_bp)

    return app


if __name__ == '__main__':
    # Configure logging:
    # - In debug with reloader: only in the child process to avoid duplicate files
    # - In non-debug: always configure here
    debug_mode = bool(Config.DEBUG)
    log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'songlib', 'log')
    if not debug_mode or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        log_file_path = configure_logging(log_dir)
        logger.info("File logging initialized at %s", log_file_path)

    app = create_app()
    # Route app.logger through root handlers, keep levels consistent
    app.logger.handlers = []
    app.logger.setLevel(logging.INFO)
    app.logger.propagate = True
    logger.info("Starting song library on %s:%s", Config.HOST, Config.PORT)
    # Threaded mode: one worker thread per request, each with its own DB session
    app.run(debug=Config.DEBUG, host=Config.HOST, port=Config.PORT, threaded=True)

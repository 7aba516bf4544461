"""
Translation Service - multi-locale key/value translation store
Application factory and initialization
"""
import logging
import os
import sys
from dataclasses import dataclass

import structlog
from flask import Flask

from translation_service.cache import build_cache_backend
from translation_service.constants import BUILD_VERSION
from translation_service.db import db, init_db, migrate
from translation_service.exceptions import register_exception_handlers
from translation_service.metrics import init_metrics
from translation_service.routes.system import system_bp
from translation_service.routes.tags import tags_bp
from translation_service.routes.translations import translations_bp
from translation_service.services.export_cache import ExportCache
from translation_service.services.query_engine import QueryEngine
from translation_service.services.translation_service import TranslationService
from translation_service.settings import load_settings, verify_settings
from translation_service.utils import ColoredFormatter, FilterRemoveDateFromWerkzeugLogs

logger = structlog.get_logger('main')


@dataclass
class ServiceContainer:
    """Store and cache collaborators shared by the request handlers"""
    settings: dict
    query_engine: QueryEngine
    export_cache: ExportCache
    translations: TranslationService


def configure_logging(logging_settings):
    formatter = ColoredFormatter(
        '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, str(logging_settings.get('level', 'INFO')).upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

    use_json = logging_settings.get('format') == 'json'
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Apply filter to hide date from http access logs
    logging.getLogger('werkzeug').addFilter(FilterRemoveDateFromWerkzeugLogs())
    logging.getLogger('alembic.runtime.migration').setLevel(logging.WARNING)


def ensure_sqlite_directory(database_url):
    """File-backed SQLite needs its parent directory to exist"""
    prefix = 'sqlite:///'
    if not database_url.startswith(prefix) or database_url == prefix + ':memory:':
        return
    directory = os.path.dirname(database_url[len(prefix):])
    if directory:
        os.makedirs(directory, exist_ok=True)


def create_app(config=None, cache_backend=None):
    """
    Application factory

    `config` is merged over the loaded settings (same sections as
    DEFAULT_SETTINGS, plus an optional "flask" section copied into
    app.config). `cache_backend` replaces the configured backend.
    """
    config = dict(config or {})
    flask_config = config.pop('flask', {})
    settings = load_settings(overrides=config)

    success, errors = verify_settings(settings)
    if not success:
        raise ValueError(f"Invalid settings: {errors}")

    configure_logging(settings['logging'])
    ensure_sqlite_directory(settings['database']['url'])

    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = settings['database']['url']
    app.config["SQLALCHEMY_ECHO"] = bool(settings['database'].get('echo'))
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.json.sort_keys = False
    app.config.update(flask_config)

    # Initialize components
    db.init_app(app)
    migrate.init_app(app, db)

    # Register exception handlers
    register_exception_handlers(app)

    # Register blueprints
    app.register_blueprint(translations_bp)
    app.register_blueprint(tags_bp)
    app.register_blueprint(system_bp)

    # Wire store and cache collaborators
    cache_settings = settings['cache']
    backend = cache_backend if cache_backend is not None else build_cache_backend(cache_settings)
    query_engine = QueryEngine(db.session)
    export_cache = ExportCache(
        query_engine,
        backend,
        ttl=cache_settings['export_ttl'],
        prefix=cache_settings['key_prefix'],
    )
    services = ServiceContainer(
        settings=settings,
        query_engine=query_engine,
        export_cache=export_cache,
        translations=TranslationService(db.session, export_cache),
    )
    app.extensions['translation_service'] = services

    # Initialize metrics
    init_metrics(app, count_records=services.translations.count_records)

    # Initialize database
    init_db(app, stamp_migrations=not app.config.get('TESTING', False))

    logger.info(f"Translation service initialized (build {BUILD_VERSION}, cache backend: {backend.name})")
    return app


if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 8000))
    logger.info(f'Build Version: {BUILD_VERSION}')
    logger.info(f'Starting server on port {port}...')
    app.run(host="0.0.0.0", port=port, debug=False, use_reloader=False)

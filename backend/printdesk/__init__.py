from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def _error_payload(status: int, title: str, detail: str, kind: str):
    return {
        'error': {
            'status': status,
            'title': title,
            'detail': detail,
            'kind': kind,
        }
    }, status


def _make_engine(settings):
    db_url = settings.database_url
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        return create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if db_url.startswith('sqlite'):
        return create_engine(db_url, echo=False, future=True, connect_args={'timeout': settings.db_timeout_seconds})
    return create_engine(
        db_url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        pool_timeout=settings.db_timeout_seconds,
        connect_args={'connect_timeout': max(1, int(settings.db_timeout_seconds))},
    )


def _register_jwt_errors():
    @jwt.unauthorized_loader
    def _missing(reason):  # type: ignore
        return _error_payload(401, 'Unauthorized', reason, 'authorization')

    @jwt.invalid_token_loader
    def _invalid(reason):  # type: ignore
        return _error_payload(401, 'Unauthorized', reason, 'authorization')

    @jwt.expired_token_loader
    def _expired(header, payload):  # type: ignore
        return _error_payload(401, 'Unauthorized', 'Token has expired', 'authorization')


_register_jwt_errors()


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    from .config.settings import Settings
    from .services.events import OrderEvents, log_subscriber
    from .services.order_store import SqlOrderStore
    from .services.orders import OrderService
    from .services.storage import LocalObjectStore
    from .errors import PrintDeskError

    app = Flask(__name__)
    settings = Settings.from_env(config)

    app.config['JWT_SECRET_KEY'] = settings.jwt_secret_key
    app.config['DATABASE_URL'] = settings.database_url
    app.config['MAX_CONTENT_LENGTH'] = max(settings.uploads.document_max_bytes, settings.uploads.payment_proof_max_bytes) + 1024 * 1024
    if config:
        # allow tests or callers to override default config values
        app.config.update(config)
    app.logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    logging.getLogger('printdesk').setLevel(getattr(logging, settings.log_level, logging.INFO))

    # Database
    db_engine = _make_engine(settings)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)

    events = OrderEvents()
    events.subscribe(log_subscriber)
    store = SqlOrderStore(SessionLocal, events)
    objects = LocalObjectStore(settings.storage_root, settings.storage_bucket, settings.storage_public_url)
    app.extensions['printdesk'] = OrderService(store, objects, settings)
    app.extensions['printdesk.settings'] = settings

    from .routes.orders import orders_bp
    from .routes.files import files_bp
    from .routes.auth import auth_bp
    app.register_blueprint(orders_bp)
    app.register_blueprint(files_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')

    @app.teardown_appcontext
    def remove_session(exc):  # type: ignore
        SessionLocal.remove()

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    # Unified error handlers producing standardized JSON shape
    @app.errorhandler(PrintDeskError)
    def handle_domain_error(e):  # type: ignore
        if e.status >= 500:
            app.logger.error('%s: %s', e.kind, e.detail)
        return e.to_payload(), e.status

    @app.errorhandler(OperationalError)
    def handle_unavailable(e):  # type: ignore
        app.logger.error('Database unavailable: %s', e)
        return _error_payload(503, 'Service Unavailable', 'Database unreachable, try again shortly', 'unavailable')

    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            return _error_payload(e.code, e.name, e.description, 'http')
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return _error_payload(500, 'Internal Server Error', 'Unexpected error', 'internal')

    from .openapi import build_openapi_spec

    @app.route('/openapi.json')
    def openapi_spec():
        return build_openapi_spec()

    @app.route('/docs')
    def docs_index():
        # Lightweight HTML referencing Redoc CDN (no local install) for quick browsing
        return (
            "<!DOCTYPE html><html><head><title>PrintDesk API</title>"
            "<link rel=\"stylesheet\" href=\"https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.css\" />"
            "</head><body><redoc spec-url='/openapi.json'></redoc>"
            "<script src='https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.js'></script>"
            "</body></html>"
        )

    return app


def get_db():
    return SessionLocal()

"""
Daily Sales Report Service
Flask Application Factory.

Usage:
    from dailyreport import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, abort, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from dailyreport.config import config
from dailyreport.middleware.identity import init_identity_middleware
from dailyreport.middleware.logging_config import configure_logging
from dailyreport.middleware.rate_limiter import init_rate_limits
from dailyreport.middleware.security_headers import init_security_headers
from dailyreport.middleware.timing import init_request_timing
from dailyreport.models import db, import_all_models
from dailyreport.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """SQLite ignores foreign keys unless asked; RESTRICT/CASCADE rely on them."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # per-blueprint limits only
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: One of "development", "testing", "production".
                     Defaults to the APP_ENV env var, or "development".

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    # instantiate so ProductionConfig can refuse to start without its secrets
    app.config.from_object(config[config_name]())

    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db, directory=os.path.join(os.path.dirname(app.root_path), "migrations"))
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    init_security_headers(app)
    init_request_timing(app)
    init_identity_middleware(app)

    # ── Request guards (body size + Content-Type) ────────────────────────
    @app.before_request
    def _guard_request():
        max_len = app.config.get("MAX_CONTENT_LENGTH")
        if max_len and request.content_length and request.content_length > max_len:
            abort(413, description="Request body too large")
        if request.method in ("POST", "PUT", "PATCH") and request.path.startswith("/api/"):
            ct = request.content_type or ""
            if request.data and "json" not in ct:
                abort(415, description="Content-Type must be application/json")

    import_all_models()

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()
            app.logger.info("db.create_all() completed")

    # ── Blueprints ───────────────────────────────────────────────────────
    from dailyreport.blueprints.comment_bp import comment_bp
    from dailyreport.blueprints.customer_bp import customer_bp
    from dailyreport.blueprints.dashboard_bp import dashboard_bp
    from dailyreport.blueprints.health_bp import health_bp
    from dailyreport.blueprints.report_bp import report_bp
    from dailyreport.blueprints.sales_person_bp import sales_person_bp
    from dailyreport.blueprints.visit_bp import visit_bp

    app.register_blueprint(report_bp)
    app.register_blueprint(visit_bp)
    app.register_blueprint(comment_bp)
    app.register_blueprint(customer_bp)
    app.register_blueprint(sales_person_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(health_bp)

    register_error_handlers(app)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-demo")
    def seed_demo_cmd():
        """Load a demo hierarchy, customers and reports into an empty database."""
        from dailyreport.services.demo_seed import SeedError, seed_demo
        try:
            counts = seed_demo()
        except SeedError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Seeded: {counts}")

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app

import logging
import os

from dotenv import load_dotenv
from flask import Flask
from flask_login import LoginManager
from werkzeug.exceptions import HTTPException

# Get logger for this module
logger = logging.getLogger(__name__)

# Load environment variables conditionally
# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()

from myskin.core.api_utils import api_response  # noqa: E402
from myskin.core.config import (  # noqa: E402
    get_environment,
    get_limiter_storage_uri,
    get_max_upload_mb,
    is_rate_limit_enabled,
    is_testing,
    log_integration_config,
)


def create_app():  # noqa: C901
    env = get_environment()
    is_production = env == "production"

    app = Flask(__name__)

    # Set TESTING config from environment variable (before any other configuration)
    if is_testing():
        app.config["TESTING"] = True

    # Configure structured logging (after app creation so we can register hooks)
    from myskin.core.logging_config import setup_logging

    setup_logging(
        app=app,  # Pass app to register request/response hooks
        log_level=logging.INFO if is_production else logging.DEBUG,
        enable_sql_echo=False,
        # log_to_file controlled by LOG_TO_FILE env var (1=files, 0=stdout only)
        use_json_format=is_production,  # JSON logs in production, colored in dev
    )
    logger.info(
        "Logging configured",
        extra={"context": {"environment": env, "json_format": is_production}},
    )
    log_integration_config()

    # Sentry: error tracking and performance monitoring
    sentry_dsn = os.getenv("SENTRY_DSN")
    if sentry_dsn:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=env,
            release=os.getenv("GIT_SHA", "unknown"),
            integrations=[
                FlaskIntegration(),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=0.1,
            send_default_pii=False,  # customer emails and phones stay out of Sentry
        )
        logger.info(
            "Sentry initialized",
            extra={"context": {"environment": env, "traces_sample_rate": 0.1}},
        )
    else:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": env}},
        )

    # Prometheus metrics on /metrics
    # MUST be initialized BEFORE limiter to avoid being rate-limited
    from prometheus_client import CollectorRegistry
    from prometheus_flask_exporter import PrometheusMetrics

    # A registry per app keeps repeated create_app() calls (tests) from
    # registering the same collectors twice
    metrics = PrometheusMetrics(app, registry=CollectorRegistry())
    try:
        metrics.info(
            "app_info",
            "Application information",
            version=os.getenv("GIT_SHA", "unknown"),
            environment=env,
        )
    except ValueError as e:
        logger.debug(
            "app_info metric already registered",
            extra={"context": {"error": str(e)}},
        )

    # Configuration
    app.config["SECRET_KEY"] = os.getenv("FLASK_SECRET_KEY", "dev-secret-change-me")
    app.config["MAX_CONTENT_LENGTH"] = get_max_upload_mb() * 1024 * 1024
    app.config["LOGIN_DISABLED"] = os.getenv("LOGIN_DISABLED", "false").lower() == "true"

    # Flask-Limiter (rate limiting) bound to the global instance used by decorators
    from myskin.core.limiter_config import limiter

    app.config["RATELIMIT_STORAGE_URI"] = get_limiter_storage_uri()
    limiter.init_app(app)

    if app.config.get("TESTING") and not is_rate_limit_enabled():
        limiter.enabled = False
        logger.info(
            "Rate limiting disabled for testing", extra={"context": {"test_mode": True}}
        )

    # Production validation: fail fast if weak secrets are used
    if is_production:
        weak_secrets = ["dev-secret-change-me", "dev-jwt-secret-change-me", "secret123"]
        secret_key = app.config["SECRET_KEY"]
        if secret_key in weak_secrets or len(secret_key) < 32:
            raise ValueError(
                "Production deployment requires strong SECRET_KEY (min 32 chars). "
                "Set FLASK_SECRET_KEY environment variable."
            )

    # Cookie and session hardening
    app.config.setdefault("SESSION_COOKIE_SECURE", is_production)
    app.config.setdefault("SESSION_COOKIE_HTTPONLY", True)
    app.config.setdefault("SESSION_COOKIE_SAMESITE", "Lax")
    app.config.setdefault("REMEMBER_COOKIE_SECURE", is_production)
    app.config.setdefault("REMEMBER_COOKIE_HTTPONLY", True)

    # CSRF protection
    from myskin.core.csrf_config import csrf

    csrf.init_app(app)
    app.config["WTF_CSRF_TIME_LIMIT"] = None  # Tokens don't expire
    app.config["WTF_CSRF_SSL_STRICT"] = is_production
    app.config["WTF_CSRF_CHECK_DEFAULT"] = (
        False  # Disable referrer check (breaks with no-referrer policy)
    )

    # Security headers with Talisman in production
    if is_production:
        from flask_talisman import Talisman

        csp = {
            "default-src": ["'self'"],
            "script-src": ["'self'", "https://js.paystack.co"],
            "frame-src": ["'self'", "https://checkout.paystack.com"],
            "object-src": ["'none'"],
            "img-src": ["'self'", "data:"],
        }
        Talisman(
            app,
            content_security_policy=csp,
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=63072000,
            strict_transport_security_include_subdomains=True,
            frame_options="DENY",
            referrer_policy="no-referrer",
        )

    # Flask-Login for storefront customers
    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        """JSON API: answer 401 instead of redirecting to a login page."""
        return api_response(False, "Authentication required", None, 401)

    from myskin.db.base import Customer
    from myskin.db.session import SessionLocal

    @login_manager.user_loader
    def load_user(user_id):
        with SessionLocal() as db:
            return db.get(Customer, int(user_id))

    # Ensure database tables exist early; idempotent on SQLite and PostgreSQL
    try:
        from myskin.db.seed import ensure_admin_from_env
        from myskin.db.session import create_tables

        create_tables()
        ensure_admin_from_env()
    except Exception as e:
        logger.warning(
            "Database initialization failed",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )

    # Register blueprints
    from myskin.controllers.admin_controller import admin_bp
    from myskin.controllers.auth_controller import auth_bp
    from myskin.controllers.booking_controller import booking_bp
    from myskin.controllers.cart_controller import cart_bp
    from myskin.controllers.catalog_controller import catalog_bp
    from myskin.controllers.checkout_controller import checkout_bp
    from myskin.controllers.contact_controller import contact_bp
    from myskin.controllers.content_controller import content_bp
    from myskin.controllers.health_controller import health_bp
    from myskin.controllers.job_controller import job_bp
    from myskin.controllers.uploads_controller import uploads_bp

    api_blueprints = [
        admin_bp,
        auth_bp,
        booking_bp,
        cart_bp,
        catalog_bp,
        checkout_bp,
        contact_bp,
        content_bp,
        job_bp,
    ]
    for bp in api_blueprints:
        # JSON endpoints are called with fetch; SameSite cookies guard them
        csrf.exempt(bp)
        app.register_blueprint(bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(uploads_bp)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return api_response(False, e.description or e.name, None, e.code or 500)

    @app.cli.command("seed-categories")
    def seed_categories_command():
        """Insert the default product categories."""
        from myskin.db.seed import seed_categories

        print(f"Seeded {seed_categories()} categories")

    logger.info(
        "Application created",
        extra={"context": {"blueprints": sorted(app.blueprints.keys())}},
    )
    return app

"""Initialize the Flask app and its extensions."""

import os

from flask import Flask, g, redirect, url_for
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.session import SessionContext
from .extensions import csrf

DEFAULT_API_BASE_URL = "http://localhost:8000"


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(
        __name__,
        instance_relative_config=True,
        static_folder="static",
        static_url_path="/static",
    )

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        API_BASE_URL=os.environ.get("API_BASE_URL") or DEFAULT_API_BASE_URL,
        API_TIMEOUT=float(os.environ.get("API_TIMEOUT") or 15),
        API_TRANSPORT=None,
        RESULT_REDIRECT_DELAY=int(os.environ.get("RESULT_REDIRECT_DELAY") or 1),
        RESET_REDIRECT_DELAY=int(os.environ.get("RESET_REDIRECT_DELAY") or 2),
    )

    if test_config:
        app.config.update(test_config)

    if not os.environ.get("API_BASE_URL") and not app.config.get("TESTING"):
        app.logger.warning(
            f"API_BASE_URL is not set, using {app.config['API_BASE_URL']}"
        )

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import tournament as tournament_bp

    app.register_blueprint(tournament_bp.bp)

    from . import match as match_bp

    app.register_blueprint(match_bp.bp)

    from . import group as group_bp

    app.register_blueprint(group_bp.bp)

    from . import viewer as viewer_bp

    app.register_blueprint(viewer_bp.bp)

    from . import support as support_bp

    app.register_blueprint(support_bp.bp)

    from . import admin as admin_bp

    app.register_blueprint(admin_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    from .utils import register_filters

    register_filters(app)

    @app.route("/")
    def index():
        """Send the visitor to their landing page."""
        session_ctx = g.session_ctx
        if not session_ctx.is_authenticated:
            return redirect(url_for("auth.login"))
        if session_ctx.is_admin:
            return redirect(url_for("admin.dashboard"))
        return redirect(url_for("user.dashboard"))

    @app.before_request
    def load_session_context():
        """Load the bearer token and admin flag into g."""
        g.session_ctx = SessionContext.load()

    @app.context_processor
    def inject_session():
        """Expose the session context and app version to templates."""
        return dict(
            session_ctx=getattr(g, "session_ctx", None),
            app_version=os.environ.get("APP_VERSION", "dev"),
        )

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app

"""
Application factory for the couples dashboard layout service.

This module provides a function to create and configure the Flask
application. All extensions (SQLAlchemy, Migrate, JWT) are initialised
here, the widget catalog is built from configuration, and the
blueprints for couple layouts, individual overrides and layout
templates are registered.

Environment variables control the database connection, the secret
used to verify access tokens, and the log level. In production, set
``DATABASE_URL`` and ``JWT_SECRET_KEY`` in your environment. A default
configuration is provided for development, using SQLite when no
database URL is available.
"""

from __future__ import annotations

import logging
import os

from flask import Flask
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager

# instantiate extensions without binding them to an app yet.  They will
# be bound in create_app().
from .db import db  # use shared db object from db.py
migrate = Migrate()
jwt = JWTManager()


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure a Flask application.

    Parameters
    ----------
    test_config: dict | None, optional
        Optional configuration overrides used when running tests.

    Returns
    -------
    Flask
        A configured Flask application instance.
    """
    app = Flask(__name__)

    # Default configuration. Override using environment variables or
    # by passing a ``test_config`` mapping.
    app.config.update(
        SQLALCHEMY_DATABASE_URI=os.environ.get("DATABASE_URL", "sqlite:///couples_dashboard.db"),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        JWT_SECRET_KEY=os.environ.get("JWT_SECRET_KEY", "please-change-this-secret-key"),
        LOG_LEVEL=os.environ.get("LOG_LEVEL", "INFO"),
        WIDGET_CATALOG=None,
    )

    if test_config:
        app.config.update(test_config)

    # No-op when the host (gunicorn, pytest) has already configured logging.
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger(__name__).setLevel(app.config["LOG_LEVEL"])

    # Initialise extensions with the app
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # The catalog is configuration: built once, never mutated.
    from .catalog import WidgetCatalog
    app.extensions["widget_catalog"] = WidgetCatalog.from_config(app.config["WIDGET_CATALOG"])

    # Register custom error handlers
    from .errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints. Importing here avoids circular imports.
    from .routes.couple_layouts import couple_layouts_bp
    from .routes.individual_layouts import individual_layouts_bp
    from .routes.layout_templates import layout_templates_bp

    app.register_blueprint(couple_layouts_bp, url_prefix="/api")
    app.register_blueprint(individual_layouts_bp, url_prefix="/api")
    app.register_blueprint(layout_templates_bp, url_prefix="/api")

    # Provide a simple health check route
    @app.route("/api/health")
    def health_check() -> dict[str, str]:
        """Return a simple health check response.

        This endpoint can be used by deployment platforms to verify
        that the application has started correctly.
        """
        return {"status": "ok"}

    return app

"""
Flask Application Factory

Creates and configures the Flask application instance.
"""

import logging
from datetime import timedelta
from flask import Flask

from config import settings
from config.database import init_engine, init_database
from utils import format_report_time
from webapp.gate import register_gate
from webapp.session_store import DatabaseSessionInterface
from webapp.routes import api, auth, pages, reports, slopes

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Sorry, can't find that!"


def create_app(overrides=None):
    """
    Create and configure the Flask application.

    Args:
        overrides (dict, optional): Config values applied after the environment settings,
            e.g. {'DATABASE_URL': 'sqlite:///test.db'}

    Returns:
        Flask: The configured application
    """
    settings.configure_logging()

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=settings.SECRET_KEY,
        DATABASE_URL=settings.DATABASE_URL,
        SESSION_COOKIE_NAME=settings.SESSION_COOKIE_NAME,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        PERMANENT_SESSION_LIFETIME=timedelta(hours=settings.SESSION_LIFETIME_HOURS),
        DISPLAY_TIMEZONE=settings.DISPLAY_TIMEZONE,
    )
    if overrides:
        app.config.update(overrides)

    init_engine(app.config['DATABASE_URL'])
    init_database()

    app.session_interface = DatabaseSessionInterface()
    register_gate(app)

    for module in (pages, auth, slopes, reports, api):
        app.register_blueprint(module.bp)

    @app.template_filter('report_time')
    def report_time_filter(timestamp):
        return format_report_time(timestamp, app.config['DISPLAY_TIMEZONE'])

    @app.errorhandler(404)
    def not_found(error):
        return NOT_FOUND_MESSAGE, 404, {'Content-Type': 'text/plain; charset=utf-8'}

    logger.info(f"SlopeSense app created (database: {app.config['DATABASE_URL'].split('://')[0]})")
    return app

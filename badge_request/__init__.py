from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

from badge_request.config import Config

db = SQLAlchemy()
migrate = Migrate()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # One form controller per browser session
    from badge_request.services.form_sessions import FormSessionRegistry
    app.extensions["badge_forms"] = FormSessionRegistry(
        idle_timeout=app.config.get("FORM_SESSION_IDLE_TIMEOUT", 3600),
        max_sessions=app.config.get("FORM_SESSION_LIMIT", 1000),
    )

    # Register blueprints
    from badge_request.routes.main import bp as main_bp
    from badge_request.routes.api import bp as api_bp
    from badge_request.routes.settings import bp as settings_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(settings_bp, url_prefix="/settings")

    # Register the models with db.metadata
    from badge_request import models

    return app

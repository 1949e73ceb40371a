from flask import Flask
from .config import load_config
from .routes import build_routes
from .models.database import Database
from .utils.logging import configure_logging, logger


def create_app(config=None, database=None):
    """Build one ingestion service instance.

    ``config`` holds environment-style overrides (``BACKEND``, ``DATABASE_URL``...).
    ``database`` lets callers share an existing Database handle between apps.
    """
    settings = load_config(**(config or {}))
    configure_logging(settings["LOG_LEVEL"], settings["LOG_DIR"])

    # Create Flask app
    app = Flask(__name__)
    app.config.update(settings)

    # --- Database setup ---
    db = database or Database.from_config(settings)
    app.extensions["ingestion.db"] = db
    if settings["DB_CREATE_SCHEMA"]:
        try:
            db.create_schema()
            logger.info("Database tables initialized")
        except Exception as e:
            # the service still starts; uploads fail with 500 until the database is reachable
            logger.error(f"Database schema check failed: {e}")

    # --- Register routes blueprint ---
    identity = settings["BACKEND_IDENTITY"]
    app.register_blueprint(build_routes(identity))

    logger.info(f"{identity.name} app created successfully")
    return app

import logging
import time
from typing import Optional

from flask import Flask, jsonify, g, request
from flask_cors import CORS
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from config import Settings
from models import Base
from models.user import User  # ensure model is registered before create_all
from models.todo import TodoItem  # ensure model is registered before create_all
from services.token_service import TokenService
from utils.observability import setup_logging

logger = logging.getLogger("dotrack.request")


def create_app(settings: Optional[Settings] = None):
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_format)

    app = Flask(__name__)

    # Config
    app.config["SETTINGS"] = settings
    app.config["DEFAULT_LIST_LIMIT"] = settings.default_list_limit

    # Enable CORS
    CORS(app)

    engine = create_engine(settings.database_url, echo=False, future=True)
    Base.metadata.create_all(engine)
    SessionLocal = scoped_session(sessionmaker(bind=engine, autoflush=False, autocommit=False))

    app.extensions["token_service"] = TokenService(settings)
    app.extensions["db_engine"] = engine

    @app.before_request
    def create_session():
        g.db = SessionLocal()
        g.started_at = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = getattr(g, "started_at", None)
        latency_ms = round((time.perf_counter() - started) * 1000, 2) if started else None
        logger.info(
            "%s %s %s %sms", response.status_code, request.method, request.path, latency_ms,
            extra={
                "method": request.method,
                "path": request.path,
                "status": response.status_code,
                "latency_ms": latency_ms,
            },
        )
        return response

    @app.teardown_request
    def shutdown_session(exception=None):
        db_session = getattr(g, "db", None)
        if db_session is not None:
            if exception:
                db_session.rollback()
            db_session.close()
        SessionLocal.remove()

    # Health check
    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok"})

    # Blueprints
    from routes.auth_routes import auth_bp
    from routes.todo_routes import todo_bp
    from routes.error_handlers import register_error_handlers

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(todo_bp, url_prefix="/api/todos")
    register_error_handlers(app)

    return app


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=5000, debug=False)

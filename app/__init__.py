"""
App package initialization
Khởi tạo Flask application và cấu hình
"""
import atexit
import os

from flask import Flask
from flask_cors import CORS

from app import config
from app.context import EXTENSION_KEY, build_app_context
from core.errors import SmartAttendError
from core.inference.engine import EmbeddingEngine, FaceRecognitionProvider
from database import DatabaseManager
from logging_config import setup_logging


def _init_embedding_engine(app, provider=None):
    """Khởi tạo embedding provider (face_recognition/dlib) và worker pool."""
    if provider is None:
        provider = FaceRecognitionProvider(
            detection_model=app.config['FACE_DETECTION_MODEL'],
            num_jitters=app.config['FACE_NUM_JITTERS'],
            logger=app.logger,
        )

    engine = EmbeddingEngine(
        provider,
        timeout=app.config['EMBEDDING_TIMEOUT_SECONDS'],
        max_workers=app.config['EMBEDDING_WORKERS'],
        logger=app.logger,
    )

    if app.config['WARMUP_ON_STARTUP']:
        try:
            engine.warmup()
            app.logger.info(f"[STARTUP] ✅ Embedding provider '{engine.name}' ready")
        except SmartAttendError as e:
            # Không dừng server; request sẽ nhận lỗi 500 rõ ràng
            app.logger.warning(f"[STARTUP] ⚠️ Could not load embedding provider: {e}")
    return engine


def create_app(config_overrides=None, *, embedding_provider=None, database=None):
    """Factory function để tạo Flask application"""
    app = Flask(__name__, static_folder='../static', static_url_path='/static')

    # Cấu hình cơ bản
    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    app.config.update(config.as_dict())
    if config_overrides:
        app.config.update(config_overrides)

    setup_logging(app, log_dir=app.config['LOG_DIR'], log_level=app.config['LOG_LEVEL'])

    app.logger.info(f"[STARTUP] Working directory: {os.getcwd()}")
    app.logger.info(f"[STARTUP] Database path: {os.path.abspath(app.config['DATABASE_PATH'])}")

    # 1. Database
    if database is None:
        database = DatabaseManager(app.config['DATABASE_PATH'])

    # 2. Embedding engine
    engine = _init_embedding_engine(app, embedding_provider)

    # 3. Context dùng chung cho mọi route
    context = build_app_context(database, engine, app.config, logger=app.logger)
    app.extensions[EXTENSION_KEY] = context
    atexit.register(context.close)
    app.logger.info("[STARTUP] ✅ All services initialized successfully")

    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}}, send_wildcard=True)

    from app.middleware.errors import register_error_handlers
    register_error_handlers(app)

    from app.routes import register_blueprints
    register_blueprints(app)

    return app

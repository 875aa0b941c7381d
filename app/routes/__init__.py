"""
Routes package
Đăng ký tất cả các blueprints
"""
from .main import main_bp
from .api_students import student_api_bp
from .api_system import system_api_bp


def register_blueprints(app):
    """Đăng ký tất cả các blueprints với Flask app."""
    app.register_blueprint(main_bp)
    app.register_blueprint(student_api_bp)
    app.register_blueprint(system_api_bp)

    app.logger.info("✅ Đã đăng ký tất cả blueprints")

"""
Error handling middleware
Chuyển mọi lỗi thành JSON {success: false, message} tại biên request
"""
import time

from flask import g, jsonify, request
from werkzeug.exceptions import HTTPException

from core.errors import SmartAttendError
from logging_config import api_logger, log_request_info


def error_response(message, status_code):
    return jsonify({'success': False, 'message': message}), status_code


def is_api_request():
    """Kiểm tra request hiện tại có thuộc API không."""
    path = request.path or ''
    return path.startswith('/api/')


def register_error_handlers(app):
    """Đăng ký error handlers và hook log request/response."""

    @app.before_request
    def _log_request():
        g.request_started = time.perf_counter()
        if is_api_request():
            log_request_info(request)

    @app.after_request
    def _log_response(response):
        if is_api_request():
            started = getattr(g, 'request_started', None)
            duration = time.perf_counter() - started if started is not None else None
            api_logger.log_response(request.path, response.status_code, duration)
        return response

    @app.errorhandler(SmartAttendError)
    def _handle_service_error(error):
        if error.status_code >= 500:
            api_logger.log_error(request.path, error.message, error.status_code)
        else:
            app.logger.info(f"[API] {request.path} -> {error.status_code}: {error.message}")
        return error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def _handle_http_error(error):
        if not is_api_request():
            return error
        return error_response(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def _handle_unexpected_error(error):
        app.logger.error(f"Unhandled error on {request.path}: {error}", exc_info=True)
        api_logger.log_error(request.path, str(error), 500)
        return error_response('Internal server error.', 500)

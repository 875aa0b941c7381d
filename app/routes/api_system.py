"""
API routes for system status
Các API cho trạng thái hệ thống
"""
from flask import Blueprint, jsonify

from app.context import get_app_context

system_api_bp = Blueprint('system_api', __name__, url_prefix='/api')


@system_api_bp.route('/status')
def api_system_status():
    """API trạng thái hệ thống"""
    payload = {'success': True}
    payload.update(get_app_context().describe())
    return jsonify(payload)

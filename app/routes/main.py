"""
Main routes
Trang chủ: trả về ứng dụng client tĩnh
"""
from flask import Blueprint, current_app

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Trang chủ - giao diện đăng ký và điểm danh."""
    return current_app.send_static_file('index.html')

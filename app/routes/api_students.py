"""
API routes for students
Các API endpoint đăng ký sinh viên và điểm danh bằng khuôn mặt
"""
from flask import Blueprint, jsonify, current_app

from app.context import get_app_context
from app.utils import get_request_data, get_text_field

student_api_bp = Blueprint('student_api', __name__, url_prefix='/api/student')


@student_api_bp.route('/enroll', methods=['POST'])
def enroll_student():
    """Đăng ký sinh viên mới với ảnh khuôn mặt."""
    data = get_request_data()
    student_id = get_text_field(data, 'id').strip()
    current_app.logger.info(f"Enroll request - ID: {student_id}, Name: {data.get('name')}")

    confirmation = get_app_context().enrollment_handler.enroll(
        student_id,
        get_text_field(data, 'name'),
        get_text_field(data, 'email'),
        get_text_field(data, 'class'),
        data.get('photoData'),
    )
    return jsonify(confirmation.to_dict()), 200


@student_api_bp.route('/all', methods=['GET'])
def get_all_students():
    """Lấy danh sách tất cả sinh viên (kèm descriptor)."""
    students = get_app_context().database.get_all_students()
    return jsonify([student.to_dict() for student in students])


@student_api_bp.route('/attendance', methods=['POST'])
def mark_attendance():
    """Điểm danh: so khớp ảnh với các sinh viên đã đăng ký."""
    data = get_request_data()
    outcome = get_app_context().attendance_matcher.match_attendance(data.get('imageData'))
    return jsonify(outcome.to_dict()), 200

"""
File utilities
Lưu ảnh đăng ký khuôn mặt xuống đĩa
"""
import logging
import os
from datetime import datetime
from pathlib import Path

from werkzeug.utils import secure_filename

from core.errors import StorageError

logger = logging.getLogger(__name__)


def safe_delete_file(path):
    """Cố gắng xóa một file mà không báo lỗi nếu thất bại."""
    if not path:
        return
    try:
        os.remove(path)
    except OSError:
        logger.debug("Could not remove file %s", path)


def _generate_face_image_filename(student_id, full_name, *, extension='jpg', timestamp=None):
    """Tạo tên file ảnh khuôn mặt an toàn."""
    safe_base = secure_filename(f"{student_id}_{full_name}".strip()) or secure_filename(student_id) or 'student'
    timestamp = timestamp or datetime.now().strftime('%Y%m%d%H%M%S%f')
    return f"{safe_base}_{timestamp}.{extension}"


def build_student_image_path(face_data_dir, student_id, filename):
    """Tạo đường dẫn đầy đủ cho file ảnh sinh viên."""
    student_dir = Path(face_data_dir) / (secure_filename(str(student_id)) or 'student')
    student_dir.mkdir(parents=True, exist_ok=True)
    return student_dir / filename


def detect_image_extension(raw):
    """Đoán phần mở rộng từ magic bytes (mặc định jpg)."""
    if raw.startswith(b'\x89PNG'):
        return 'png'
    if raw[:4] == b'RIFF' and raw[8:12] == b'WEBP':
        return 'webp'
    return 'jpg'


def save_face_image(raw, face_data_dir, student_id, full_name):
    """Ghi ảnh đã giải mã xuống data/faces/<student_id>/ và trả về đường dẫn."""
    filename = _generate_face_image_filename(
        student_id,
        full_name,
        extension=detect_image_extension(raw),
    )
    file_path = build_student_image_path(face_data_dir, student_id, filename)
    try:
        with open(file_path, 'wb') as fp:
            fp.write(raw)
    except OSError as exc:
        safe_delete_file(str(file_path))
        raise StorageError(f"Cannot save enrollment photo: {exc}") from exc
    return str(file_path)

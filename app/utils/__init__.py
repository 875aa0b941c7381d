"""
Utils package
"""
from .file_utils import (
    safe_delete_file,
    save_face_image,
    build_student_image_path,
)
from .data_utils import (
    get_request_data,
    get_text_field,
)

__all__ = [
    'safe_delete_file',
    'save_face_image',
    'build_student_image_path',
    'get_request_data',
    'get_text_field',
]

"""
Enrollment Handler - Đăng ký sinh viên bằng ảnh khuôn mặt
Business logic for enrolling a student with a face descriptor
"""
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from core.errors import InvalidRequest, NoFaceDetected, SmartAttendError
from core.models import Student
from core.vision.decoding import decode_image_bytes, payload_to_bytes
from app.utils.file_utils import save_face_image, safe_delete_file
from logging_config import face_recognition_logger


@dataclass
class EnrollmentConfirmation:
    student: Student
    message: str = "Student enrolled."

    def to_dict(self):
        return {'success': True, 'message': self.message}


class EnrollmentHandler:
    """Service đăng ký sinh viên: giải mã ảnh, lấy descriptor và lưu bản ghi"""

    def __init__(self, database, embedding_engine, face_data_dir: Optional[Path] = None, logger=None):
        self.db = database
        self.engine = embedding_engine
        self.face_data_dir = Path(face_data_dir) if face_data_dir else None
        self.logger = logger

    def enroll(
        self,
        student_id: str,
        name: str,
        email: str,
        class_name: str,
        photo,
    ) -> EnrollmentConfirmation:
        """
        Đăng ký một sinh viên.
        Không ghi bản ghi nào nếu bất kỳ bước nào thất bại.
        """
        normalized_id = (student_id or '').strip() if isinstance(student_id, str) else ''
        if not normalized_id:
            raise InvalidRequest("Student id is required.")

        raw = payload_to_bytes(photo)
        image = decode_image_bytes(raw)

        descriptor = self.engine.embed(image)
        if descriptor is None:
            face_recognition_logger.log_no_face('enroll')
            raise NoFaceDetected()

        photo_path = None
        if self.face_data_dir is not None:
            photo_path = save_face_image(raw, self.face_data_dir, normalized_id, name or '')

        student = Student(
            id=normalized_id,
            name=name or '',
            email=email or '',
            class_name=class_name or '',
            enrolled=True,
            descriptor=[float(value) for value in descriptor],
            enrollment_date=date.today(),
            photo_path=photo_path,
        )

        try:
            self.db.insert_student(student)
        except SmartAttendError:
            safe_delete_file(photo_path)
            raise

        face_recognition_logger.log_enrollment(student.id, student.name)
        if self.logger:
            self.logger.info(f"[Enrollment] ✅ {student.id} enrolled ({len(student.descriptor)}-d descriptor)")
        return EnrollmentConfirmation(student=student)

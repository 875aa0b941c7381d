"""
Attendance Matcher - Điểm danh bằng ảnh khuôn mặt
Matches a live photo against every enrolled descriptor
"""
from dataclasses import dataclass
from typing import Dict, Any

from core.attendance.matcher import MATCH_THRESHOLD, Candidate, find_best_match
from core.errors import InvalidImage, NoFaceDetected, NoMatchFound
from core.vision.decoding import decode_image_payload
from logging_config import face_recognition_logger


@dataclass
class MatchOutcome:
    student_id: str
    student_name: str
    distance: float
    confidence: str

    @property
    def message(self) -> str:
        return f"Attendance marked: {self.student_name} (Confidence: {self.confidence}%)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': True,
            'studentName': self.student_name,
            'studentId': self.student_id,
            'confidence': self.confidence,
            'message': self.message,
        }


class AttendanceMatcher:
    """Service so khớp khuôn mặt với danh sách sinh viên đã đăng ký"""

    def __init__(self, database, embedding_engine, threshold: float = MATCH_THRESHOLD, logger=None):
        self.db = database
        self.engine = embedding_engine
        self.threshold = threshold
        self.logger = logger

    def match_attendance(self, photo) -> MatchOutcome:
        """
        Tìm sinh viên có descriptor gần nhất (khoảng cách < threshold).
        Chỉ đọc, không thay đổi dữ liệu.
        """
        try:
            image = decode_image_payload(photo)
        except InvalidImage as exc:
            if self.logger:
                self.logger.info(f"[Attendance] Cannot decode photo: {exc.message}")
            raise NoFaceDetected() from exc

        query = self.engine.embed(image)
        if query is None:
            face_recognition_logger.log_no_face('attendance')
            raise NoFaceDetected()

        # Quét toàn bộ; sắp xếp theo student_id để phá hòa ổn định
        students = self.db.get_enrolled_students()
        candidates = [
            Candidate(student_id=s.id, student_name=s.name, descriptor=s.descriptor)
            for s in students
        ]

        best = find_best_match(query, candidates, threshold=self.threshold)
        if best is None:
            face_recognition_logger.log_no_match(len(candidates))
            raise NoMatchFound()

        outcome = MatchOutcome(
            student_id=best.student_id,
            student_name=best.student_name,
            distance=best.distance,
            confidence=best.confidence,
        )
        face_recognition_logger.log_attendance_marked(outcome.student_name, outcome.student_id, outcome.confidence)
        return outcome

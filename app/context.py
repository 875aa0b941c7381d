"""
Application context
Gom các service dùng chung (database, embedding engine, handlers) vào một đối tượng
được tạo một lần trong create_app và truyền cho các route qua app.extensions
"""
import atexit
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from flask import current_app

from app.models import AttendanceMatcher, EnrollmentHandler

EXTENSION_KEY = 'smartattend'


@dataclass
class AppContext:
    database: Any
    embedding_engine: Any
    enrollment_handler: EnrollmentHandler
    attendance_matcher: AttendanceMatcher
    settings: Dict[str, Any] = field(default_factory=dict)
    closed: bool = False

    def describe(self) -> Dict[str, Any]:
        info = self.embedding_engine.describe()
        info['enrolled_count'] = self.database.count_enrolled()
        info['match_threshold'] = self.attendance_matcher.threshold
        return info

    def close(self):
        """Giải phóng worker pool của embedding engine và database"""
        if self.closed:
            return
        self.closed = True
        atexit.unregister(self.close)
        try:
            self.embedding_engine.close()
        finally:
            self.database.close()
        logging.getLogger(__name__).info("[SHUTDOWN] SmartAttend context closed")


def build_app_context(database, embedding_engine, settings, logger=None) -> AppContext:
    face_data_dir = settings.get('FACE_DATA_DIR') if settings.get('STORE_ENROLLMENT_PHOTOS') else None
    return AppContext(
        database=database,
        embedding_engine=embedding_engine,
        enrollment_handler=EnrollmentHandler(
            database=database,
            embedding_engine=embedding_engine,
            face_data_dir=face_data_dir,
            logger=logger,
        ),
        attendance_matcher=AttendanceMatcher(
            database=database,
            embedding_engine=embedding_engine,
            threshold=float(settings.get('MATCH_THRESHOLD', 0.6)),
            logger=logger,
        ),
        settings=dict(settings),
    )


def get_app_context() -> AppContext:
    """Lấy AppContext của Flask app hiện tại."""
    return current_app.extensions[EXTENSION_KEY]

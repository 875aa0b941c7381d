"""
Database module for SmartAttend
Quản lý cơ sở dữ liệu SQLite cho sinh viên đã đăng ký khuôn mặt
"""

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
import logging

import numpy as np

from core.errors import DuplicateId, StorageError
from core.models import Student
from logging_config import database_logger

logger = logging.getLogger(__name__)

DESCRIPTOR_DTYPE = np.float64


def pack_descriptor(descriptor):
    """Chuyển descriptor thành BLOB (float64, little-endian)."""
    if descriptor is None:
        return None
    return np.asarray(descriptor, dtype=DESCRIPTOR_DTYPE).tobytes()


def unpack_descriptor(blob):
    """Đọc BLOB descriptor thành list[float]."""
    if not blob:
        return None
    return np.frombuffer(blob, dtype=DESCRIPTOR_DTYPE).tolist()


def _parse_date(value):
    if isinstance(value, date):
        return value
    if not value:
        return date.today()
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except ValueError:
        logger.warning(f"Unparseable enrollment_date {value!r}, using today")
        return date.today()


class DatabaseManager:
    def __init__(self, db_path="smartattend.db", timeout=10.0):
        self.db_path = str(db_path)
        self.timeout = timeout
        if self.db_path != ':memory:':
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.init_database()

    @contextmanager
    def get_connection(self):
        """Tạo kết nối database, commit khi thành công và luôn đóng kết nối."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row  # Cho phép truy cập theo tên cột
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_database(self):
        """Khởi tạo database và các bảng"""
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()

                # Bảng sinh viên; student_id là khóa tự nhiên, UNIQUE đảm bảo không trùng
                cursor.execute('''
                    CREATE TABLE IF NOT EXISTS students (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        student_id VARCHAR(64) UNIQUE NOT NULL,
                        full_name VARCHAR(100),
                        email VARCHAR(100),
                        class_name VARCHAR(100),
                        enrolled BOOLEAN DEFAULT 0,
                        face_descriptor BLOB,
                        face_image_path VARCHAR(200),
                        enrollment_date DATE,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )
                ''')

                self._ensure_column(cursor, 'students', 'descriptor_dims', 'INTEGER')
        except sqlite3.Error as exc:
            database_logger.log_error('init_database', exc)
            raise StorageError(f"Cannot initialise database: {exc}") from exc

        logger.info("Database initialised at %s", self.db_path)

    def _ensure_column(self, cursor, table_name, column_name, column_def):
        """Thêm cột nếu bảng cũ chưa có."""
        cursor.execute(f"PRAGMA table_info({table_name})")
        columns = {row['name'] for row in cursor.fetchall()}
        if column_name not in columns:
            cursor.execute(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_def}")
            logger.info("Added column %s.%s", table_name, column_name)

    def _row_to_student(self, row):
        if row is None:
            return None
        return Student(
            id=row['student_id'],
            name=row['full_name'] or '',
            email=row['email'] or '',
            class_name=row['class_name'] or '',
            enrolled=bool(row['enrolled']),
            descriptor=unpack_descriptor(row['face_descriptor']),
            enrollment_date=_parse_date(row['enrollment_date']),
            photo_path=row['face_image_path'],
        )

    def insert_student(self, student):
        """
        Thêm sinh viên mới.
        Trùng student_id được phát hiện bởi ràng buộc UNIQUE và báo DuplicateId.
        """
        descriptor = student.descriptor
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute('''
                    INSERT INTO students (student_id, full_name, email, class_name, enrolled,
                                          face_descriptor, descriptor_dims, face_image_path,
                                          enrollment_date)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ''', (
                    student.id,
                    student.name,
                    student.email,
                    student.class_name,
                    1 if student.enrolled else 0,
                    pack_descriptor(descriptor),
                    len(descriptor) if descriptor is not None else None,
                    student.photo_path,
                    student.enrollment_date.isoformat(),
                ))
                row_id = cursor.lastrowid
        except sqlite3.IntegrityError as exc:
            database_logger.log_error('insert_student', exc)
            raise DuplicateId(f"Student id {student.id} is already enrolled.") from exc
        except sqlite3.Error as exc:
            database_logger.log_error('insert_student', exc)
            raise StorageError(f"Error saving student: {exc}") from exc

        database_logger.log_query('INSERT', 'students')
        return row_id

    def _fetch_students(self, query, params=()):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                rows = cursor.fetchall()
        except sqlite3.Error as exc:
            database_logger.log_error('select_students', exc)
            raise StorageError(f"Error reading students: {exc}") from exc
        database_logger.log_query('SELECT', 'students')
        return [self._row_to_student(row) for row in rows]

    def get_student(self, student_id):
        """Lấy thông tin một sinh viên theo mã"""
        students = self._fetch_students(
            'SELECT * FROM students WHERE student_id = ?', (student_id,)
        )
        return students[0] if students else None

    def get_all_students(self):
        """Lấy tất cả sinh viên theo thứ tự đăng ký"""
        return self._fetch_students('SELECT * FROM students ORDER BY id')

    def get_enrolled_students(self):
        """
        Lấy các sinh viên đã có descriptor, sắp xếp theo student_id.
        Thứ tự cố định này quyết định cách phá hòa khi khoảng cách bằng nhau.
        """
        return self._fetch_students('''
            SELECT * FROM students
            WHERE enrolled = 1 AND face_descriptor IS NOT NULL
            ORDER BY student_id
        ''')

    def count_enrolled(self):
        try:
            with self.get_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    'SELECT COUNT(*) FROM students WHERE enrolled = 1 AND face_descriptor IS NOT NULL'
                )
                return cursor.fetchone()[0]
        except sqlite3.Error as exc:
            database_logger.log_error('count_enrolled', exc)
            raise StorageError(f"Error counting students: {exc}") from exc

    def close(self):
        """Không giữ kết nối lâu dài; mỗi thao tác tự mở và đóng."""
        logger.debug("Database %s closed", self.db_path)

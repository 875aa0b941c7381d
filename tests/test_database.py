"""Tests for the SQLite student store."""

import logging
import threading
from datetime import date

import pytest

from core.errors import DuplicateId
from core.models import Student
from database import _parse_date


def make_student(student_id, name="Alice", descriptor=None, enrolled=True):
    return Student(
        id=student_id,
        name=name,
        email=f"{student_id}@example.edu",
        class_name="CS-101",
        enrolled=enrolled,
        descriptor=descriptor if descriptor is not None else [0.0] * 128,
        enrollment_date=date(2026, 10, 1),
    )


class TestDatabaseManager:

    def test_insert_and_get(self, db):
        """Inserted student reads back with the same fields."""
        descriptor = [i / 1000 for i in range(128)]
        db.insert_student(make_student("S1", descriptor=descriptor))

        student = db.get_student("S1")
        assert student.name == "Alice"
        assert student.class_name == "CS-101"
        assert student.enrolled is True
        assert student.descriptor == descriptor
        assert student.enrollment_date == date(2026, 10, 1)

    def test_missing_student(self, db):
        assert db.get_student("nope") is None

    def test_duplicate_id_rejected(self, db):
        """Second insert with the same id fails and leaves one record."""
        db.insert_student(make_student("S1"))
        with pytest.raises(DuplicateId):
            db.insert_student(make_student("S1", name="Impostor"))

        students = db.get_all_students()
        assert [s.id for s in students] == ["S1"]
        assert students[0].name == "Alice"

    def test_all_students_in_insertion_order(self, db):
        for student_id in ("S3", "S1", "S2"):
            db.insert_student(make_student(student_id))
        assert [s.id for s in db.get_all_students()] == ["S3", "S1", "S2"]

    def test_enrolled_students_ordered_by_id(self, db):
        for student_id in ("S3", "S1", "S2"):
            db.insert_student(make_student(student_id))
        assert [s.id for s in db.get_enrolled_students()] == ["S1", "S2", "S3"]

    def test_enrolled_excludes_records_without_descriptor(self, db):
        db.insert_student(make_student("S1"))
        pending = make_student("S2", enrolled=False)
        pending.descriptor = None
        db.insert_student(pending)

        assert [s.id for s in db.get_enrolled_students()] == ["S1"]
        assert db.count_enrolled() == 1
        assert len(db.get_all_students()) == 2

    def test_concurrent_duplicate_enrollment(self, db):
        """Two racing inserts with one id: exactly one succeeds."""
        barrier = threading.Barrier(2)
        outcomes = []

        def worker(name):
            barrier.wait()
            try:
                db.insert_student(make_student("RACE", name=name))
                outcomes.append("ok")
            except DuplicateId:
                outcomes.append("duplicate")

        threads = [threading.Thread(target=worker, args=(n,)) for n in ("A", "B")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["duplicate", "ok"]
        assert len(db.get_all_students()) == 1

    def test_corrupted_enrollment_date_is_logged(self, db, caplog):
        db.insert_student(make_student("S1"))
        with db.get_connection() as conn:
            conn.execute("UPDATE students SET enrollment_date = 'not-a-date' WHERE student_id = 'S1'")

        with caplog.at_level(logging.WARNING, logger="database"):
            student = db.get_student("S1")

        assert student.enrollment_date == date.today()
        assert any("not-a-date" in record.getMessage() for record in caplog.records)


def test_parse_date_accepts_timestamps():
    assert _parse_date("2026-10-01 08:30:00") == date(2026, 10, 1)
    assert _parse_date(date(2026, 1, 2)) == date(2026, 1, 2)
